import logging
from typing import Any

import httpx

from commit_mentor.domain.errors import ReviewRequestError

logger = logging.getLogger(__name__)


class AnthropicReviewAdapter:
    """Anthropic Messages API로 코드 리뷰를 요청하는 Outbound Adapter"""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.anthropic.com",
        api_version: str = "2023-06-01",
        model: str = "claude-3-sonnet-20240229",
        max_tokens: int = 1000,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.api_version = api_version
        self.model = model
        self.max_tokens = max_tokens
        self.timeout = timeout
        self._transport = transport

    async def request_review(self, prompt: str) -> Any:
        """프롬프트 하나를 전송하고 디코딩된 응답 JSON을 그대로 반환합니다.

        응답 구조 검증은 호출자가 합니다. 재시도하지 않습니다.
        """
        url = f"{self.base_url}/v1/messages"
        payload = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }

        logger.info("🌐 리뷰 API 호출 시작")
        logger.info("URL: %s", url)
        logger.info("모델: %s, max_tokens=%d", self.model, self.max_tokens)

        try:
            async with self._client() as client:
                response = await client.post(url, json=payload)
                logger.info("HTTP Status: %d", response.status_code)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error("❌ HTTP 오류 발생: %d", e.response.status_code)
            logger.error("응답 본문: %s", e.response.text[:500])
            self._raise_review_error(e)
        except httpx.TimeoutException as e:
            logger.error("❌ 요청 timeout: %s", str(e))
            raise ReviewRequestError(f"리뷰 API 응답 시간 초과 ({self.timeout}초)") from e
        except httpx.NetworkError as e:
            logger.error("❌ 네트워크 오류: %s", str(e))
            raise ReviewRequestError(f"리뷰 API 서버 연결 실패: {self.base_url}") from e
        except ValueError as e:
            logger.error("❌ 응답 JSON 파싱 실패: %s", str(e))
            raise ReviewRequestError("리뷰 API 응답이 JSON 형식이 아닙니다") from e
        except httpx.HTTPError as e:
            logger.error("❌ 예상치 못한 HTTP 오류: %s", str(e))
            raise ReviewRequestError(f"리뷰 API 호출 중 오류 발생: {str(e)}") from e

        logger.info("✅ 리뷰 API 호출 성공")
        return data

    def _client(self) -> httpx.AsyncClient:
        """인증 헤더와 timeout이 설정된 httpx.AsyncClient를 반환합니다."""
        return httpx.AsyncClient(
            headers={
                "x-api-key": self.api_key,
                "anthropic-version": self.api_version,
            },
            timeout=self.timeout,
            transport=self._transport,
        )

    def _raise_review_error(self, e: httpx.HTTPStatusError) -> None:
        """HTTP 상태 코드별 ReviewRequestError를 발생시킵니다."""
        status = e.response.status_code
        if status == 401:
            raise ReviewRequestError("리뷰 API 인증 실패: API 키를 확인하세요") from e
        elif status == 403:
            raise ReviewRequestError("리뷰 API 접근 권한이 없습니다") from e
        elif status == 429:
            raise ReviewRequestError("리뷰 API 요청 한도 초과") from e
        else:
            raise ReviewRequestError(f"리뷰 API 오류: {status}") from e
