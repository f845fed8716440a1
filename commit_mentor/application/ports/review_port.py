from typing import Any, Protocol


class ReviewPort(Protocol):
    """생성형 텍스트 서비스와의 계약"""

    async def request_review(self, prompt: str) -> Any:
        """프롬프트를 전송하고 디코딩된 응답 payload를 그대로 반환합니다.

        실패 시 ReviewRequestError를 발생시킵니다.
        """
        ...
