import logging
from typing import Any

from commit_mentor.application.ports.review_port import ReviewPort
from commit_mentor.application.services.template_renderer import TemplateRenderer
from commit_mentor.domain.commit import CommitRecord

logger = logging.getLogger(__name__)

FALLBACK_INSIGHT = "Unable to get AI insights"


class ReviewRequestBuilder:
    """커밋 하나를 리뷰 요청 프롬프트로 만들고, 응답에서 리뷰 텍스트를 꺼냅니다.

    Args:
        renderer: 프롬프트 템플릿 렌더러
        review_port: 생성형 텍스트 서비스 adapter
        max_changes_chars: 파일 섹션 전체의 최대 문자수 (0이면 제한 없음)
    """

    def __init__(
        self,
        renderer: TemplateRenderer,
        review_port: ReviewPort,
        max_changes_chars: int = 0,
    ):
        self._renderer = renderer
        self._review_port = review_port
        self._max_changes_chars = max_changes_chars

    def build_prompt(self, commit: CommitRecord) -> str:
        sections = [
            self._renderer.render_file_section(change)
            for change in commit.code_changes
        ]
        kept = self._bound_sections(sections)
        changes = "\n\n".join(kept)

        omitted = len(sections) - len(kept)
        if omitted:
            logger.warning(
                "프롬프트 크기 제한으로 파일 %d개 생략: commit=%s", omitted, commit.id[:12],
            )
            note = self._renderer.render_truncation_note(omitted)
            if note:
                changes = f"{changes}\n\n{note}" if changes else note

        return self._renderer.render_prompt(commit.message, changes)

    async def send(self, prompt: str) -> Any:
        """프롬프트를 한 번 전송합니다. 재시도하지 않습니다."""
        logger.info("리뷰 요청 전송: 프롬프트 길이=%d", len(prompt))
        return await self._review_port.request_review(prompt)

    @staticmethod
    def parse_reply(payload: Any) -> str:
        """응답 payload의 content[0].text를 반환합니다.

        필드가 없거나 문자열이 아니면 FALLBACK_INSIGHT를 반환합니다.
        """
        content = payload.get("content") if isinstance(payload, dict) else None
        first = content[0] if isinstance(content, list) and content else None
        text = first.get("text") if isinstance(first, dict) else None
        if not isinstance(text, str):
            logger.warning("응답에 리뷰 텍스트 없음: fallback 메시지 사용")
            return FALLBACK_INSIGHT
        return text

    async def review(self, commit: CommitRecord) -> str:
        prompt = self.build_prompt(commit)
        payload = await self.send(prompt)
        return self.parse_reply(payload)

    def _bound_sections(self, sections: list[str]) -> list[str]:
        if self._max_changes_chars <= 0:
            return sections

        kept: list[str] = []
        total = 0
        for section in sections:
            # 구분자 "\n\n" 포함 길이
            size = len(section) + (2 if kept else 0)
            if total + size > self._max_changes_chars:
                break
            kept.append(section)
            total += size
        return kept
