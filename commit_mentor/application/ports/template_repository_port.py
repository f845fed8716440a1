from typing import Protocol

from commit_mentor.domain.review_template import ReviewTemplates


class TemplateRepositoryPort(Protocol):
    """리뷰 프롬프트 템플릿 저장소 계약"""

    def get_review_templates(self) -> ReviewTemplates:
        """지시문 템플릿과 파일 섹션 템플릿을 반환합니다."""
        ...
