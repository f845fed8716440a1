from dataclasses import dataclass


@dataclass(frozen=True)
class ReviewTemplates:
    """리뷰 요청 프롬프트 템플릿 (Jinja2 문자열)"""
    prompt: str
    file_section: str
    truncation_note: str = ""
