import logging

from jinja2 import BaseLoader, Environment, Undefined

from commit_mentor.application.ports.template_repository_port import TemplateRepositoryPort
from commit_mentor.domain.commit import FileChange

logger = logging.getLogger(__name__)


class LoggingUndefined(Undefined):
    """미치환 변수 접근 시 경고 로그를 출력합니다."""
    def __str__(self) -> str:
        logger.warning("템플릿 미치환 변수: %s", self._undefined_name)
        return ""


class TemplateRenderer:
    """Jinja2 기반 프롬프트 템플릿 렌더러 (plain text, autoescape 없음)"""

    def __init__(self, template_repo: TemplateRepositoryPort):
        self._repo = template_repo
        self._env = Environment(
            loader=BaseLoader(),
            undefined=LoggingUndefined,
            autoescape=False,
            keep_trailing_newline=True,
        )

    def render_file_section(self, change: FileChange) -> str:
        """파일 하나의 변경 내용을 프롬프트 섹션으로 렌더링합니다."""
        templates = self._repo.get_review_templates()
        template = self._env.from_string(templates.file_section)
        return template.render(
            file_path=change.file_path,
            language=change.language,
            language_tag=change.language.lower(),
            removed="\n".join(change.deletions),
            added="\n".join(change.additions),
        ).rstrip("\n")

    def render_prompt(self, message: str, changes: str) -> str:
        """지시문 템플릿에 커밋 메시지와 파일 섹션들을 채워 넣습니다."""
        templates = self._repo.get_review_templates()
        template = self._env.from_string(templates.prompt)
        rendered = template.render(message=message, changes=changes)
        logger.info("프롬프트 렌더링 완료: 길이=%d", len(rendered))
        return rendered

    def render_truncation_note(self, omitted: int) -> str:
        templates = self._repo.get_review_templates()
        if not templates.truncation_note:
            return ""
        template = self._env.from_string(templates.truncation_note)
        return template.render(omitted=omitted).rstrip("\n")
