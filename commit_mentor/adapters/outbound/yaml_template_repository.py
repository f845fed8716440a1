import logging
from pathlib import Path

import yaml

from commit_mentor.domain.review_template import ReviewTemplates

logger = logging.getLogger(__name__)

_REQUIRED_KEYS = ("prompt", "file_section")


class YamlTemplateRepository:
    """YAML 파일 기반 리뷰 프롬프트 템플릿 저장소 (mtime 캐시)"""

    def __init__(self, yaml_path: str | Path):
        self._path = Path(yaml_path)
        self._cache: dict | None = None
        self._cache_mtime: float = 0.0

    def _ensure_loaded(self) -> dict:
        """파일이 변경되었으면 다시 로드합니다."""
        try:
            current_mtime = self._path.stat().st_mtime
        except FileNotFoundError:
            raise FileNotFoundError(
                f"템플릿 YAML 파일을 찾을 수 없습니다: {self._path}"
            )

        if self._cache is None or current_mtime > self._cache_mtime:
            logger.info("YAML 템플릿 로드: %s", self._path)
            with open(self._path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                raise ValueError(f"템플릿 YAML 형식 오류 (mapping 아님): {self._path}")
            self._cache = data
            self._cache_mtime = current_mtime
            logger.info("YAML 템플릿 로드 완료: %s", list(self._cache.keys()))

        return self._cache

    def get_review_templates(self) -> ReviewTemplates:
        data = self._ensure_loaded()
        missing = [key for key in _REQUIRED_KEYS if not data.get(key)]
        if missing:
            raise ValueError(
                f"템플릿 YAML에 필수 키 누락: {missing} ({self._path})"
            )
        return ReviewTemplates(
            prompt=data["prompt"],
            file_section=data["file_section"],
            truncation_note=data.get("truncation_note", ""),
        )
