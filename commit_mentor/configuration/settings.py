import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

_PACKAGE_ROOT = Path(__file__).parent.parent
DEFAULT_TEMPLATE_PATH = _PACKAGE_ROOT / "templates" / "review_templates.yaml"
DEFAULT_LOG_DIR = Path.home() / ".commit-mentor" / "logs"


def _load_env() -> None:
    app_env = os.getenv("APP_ENV", "local")
    # 실행 디렉토리의 .env.{APP_ENV}
    env_file = Path.cwd() / f".env.{app_env}"
    load_dotenv(env_file)


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"환경 변수 {name}는 정수여야 합니다: {raw!r}")


@dataclass(frozen=True)
class Settings:
    app_env: str
    anthropic_api_key: str
    anthropic_base_url: str
    anthropic_version: str
    review_model: str
    review_max_tokens: int
    review_timeout_seconds: int
    git_timeout_seconds: int
    max_commits: int  # 0이면 전체 커밋
    max_prompt_chars: int  # 파일 섹션 전체 최대 문자수, 0이면 제한 없음
    template_yaml_path: str
    log_dir: str


def build_settings() -> Settings:
    _load_env()

    return Settings(
        app_env=os.getenv("APP_ENV", "local"),
        anthropic_api_key=os.getenv("ANTHROPIC_API_KEY", ""),
        anthropic_base_url=os.getenv("ANTHROPIC_BASE_URL", "https://api.anthropic.com"),
        anthropic_version=os.getenv("ANTHROPIC_VERSION", "2023-06-01"),
        review_model=os.getenv("REVIEW_MODEL", "claude-3-sonnet-20240229"),
        review_max_tokens=_int_env("REVIEW_MAX_TOKENS", 1000),
        review_timeout_seconds=_int_env("REVIEW_TIMEOUT_SECONDS", 60),
        git_timeout_seconds=_int_env("GIT_TIMEOUT_SECONDS", 60),
        max_commits=_int_env("MAX_COMMITS", 0),
        max_prompt_chars=_int_env("MAX_PROMPT_CHARS", 60000),
        template_yaml_path=os.getenv("TEMPLATE_YAML_PATH", str(DEFAULT_TEMPLATE_PATH)),
        log_dir=os.getenv("LOG_DIR", str(DEFAULT_LOG_DIR)),
    )
