import argparse
import asyncio
import logging
import os
import sys
import traceback
from logging.handlers import RotatingFileHandler
from pathlib import Path

from commit_mentor.adapters.inbound.cli.terminal import TerminalView
from commit_mentor.configuration.container import build_container, clear_container
from commit_mentor.configuration.settings import DEFAULT_LOG_DIR, build_settings
from commit_mentor.domain.errors import CommitTraversalError, RepositoryAccessError

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

logger = logging.getLogger(__name__)


def setup_logging(log_dir: str | Path | None = None) -> logging.Logger:
    """로깅 설정: 파일(INFO)과 stderr(WARNING) 두 곳에 로그 출력"""
    log_dir = Path(log_dir or DEFAULT_LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)

    # 로그 파일 경로
    log_file = log_dir / "commit-mentor.log"

    # 로그 포맷
    formatter = logging.Formatter(
        '%(asctime)s [%(name)s] %(levelname)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # 루트 로거 설정
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)

    # 1. stderr 핸들러 (터미널 UI를 가리지 않도록 WARNING 이상만)
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.setFormatter(formatter)
    root_logger.addHandler(stderr_handler)

    # 2. 파일 핸들러 (로그 파일에 저장, 최대 10MB, 5개 백업)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    return logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="commit-mentor",
        description="Walk a git history and get an AI code review of a selected commit.",
        epilog="Example: commit-mentor ./my-repo $ANTHROPIC_API_KEY",
    )
    parser.add_argument("repository_path", help="Path to the git repository to analyze.")
    parser.add_argument(
        "api_key", nargs="?", default="",
        help="Anthropic API key (defaults to ANTHROPIC_API_KEY).",
    )
    parser.add_argument(
        "--max-commits", "-n", type=int, default=None,
        help="Analyze at most N commits from the branch tip (0 = all).",
    )
    return parser


async def run(args: argparse.Namespace, view: TerminalView) -> int:
    repo_path = os.path.abspath(args.repository_path)
    container = build_container(repo_path, args.api_key, args.max_commits)

    logger.info("=" * 60)
    logger.info("commit-mentor 시작")
    logger.info("환경: %s", container.settings.app_env)
    logger.info("저장소: %s", repo_path)
    logger.info("Template YAML: %s", container.settings.template_yaml_path)

    if not (args.api_key or container.settings.anthropic_api_key):
        view.show_error(
            "Error: Missing API key",
            "pass it as the second argument or set ANTHROPIC_API_KEY",
        )
        return EXIT_FAILURE

    view.show_loading(repo_path)
    try:
        await container.load_commit_history_use_case.execute()
    except RepositoryAccessError as e:
        logger.error("저장소 열기 실패: %s", str(e))
        view.show_error("Error opening repository", str(e), e.path or repo_path)
        return EXIT_FAILURE
    except CommitTraversalError as e:
        logger.error("커밋 순회 실패: %s", str(e))
        view.show_error("Error reading commit history", str(e), repo_path)
        return EXIT_FAILURE

    view.show_commits(container.aggregator)

    selected = view.select_commit(len(container.aggregator))
    if selected is None:
        view.show_no_selection()
        return EXIT_OK

    review = await container.review_commit_use_case.execute(selected)
    view.show_review(review)
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    # 래퍼 스크립트가 넘기는 '--' 구분자 무시
    args = build_parser().parse_args([arg for arg in argv if arg != "--"])

    view = TerminalView()
    try:
        return asyncio.run(run(args, view))
    except KeyboardInterrupt:
        view.console.print()
        return EXIT_INTERRUPTED
    except Exception as e:
        logger.error("=" * 60)
        logger.error("commit-mentor 실행 실패!")
        logger.error("오류 타입: %s", type(e).__name__)
        logger.error("오류 메시지: %s", str(e))
        logger.error("=" * 60)
        traceback.print_exc(file=sys.stderr)
        return EXIT_FAILURE
    finally:
        clear_container()


def cli() -> None:
    setup_logging(build_settings().log_dir)
    sys.exit(main())


if __name__ == "__main__":
    cli()
