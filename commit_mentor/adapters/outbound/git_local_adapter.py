import asyncio
import logging
import os
from dataclasses import dataclass
from typing import AsyncIterator

from commit_mentor.adapters.outbound.unified_diff_parser import parse_unified_diff
from commit_mentor.domain.commit import CommitMeta
from commit_mentor.domain.diff_event import DiffEvent
from commit_mentor.domain.errors import CommitTraversalError, RepositoryAccessError

logger = logging.getLogger(__name__)

# 루트 커밋 diff 기준이 되는 빈 트리
EMPTY_TREE_SHA = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"

_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = _FIELD_SEP.join(["%H", "%P", "%at", "%an", "%B"]) + _RECORD_SEP


@dataclass(frozen=True)
class _GitResult:
    """git 명령 실행 결과"""
    stdout: str
    stderr: str
    returncode: int


class GitLocalAdapter:
    """로컬 git 명령으로 커밋 목록과 커밋별 diff 이벤트를 수집하는 Adapter"""

    # git 명령 실행 timeout (초)
    _GIT_TIMEOUT_SECONDS = 60

    def __init__(self, working_dir: str = ".", timeout_seconds: int | None = None):
        """
        Args:
            working_dir: git 명령을 실행할 저장소 경로 (기본값: 현재 디렉토리)
            timeout_seconds: 명령별 timeout (기본값: _GIT_TIMEOUT_SECONDS)
        """
        self.working_dir = working_dir
        self.timeout_seconds = timeout_seconds or self._GIT_TIMEOUT_SECONDS

    async def _run_git(self, *args: str, strip: bool = True) -> _GitResult:
        """git 명령을 실행하고 결과를 반환합니다.

        Args:
            *args: git 하위 명령과 인자들 (예: "log", "--oneline")
            strip: stdout 앞뒤 공백 제거 여부 (diff 출력은 False)

        Returns:
            _GitResult: stdout/stderr 문자열과 returncode

        Raises:
            RepositoryAccessError: git 실행 파일이 없을 때
            RuntimeError: timeout 초과 시
        """
        try:
            proc = await asyncio.create_subprocess_exec(
                "git", "-c", "core.quotePath=false", *args,
                cwd=self.working_dir,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise RepositoryAccessError("git이 설치되어 있지 않습니다", self.working_dir) from e

        try:
            stdout, stderr = await asyncio.wait_for(
                proc.communicate(), timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            raise RuntimeError(
                f"git 명령 timeout ({self.timeout_seconds}초 초과): git {' '.join(args)}"
            )

        text = stdout.decode("utf-8", errors="replace")
        return _GitResult(
            stdout=text.strip() if strip else text,
            stderr=stderr.decode("utf-8", errors="replace").strip(),
            returncode=proc.returncode,
        )

    async def verify_repository(self) -> None:
        """working_dir가 git 작업 트리인지 확인합니다."""
        if not os.path.isdir(self.working_dir):
            raise RepositoryAccessError("경로가 존재하지 않습니다", self.working_dir)

        result = await self._run_git("rev-parse", "--is-inside-work-tree")
        if result.returncode != 0 or result.stdout != "true":
            logger.error("git 저장소 확인 실패: %s", result.stderr)
            raise RepositoryAccessError(
                f"Git 저장소를 열 수 없습니다: {result.stderr or result.stdout}",
                self.working_dir,
            )
        logger.info("git 저장소 확인: %s", self.working_dir)

    async def list_commits(self, max_count: int = 0) -> list[CommitMeta]:
        """HEAD부터 시간 역순으로 커밋 메타 정보를 수집합니다.

        Args:
            max_count: 최대 커밋 수 (0이면 전체)
        """
        head = await self._run_git("rev-parse", "--verify", "--quiet", "HEAD")
        if head.returncode != 0:
            logger.warning("커밋이 없는 저장소: %s", self.working_dir)
            return []

        args = ["log", "--date-order", f"--format={_LOG_FORMAT}"]
        if max_count > 0:
            args.append(f"--max-count={max_count}")
        args.append("HEAD")

        # \x1e, \x1f도 str.strip() 대상이므로 구분자가 잘리지 않도록 원본 그대로 받음
        result = await self._run_git(*args, strip=False)
        if result.returncode != 0:
            raise RepositoryAccessError(
                f"커밋 목록 조회 실패: {result.stderr}", self.working_dir,
            )

        commits = [
            self._parse_log_record(record)
            for record in result.stdout.split(_RECORD_SEP)
            if record.strip("\n")
        ]
        logger.info("커밋 목록 수집 완료: %d건", len(commits))
        return commits

    async def diff_events(self, commit: CommitMeta) -> AsyncIterator[DiffEvent]:
        """커밋과 첫 번째 부모(루트 커밋은 빈 트리) 사이 diff를 이벤트로 반환합니다."""
        base = commit.first_parent or EMPTY_TREE_SHA
        result = await self._run_git(
            "diff", "--no-color", "--no-ext-diff", "--no-textconv", "--no-renames",
            "--src-prefix=a/", "--dst-prefix=b/",
            base, commit.id,
            strip=False,
        )
        if result.returncode != 0:
            raise CommitTraversalError(commit.id, f"git diff 실패: {result.stderr}")

        logger.info("diff 수집: commit=%s, %d chars", commit.id[:12], len(result.stdout))
        for event in parse_unified_diff(result.stdout):
            yield event

    @staticmethod
    def _parse_log_record(record: str) -> CommitMeta:
        fields = record.lstrip("\n").split(_FIELD_SEP, 4)
        if len(fields) != 5:
            raise RepositoryAccessError(f"git log 레코드 파싱 실패: {record[:80]!r}")
        sha, parents, timestamp, author, message = fields
        return CommitMeta(
            id=sha,
            timestamp=int(timestamp),
            message=message.rstrip("\n"),
            author=author or "Unknown",
            parent_ids=tuple(parents.split()),
        )
