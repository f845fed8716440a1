import logging

from commit_mentor.domain.commit import CommitRecord, CommitStats, LanguageStats

logger = logging.getLogger(__name__)


class CommitAggregator:
    """분석된 커밋 목록을 순서대로 보관하고 통계를 계산합니다.

    순회 중에는 append만, 순회 이후에는 조회만 합니다.
    """

    def __init__(self) -> None:
        self._commits: list[CommitRecord] = []

    def add(self, commit: CommitRecord) -> None:
        # 중복 검사는 하지 않음 (순회 드라이버가 커밋당 한 번만 호출)
        self._commits.append(commit)
        logger.info(
            "커밋 추가: %s (%d files)", commit.id[:12], len(commit.code_changes),
        )

    @property
    def commits(self) -> tuple[CommitRecord, ...]:
        return tuple(self._commits)

    def __len__(self) -> int:
        return len(self._commits)

    def get(self, index: int) -> CommitRecord:
        """index 위치의 커밋. 범위를 벗어나면 IndexError."""
        if not 0 <= index < len(self._commits):
            raise IndexError(
                f"커밋 인덱스 범위 초과: {index} (커밋 수: {len(self._commits)})"
            )
        return self._commits[index]

    @staticmethod
    def commit_stats(commit: CommitRecord) -> CommitStats:
        return CommitStats(
            additions=sum(len(change.additions) for change in commit.code_changes),
            deletions=sum(len(change.deletions) for change in commit.code_changes),
            files=len(commit.code_changes),
        )

    @staticmethod
    def language_stats(commit: CommitRecord) -> dict[str, LanguageStats]:
        """언어별 (추가, 삭제) 라인 수. 키 순서는 언어가 처음 등장한 순서."""
        totals: dict[str, tuple[int, int]] = {}
        for change in commit.code_changes:
            adds, dels = totals.get(change.language, (0, 0))
            totals[change.language] = (
                adds + len(change.additions),
                dels + len(change.deletions),
            )
        return {
            language: LanguageStats(additions=adds, deletions=dels)
            for language, (adds, dels) in totals.items()
        }

    @staticmethod
    def language_file_counts(commit: CommitRecord) -> dict[str, int]:
        """언어별 변경 파일 수"""
        counts: dict[str, int] = {}
        for change in commit.code_changes:
            counts[change.language] = counts.get(change.language, 0) + 1
        return counts
