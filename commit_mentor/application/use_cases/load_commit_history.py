import logging

from commit_mentor.application.ports.commit_source_port import CommitSourcePort
from commit_mentor.application.services.commit_aggregator import CommitAggregator
from commit_mentor.application.services.diff_event_router import DiffEventRouter
from commit_mentor.domain.commit import CommitMeta, CommitRecord
from commit_mentor.domain.errors import CommitTraversalError

logger = logging.getLogger(__name__)


class LoadCommitHistoryUseCase:
    """저장소의 커밋을 순서대로 순회하여 CommitAggregator를 채우는 Use Case"""

    def __init__(
        self,
        commit_source: CommitSourcePort,
        aggregator: CommitAggregator,
        max_commits: int = 0,
    ):
        self.commit_source = commit_source
        self.aggregator = aggregator
        self.max_commits = max_commits

    async def execute(self) -> int:
        """
        커밋 히스토리를 분석합니다.

        Returns:
            추가된 커밋 수

        Raises:
            RepositoryAccessError: 저장소를 열 수 없을 때
            CommitTraversalError: 커밋 하나의 diff 순회가 실패했을 때 (실행 중단)
        """
        logger.info("📋 LoadCommitHistoryUseCase 실행 시작")

        await self.commit_source.verify_repository()
        commits = await self.commit_source.list_commits(self.max_commits)

        for meta in commits:
            record = await self._analyze(meta)
            self.aggregator.add(record)

        logger.info("✅ Use Case 실행 완료: %d개 커밋 분석", len(commits))
        return len(commits)

    async def _analyze(self, meta: CommitMeta) -> CommitRecord:
        # 실패한 커밋의 부분 결과는 버림
        router = DiffEventRouter()
        try:
            changes = await router.route_async(self.commit_source.diff_events(meta))
        except CommitTraversalError:
            raise
        except Exception as e:
            logger.error("❌ 커밋 diff 순회 실패: %s (%s)", meta.id[:12], str(e))
            raise CommitTraversalError(meta.id, str(e)) from e

        return CommitRecord(
            id=meta.id,
            timestamp=meta.timestamp,
            message=meta.message,
            author=meta.author,
            code_changes=changes,
        )
