import logging
from dataclasses import dataclass

from commit_mentor.application.services.commit_aggregator import CommitAggregator
from commit_mentor.application.services.review_request_builder import ReviewRequestBuilder
from commit_mentor.domain.commit import CommitRecord, CommitStats, LanguageStats
from commit_mentor.domain.errors import ReviewRequestError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommitReview:
    """선택된 커밋의 통계와 AI 리뷰 결과"""
    commit: CommitRecord
    stats: CommitStats
    language_stats: dict[str, LanguageStats]
    analysis: str | None  # None이면 리뷰 요청 실패
    error: str = ""


class ReviewCommitUseCase:
    """선택한 커밋 하나에 대해 리뷰를 요청하는 Use Case"""

    def __init__(self, aggregator: CommitAggregator, builder: ReviewRequestBuilder):
        self.aggregator = aggregator
        self.builder = builder

    async def execute(self, index: int) -> CommitReview:
        """
        Args:
            index: CommitAggregator 안의 커밋 인덱스 (0부터)

        Raises:
            IndexError: index가 범위를 벗어났을 때
        """
        commit = self.aggregator.get(index)
        logger.info("📋 ReviewCommitUseCase 실행 시작: %s", commit.id[:12])

        stats = self.aggregator.commit_stats(commit)
        language_stats = self.aggregator.language_stats(commit)

        try:
            analysis = await self.builder.review(commit)
        except ReviewRequestError as e:
            logger.warning("⚠️ 리뷰 요청 실패: %s", str(e))
            return CommitReview(
                commit=commit,
                stats=stats,
                language_stats=language_stats,
                analysis=None,
                error=str(e),
            )

        logger.info("✅ Use Case 실행 완료: 리뷰 길이=%d", len(analysis))
        return CommitReview(
            commit=commit,
            stats=stats,
            language_stats=language_stats,
            analysis=analysis,
        )
