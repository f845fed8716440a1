from typing import AsyncIterator, Protocol

from commit_mentor.domain.commit import CommitMeta
from commit_mentor.domain.diff_event import DiffEvent


class CommitSourcePort(Protocol):
    """버전 관리 저장소에서 커밋과 diff 이벤트를 읽어 오는 계약"""

    async def verify_repository(self) -> None:
        """저장소를 열 수 있는지 확인합니다. 실패 시 RepositoryAccessError."""
        ...

    async def list_commits(self, max_count: int = 0) -> list[CommitMeta]:
        """현재 브랜치 tip부터 시간 역순으로 커밋 목록을 반환합니다."""
        ...

    def diff_events(self, commit: CommitMeta) -> AsyncIterator[DiffEvent]:
        """첫 번째 부모(없으면 빈 트리)와의 diff를 이벤트 스트림으로 반환합니다."""
        ...
