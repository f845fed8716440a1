import logging
from collections import deque
from typing import AsyncIterable, Iterable

from commit_mentor.domain.commit import FileChange
from commit_mentor.domain.diff_event import DiffEvent, FileBoundaryEvent, LineEvent
from commit_mentor.domain.language import detect_language

logger = logging.getLogger(__name__)


class DiffEventRouter:
    """diff 이벤트 스트림을 파일별 FileChange 목록으로 묶는 라우터.

    현재 파일 경로 커서 하나와 (is_addition, content) FIFO 버퍼를 유지하고,
    파일 경계 이벤트와 스트림 종료 시점에만 버퍼 전체를 비워 직전 파일의
    레코드로 확정합니다. 라우터 하나는 커밋 하나에만 사용합니다.
    """

    def __init__(self) -> None:
        self._current_path = ""
        self._pending: deque[tuple[bool, str]] = deque()
        self._changes: dict[str, FileChange] = {}
        self._finished = False

    def feed(self, event: DiffEvent) -> None:
        if self._finished:
            raise RuntimeError("이미 종료된 라우터에 이벤트를 전달할 수 없습니다")
        if isinstance(event, FileBoundaryEvent):
            self.on_file_boundary(event.path)
        elif isinstance(event, LineEvent):
            self.on_line(event.is_addition, event.content)
        else:
            raise TypeError(f"알 수 없는 diff 이벤트: {event!r}")

    def on_file_boundary(self, path: str | None) -> None:
        self._flush()
        self._current_path = path or ""
        if not self._current_path:
            logger.warning("경로 없는 파일 경계 이벤트: 이후 라인은 무시됩니다")

    def on_line(self, is_addition: bool, content: str) -> None:
        self._pending.append((is_addition, content))

    def finish(self) -> tuple[FileChange, ...]:
        """마지막 파일을 확정하고 파일 경계 도착 순서대로 결과를 반환합니다."""
        if not self._finished:
            self._flush()
            self._finished = True
        return tuple(self._changes.values())

    def route(self, events: Iterable[DiffEvent]) -> tuple[FileChange, ...]:
        for event in events:
            self.feed(event)
        return self.finish()

    async def route_async(self, events: AsyncIterable[DiffEvent]) -> tuple[FileChange, ...]:
        async for event in events:
            self.feed(event)
        return self.finish()

    def _flush(self) -> None:
        drained = list(self._pending)
        self._pending.clear()

        if not self._current_path:
            if drained:
                logger.warning("경로 없는 파일의 라인 %d개 폐기", len(drained))
            return

        additions = [content for is_addition, content in drained if is_addition]
        deletions = [content for is_addition, content in drained if not is_addition]

        # 같은 경로가 다시 나오면 기존 레코드에 이어 붙임 (파일당 레코드 하나)
        existing = self._changes.get(self._current_path)
        if existing is not None:
            logger.info("중복 파일 경계 병합: %s", self._current_path)
            additions = [*existing.additions, *additions]
            deletions = [*existing.deletions, *deletions]

        self._changes[self._current_path] = FileChange(
            file_path=self._current_path,
            additions=tuple(additions),
            deletions=tuple(deletions),
            language=detect_language(self._current_path),
        )
