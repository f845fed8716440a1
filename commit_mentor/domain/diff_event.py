from dataclasses import dataclass


@dataclass(frozen=True)
class FileBoundaryEvent:
    """이후의 라인 이벤트가 속할 파일을 알리는 이벤트.

    path가 비어 있으면 (None 또는 "") 경로를 알 수 없는 파일입니다.
    """
    path: str | None


@dataclass(frozen=True)
class LineEvent:
    """현재 파일의 한 라인 (origin: '+' 추가, '-' 삭제)"""
    origin: str
    content: str

    @property
    def is_addition(self) -> bool:
        return self.origin == "+"


DiffEvent = FileBoundaryEvent | LineEvent
