from dataclasses import dataclass, field


@dataclass(frozen=True)
class FileChange:
    """커밋 안에서 한 파일에 대한 추가/삭제 라인 묶음"""
    file_path: str
    additions: tuple[str, ...] = ()
    deletions: tuple[str, ...] = ()
    language: str = "Unknown"


@dataclass(frozen=True)
class CommitMeta:
    """git log에서 읽어 온 커밋 메타 정보 (diff 제외)"""
    id: str
    timestamp: int  # author time (epoch seconds)
    message: str
    author: str
    parent_ids: tuple[str, ...] = ()

    @property
    def first_parent(self) -> str | None:
        return self.parent_ids[0] if self.parent_ids else None


@dataclass(frozen=True)
class CommitRecord:
    """분석이 끝난 커밋 엔티티"""
    id: str
    timestamp: int
    message: str
    author: str
    code_changes: tuple[FileChange, ...] = field(default_factory=tuple)

    @property
    def summary(self) -> str:
        """커밋 메시지의 첫 줄"""
        lines = self.message.splitlines()
        return lines[0].strip() if lines else ""


@dataclass(frozen=True)
class CommitStats:
    additions: int
    deletions: int
    files: int


@dataclass(frozen=True)
class LanguageStats:
    additions: int
    deletions: int

    @property
    def addition_ratio(self) -> float:
        """변경 라인 중 추가 비율 (변경 라인이 없으면 0.0)"""
        total = self.additions + self.deletions
        return self.additions / total if total else 0.0
