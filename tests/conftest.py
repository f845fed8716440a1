import pytest

from commit_mentor.domain.commit import CommitRecord, FileChange
from commit_mentor.domain.language import detect_language


def make_change(path: str, additions=(), deletions=()) -> FileChange:
    return FileChange(
        file_path=path,
        additions=tuple(additions),
        deletions=tuple(deletions),
        language=detect_language(path),
    )


def make_commit(changes=(), message: str = "Add feature\n\nLonger body", commit_id: str = "a" * 40) -> CommitRecord:
    return CommitRecord(
        id=commit_id,
        timestamp=1700000000,
        message=message,
        author="Jane Doe",
        code_changes=tuple(changes),
    )


@pytest.fixture
def sample_commit() -> CommitRecord:
    """a.rs 2줄 추가, b.py 1줄 삭제"""
    return make_commit([
        make_change("src/a.rs", additions=["fn main() {", "}"]),
        make_change("b.py", deletions=["print('bye')"]),
    ])
