import os
import shutil
import subprocess

import pytest

from commit_mentor.adapters.outbound.git_local_adapter import GitLocalAdapter
from commit_mentor.application.services.diff_event_router import DiffEventRouter
from commit_mentor.domain.commit import CommitMeta
from commit_mentor.domain.errors import CommitTraversalError, RepositoryAccessError

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git 실행 파일 없음")


def git(repo, *args, timestamp=1700000000):
    env = {
        **os.environ,
        "GIT_AUTHOR_NAME": "Jane Doe",
        "GIT_AUTHOR_EMAIL": "jane@example.com",
        "GIT_COMMITTER_NAME": "Jane Doe",
        "GIT_COMMITTER_EMAIL": "jane@example.com",
        "GIT_AUTHOR_DATE": f"{timestamp} +0000",
        "GIT_COMMITTER_DATE": f"{timestamp} +0000",
        "GIT_CONFIG_GLOBAL": os.devnull,
        "GIT_CONFIG_NOSYSTEM": "1",
    }
    subprocess.run(["git", *args], cwd=repo, env=env, check=True, capture_output=True)


@pytest.fixture
def repo(tmp_path):
    """커밋 3개짜리 저장소: 루트 커밋, 수정 커밋, 삭제 커밋"""
    git(tmp_path, "init", "-q")

    (tmp_path / "a.rs").write_text("fn a() {}\n")
    (tmp_path / "b.py").write_text("import os\nprint(os.name)\n")
    git(tmp_path, "add", ".")
    git(tmp_path, "commit", "-q", "-m", "Initial commit", timestamp=1700000000)

    (tmp_path / "a.rs").write_text("fn a() {}\nfn b() {}\nfn c() {}\n")
    (tmp_path / "b.py").write_text("import os\n")
    git(tmp_path, "add", ".")
    git(tmp_path, "commit", "-q", "-m", "Grow rust, shrink python\n\nDetails here", timestamp=1700000100)

    git(tmp_path, "rm", "-q", "b.py")
    git(tmp_path, "commit", "-q", "-m", "Remove python", timestamp=1700000200)
    return tmp_path


async def collect(adapter: GitLocalAdapter, commit: CommitMeta):
    return await DiffEventRouter().route_async(adapter.diff_events(commit))


class TestGitLocalAdapter:

    @pytest.mark.asyncio
    async def test_list_commits_newest_first(self, repo):
        commits = await GitLocalAdapter(str(repo)).list_commits()

        assert [c.message for c in commits] == [
            "Remove python",
            "Grow rust, shrink python\n\nDetails here",
            "Initial commit",
        ]
        assert [c.timestamp for c in commits] == [1700000200, 1700000100, 1700000000]
        assert all(c.author == "Jane Doe" for c in commits)
        assert commits[-1].parent_ids == ()
        assert commits[0].first_parent == commits[1].id

    @pytest.mark.asyncio
    async def test_list_commits_max_count(self, repo):
        commits = await GitLocalAdapter(str(repo)).list_commits(max_count=1)

        assert len(commits) == 1
        assert commits[0].message == "Remove python"

    @pytest.mark.asyncio
    async def test_root_commit_with_empty_message(self, tmp_path):
        git(tmp_path, "init", "-q")
        (tmp_path / "a.go").write_text("package a\n")
        git(tmp_path, "add", ".")
        git(tmp_path, "commit", "-q", "--allow-empty-message", "-m", "", timestamp=1700000000)
        (tmp_path / "a.go").write_text("package a\n\nfunc A() {}\n")
        git(tmp_path, "commit", "-q", "-am", "Add A", timestamp=1700000100)

        commits = await GitLocalAdapter(str(tmp_path)).list_commits()

        assert [c.message for c in commits] == ["Add A", ""]
        assert [c.author for c in commits] == ["Jane Doe", "Jane Doe"]
        assert commits[1].parent_ids == ()
        assert commits[1].timestamp == 1700000000

    @pytest.mark.asyncio
    async def test_root_commit_diffs_against_empty_tree(self, repo):
        adapter = GitLocalAdapter(str(repo))
        root = (await adapter.list_commits())[-1]

        changes = await collect(adapter, root)

        assert [(c.file_path, c.language, c.additions, c.deletions) for c in changes] == [
            ("a.rs", "Rust", ("fn a() {}",), ()),
            ("b.py", "Python", ("import os", "print(os.name)"), ()),
        ]

    @pytest.mark.asyncio
    async def test_modification_diffs_against_first_parent(self, repo):
        adapter = GitLocalAdapter(str(repo))
        middle = (await adapter.list_commits())[1]

        changes = await collect(adapter, middle)

        assert [(c.file_path, len(c.additions), len(c.deletions)) for c in changes] == [
            ("a.rs", 2, 0),
            ("b.py", 0, 1),
        ]
        assert changes[0].additions == ("fn b() {}", "fn c() {}")
        assert changes[1].deletions == ("print(os.name)",)

    @pytest.mark.asyncio
    async def test_deleted_file_keeps_its_path(self, repo):
        adapter = GitLocalAdapter(str(repo))
        latest = (await adapter.list_commits())[0]

        (change,) = await collect(adapter, latest)

        assert change.file_path == "b.py"
        assert change.additions == ()
        assert change.deletions == ("import os",)

    @pytest.mark.asyncio
    async def test_empty_commit_has_no_changes(self, repo):
        git(repo, "commit", "-q", "--allow-empty", "-m", "Nothing", timestamp=1700000300)
        adapter = GitLocalAdapter(str(repo))
        latest = (await adapter.list_commits())[0]

        assert await collect(adapter, latest) == ()

    @pytest.mark.asyncio
    async def test_repository_without_commits(self, tmp_path):
        git(tmp_path, "init", "-q")
        adapter = GitLocalAdapter(str(tmp_path))

        await adapter.verify_repository()
        assert await adapter.list_commits() == []

    @pytest.mark.asyncio
    async def test_missing_path(self, tmp_path):
        missing = tmp_path / "nope"

        with pytest.raises(RepositoryAccessError) as excinfo:
            await GitLocalAdapter(str(missing)).verify_repository()

        assert excinfo.value.path == str(missing)

    @pytest.mark.asyncio
    async def test_not_a_repository(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path.parent))

        with pytest.raises(RepositoryAccessError):
            await GitLocalAdapter(str(tmp_path)).verify_repository()

    @pytest.mark.asyncio
    async def test_unknown_commit_raises_traversal_error(self, repo):
        adapter = GitLocalAdapter(str(repo))
        bogus = CommitMeta(id="f" * 40, timestamp=0, message="", author="x")

        with pytest.raises(CommitTraversalError):
            await collect(adapter, bogus)
