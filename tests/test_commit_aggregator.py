import pytest

from commit_mentor.application.services.commit_aggregator import CommitAggregator
from commit_mentor.domain.commit import CommitStats, LanguageStats

from conftest import make_change, make_commit


class TestCommitAggregator:

    @pytest.fixture
    def aggregator(self):
        return CommitAggregator()

    def test_commit_stats(self, sample_commit):
        assert CommitAggregator.commit_stats(sample_commit) == CommitStats(
            additions=2, deletions=1, files=2,
        )

    def test_empty_commit_stats(self):
        commit = make_commit([])

        assert CommitAggregator.commit_stats(commit) == CommitStats(0, 0, 0)
        assert CommitAggregator.language_stats(commit) == {}
        assert CommitAggregator.language_file_counts(commit) == {}

    def test_language_stats_combines_repeated_languages(self):
        commit = make_commit([
            make_change("a.py", additions=["1", "2"], deletions=["3"]),
            make_change("main.rs", additions=["4"]),
            make_change("b.py", additions=["5"], deletions=["6", "7"]),
        ])

        stats = CommitAggregator.language_stats(commit)

        assert stats == {
            "Python": LanguageStats(additions=3, deletions=3),
            "Rust": LanguageStats(additions=1, deletions=0),
        }
        assert list(stats) == ["Python", "Rust"]

    def test_language_stats_independent_of_file_order(self):
        changes = [
            make_change("a.py", additions=["1"]),
            make_change("b.go", deletions=["2", "3"]),
            make_change("c.py", additions=["4"], deletions=["5"]),
        ]

        forward = CommitAggregator.language_stats(make_commit(changes))
        backward = CommitAggregator.language_stats(make_commit(list(reversed(changes))))

        assert dict(sorted(forward.items())) == dict(sorted(backward.items()))

    def test_language_file_counts(self):
        commit = make_commit([
            make_change("a.py"), make_change("b.py"), make_change("README"),
        ])

        assert CommitAggregator.language_file_counts(commit) == {"Python": 2, "Unknown": 1}

    def test_add_keeps_order(self, aggregator):
        first = make_commit(commit_id="1" * 40)
        second = make_commit(commit_id="2" * 40)

        aggregator.add(first)
        aggregator.add(second)

        assert len(aggregator) == 2
        assert aggregator.commits == (first, second)
        assert aggregator.get(1) is second

    def test_add_does_not_deduplicate(self, aggregator, sample_commit):
        aggregator.add(sample_commit)
        aggregator.add(sample_commit)

        assert len(aggregator) == 2

    @pytest.mark.parametrize("index", [-1, 1, 5])
    def test_get_out_of_range_raises(self, aggregator, sample_commit, index):
        aggregator.add(sample_commit)

        with pytest.raises(IndexError):
            aggregator.get(index)

    def test_get_on_empty_raises(self, aggregator):
        with pytest.raises(IndexError):
            aggregator.get(0)


class TestLanguageStats:

    def test_addition_ratio(self):
        assert LanguageStats(additions=3, deletions=1).addition_ratio == 0.75

    def test_addition_ratio_without_lines(self):
        assert LanguageStats(additions=0, deletions=0).addition_ratio == 0.0
