import logging
from datetime import datetime, timezone

from rich.console import Console
from rich.errors import MarkupError
from rich.markup import escape
from rich.prompt import Prompt

from commit_mentor.adapters.inbound.cli.markdown_renderer import create_terminal_markdown
from commit_mentor.application.services.commit_aggregator import CommitAggregator
from commit_mentor.application.use_cases.review_commit import CommitReview
from commit_mentor.domain.commit import CommitRecord, LanguageStats

logger = logging.getLogger(__name__)

_RULE = "─" * 50
_BAR_CELLS = 30
_PREVIEW_CHARS = 50


def format_timestamp(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime("%Y-%m-%d %H:%M")


def message_preview(commit: CommitRecord, limit: int = _PREVIEW_CHARS) -> str:
    """커밋 요약을 limit 글자로 자릅니다 (넘치면 '...')."""
    summary = commit.summary
    if len(summary) > limit:
        return f"{summary[:limit - 3]}..."
    return summary


def language_bar(stats: LanguageStats, cells: int = _BAR_CELLS) -> tuple[int, int, int]:
    """(추가 칸 수, 삭제 칸 수, 추가 비율 %)"""
    ratio = stats.addition_ratio
    add_cells = int(ratio * cells)
    return add_cells, cells - add_cells, int(ratio * 100)


class TerminalView:
    """커밋 목록, 선택 프롬프트, 분석 결과를 터미널에 출력합니다."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()
        self._markdown = create_terminal_markdown()

    def show_loading(self, repo_path: str) -> None:
        self.console.print("[bold cyan]🔍 Analyzing Git Repository...[/]")
        self.console.print(f"[dim]{escape(repo_path)}[/]")
        self.console.print("[dim]📅 Loading commit history...[/]")

    def show_error(self, title: str, detail: str = "", path: str = "") -> None:
        self.console.print(f"[red]{escape(title)}[/]: {escape(detail)}")
        if path:
            self.console.print(f"Path: {escape(path)}")

    def show_commits(self, aggregator: CommitAggregator) -> None:
        self.console.print()
        self.console.print("[bold black on cyan] 🔍 Commit History [/]")
        self.console.print("[dim]Find and analyze your git commits[/]")
        self.console.print()

        for number, commit in enumerate(aggregator.commits, start=1):
            stats = aggregator.commit_stats(commit)
            self.console.print(
                f"[bold green]#{number}[/] [bold white]{escape(message_preview(commit))}[/]"
            )
            self.console.print(
                f"   [dim]👤[/] [blue]{escape(commit.author)}[/] [dim]•[/] "
                f"[yellow]{format_timestamp(commit.timestamp)}[/]"
            )
            self.console.print(
                f"   [dim]📊[/] {stats.files} files  "
                f"[green]+{stats.additions}[/]  [red]-{stats.deletions}[/]"
            )
            self.console.print()

        if not len(aggregator):
            self.console.print("[yellow]No commits found.[/]")

    def select_commit(self, count: int) -> int | None:
        """1부터 시작하는 번호를 입력받아 0부터 시작하는 인덱스를 반환합니다.

        빈 입력이나 EOF는 선택 없음(None)입니다.
        """
        if count == 0:
            return None

        while True:
            try:
                answer = Prompt.ask(
                    f"Select a commit to analyze [dim](1-{count}, Enter to skip)[/]",
                    console=self.console,
                    default="",
                    show_default=False,
                )
            except EOFError:
                return None

            answer = answer.strip().lstrip("#")
            if not answer:
                return None
            if answer.isdigit() and 1 <= int(answer) <= count:
                return int(answer) - 1
            self.console.print(f"[yellow]Please enter a number between 1 and {count}.[/]")

    def show_no_selection(self) -> None:
        self.console.print("[yellow]No commit selected.[/]")

    def show_review(self, review: CommitReview) -> None:
        commit = review.commit
        stats = review.stats

        self.console.print()
        self.console.print("[bold black on cyan] 🔍 Commit Analysis [/]")
        self.console.print()
        self.console.print(f"[bold white underline]  {escape(commit.message)}[/]")
        self.console.print()
        self.console.print("[bold cyan]Commit Details[/]")
        self.console.print(f"[dim]{_RULE}[/]")
        self.console.print(
            f"[dim]👤[/]  [bold blue]{escape(commit.author)}[/]  [dim]•[/]  "
            f"[yellow]{format_timestamp(commit.timestamp)}[/]"
        )
        self.console.print()
        self.console.print(
            f"📁 [cyan]{stats.files} files[/]  "
            f"✨ [green]+{stats.additions}[/]  "
            f"📝 [red]-{stats.deletions}[/]"
        )
        self.console.print()

        if review.language_stats:
            self.console.print("[bold]📊 Language Breakdown[/]")
            self.console.print()
            for language, lang_stats in review.language_stats.items():
                add_cells, del_cells, percentage = language_bar(lang_stats)
                self.console.print(
                    f"[dim]│[/]  [bold]{escape(language):<12}[/] "
                    f"[dim green]{'▇' * add_cells}[/][dim red]{'▇' * del_cells}[/]  "
                    f"[dim]{percentage}% additions[/]"
                )
            self.console.print()

        self.console.print("[bold magenta]🤖 AI Analysis[/]")
        self.console.print(f"[dim]{_RULE}[/]")
        self.console.print()

        if review.analysis is None:
            self.console.print("[yellow]⚠️  AI analysis unavailable[/]")
            self.console.print("[dim]Check your API key and connection[/]")
        else:
            self.show_markdown(review.analysis)

        self.console.print()
        self.console.print(f"[dim]{_RULE}[/]")

    def show_markdown(self, text: str) -> None:
        markup = self._markdown(text)
        try:
            self.console.print(markup.rstrip("\n"))
        except MarkupError as e:
            logger.warning("마크다운 렌더링 실패, 원문 출력: %s", str(e))
            self.console.print(text, markup=False)
