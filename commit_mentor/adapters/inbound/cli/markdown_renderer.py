import html
from typing import Any

import mistune
from rich.markup import escape

_ITEM = "\x00"
_RULE_WIDTH = 50


class _TerminalRenderer(mistune.HTMLRenderer):
    """rich 콘솔 마크업을 생성하는 마크다운 렌더러.

    heading은 magenta, 굵게는 yellow, 기울임은 blue,
    코드 블록은 green, 인라인 코드는 cyan으로 표시합니다.
    """

    def text(self, text: str) -> str:
        return escape(text)

    def emphasis(self, text: str) -> str:
        return f"[italic blue]{text}[/]"

    def strong(self, text: str) -> str:
        return f"[bold yellow]{text}[/]"

    def strikethrough(self, text: str) -> str:
        return f"[strike]{text}[/]"

    def link(self, text: str, url: str, title=None) -> str:
        return f"[underline]{text}[/] [dim]({escape(url)})[/]"

    def image(self, text: str, url: str, title=None) -> str:
        return f"[dim]image: {text} ({escape(url)})[/]"

    def codespan(self, text: str) -> str:
        return f"[cyan]{escape(html.unescape(text))}[/]"

    def linebreak(self) -> str:
        return "\n"

    def softbreak(self) -> str:
        return "\n"

    def inline_html(self, html: str) -> str:
        return escape(html)

    def paragraph(self, text: str) -> str:
        return f"{text}\n\n"

    def heading(self, text: str, level: int, **attrs: Any) -> str:
        if level <= 2:
            return f"[bold magenta underline]{text}[/]\n\n"
        return f"[bold magenta]{text}[/]\n\n"

    def blank_line(self) -> str:
        return ""

    def thematic_break(self) -> str:
        return f"[dim]{'─' * _RULE_WIDTH}[/]\n\n"

    def block_text(self, text: str) -> str:
        return text

    def block_code(self, code: str, info=None, **attrs: Any) -> str:
        body = "\n".join(f"    {line}" for line in code.rstrip("\n").split("\n"))
        return f"[green]{escape(body)}[/]\n\n"

    def block_quote(self, text: str) -> str:
        lines = text.rstrip("\n").split("\n")
        return "\n".join(f"[dim]│[/] {line}" for line in lines) + "\n\n"

    def block_html(self, html: str) -> str:
        return f"{escape(html)}\n\n"

    def block_error(self, text: str) -> str:
        return text

    def list(self, text: str, ordered: bool, **attrs: Any) -> str:
        depth = attrs.get("depth", 0)
        start = attrs.get("start") or 1
        items = [item.strip("\n") for item in text.split(_ITEM) if item.strip()]

        lines = []
        for number, item in enumerate(items, start=start):
            bullet = f"{number}." if ordered else "•"
            lines.append(f"{'  ' * depth}{bullet} {item}")
        rendered = "\n".join(lines) + "\n"
        # 중첩 목록은 바깥 항목 다음 줄에 이어 붙음
        return f"\n{rendered}" if depth else f"{rendered}\n"

    def list_item(self, text: str, **attrs: Any) -> str:
        return f"{_ITEM}{text}"


def create_terminal_markdown():
    """마크다운 문자열을 rich 마크업 문자열로 바꾸는 함수를 반환합니다."""
    return mistune.create_markdown(
        renderer=_TerminalRenderer(escape=False),
        plugins=["strikethrough"],
    )
