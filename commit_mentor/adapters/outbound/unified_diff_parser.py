"""git unified diff 텍스트를 diff 이벤트 스트림으로 변환합니다.

`git diff --no-renames` 출력만 대상으로 합니다. 파일마다
FileBoundaryEvent 하나를 내보내고, hunk 안의 '+' / '-' 라인을
LineEvent로 내보냅니다. context 라인과 "\\ No newline at end of file"
표식은 무시합니다.
"""

import re
from typing import Iterator

from commit_mentor.domain.diff_event import DiffEvent, FileBoundaryEvent, LineEvent

_DIFF_HEADER = "diff --git "
_OLD_FILE = "--- "
_NEW_FILE = "+++ "
_HUNK = "@@"
_DEV_NULL = "/dev/null"

_C_ESCAPES = {
    "a": "\a", "b": "\b", "f": "\f", "n": "\n", "r": "\r", "t": "\t", "v": "\v",
    '"': '"', "\\": "\\",
}
_ESCAPE_RE = re.compile(r"\\([0-7]{3}|.)")
_QUOTED_RE = re.compile(r'"(?:[^"\\]|\\.)*"')


def _unquote(path: str) -> str:
    """git이 특수문자 경로에 붙이는 C 스타일 따옴표를 제거합니다.

    백슬래시 이스케이프만 해석합니다. 8진수 이스케이프는 UTF-8 바이트로
    모아 디코딩하고 나머지 문자는 그대로 둡니다.
    """
    if not (len(path) >= 2 and path.startswith('"') and path.endswith('"')):
        return path

    body = path[1:-1]
    raw = bytearray()
    pos = 0
    for match in _ESCAPE_RE.finditer(body):
        raw += body[pos:match.start()].encode("utf-8")
        escape = match.group(1)
        if len(escape) == 3:
            raw.append(int(escape, 8))
        else:
            raw += _C_ESCAPES.get(escape, escape).encode("utf-8")
        pos = match.end()
    raw += body[pos:].encode("utf-8")
    return raw.decode("utf-8", "replace")


def _strip_prefix(path: str) -> str:
    path = _unquote(path.rstrip("\t"))
    if path.startswith(("a/", "b/")):
        return path[2:]
    return path


def _header_path(header: str) -> str:
    """'diff --git a/<p> b/<p>' 헤더에서 경로를 추출합니다 (rename 없음 전제)."""
    rest = header[len(_DIFF_HEADER):]
    quoted = _QUOTED_RE.match(rest)
    if quoted and rest[quoted.end():quoted.end() + 1] == " ":
        # "a/..." "b/..." 형태
        return _strip_prefix(rest[quoted.end() + 1:])
    # a/<p> b/<p> 에서 두 경로 길이가 같으므로 절반으로 자름
    half = (len(rest) - 1) // 2
    if half > 2 and rest[half] == " ":
        return _strip_prefix(rest[half + 1:])
    return _strip_prefix(rest.split(" b/", 1)[-1])


class _FileHeader:
    def __init__(self, header_path: str):
        self.header_path = header_path
        self.old_path: str | None = None
        self.new_path: str | None = None
        self.announced = False

    def identity(self) -> str:
        # 새 경로 우선, 삭제된 파일은 이전 경로
        if self.new_path and self.new_path != _DEV_NULL:
            return self.new_path
        if self.old_path and self.old_path != _DEV_NULL:
            return self.old_path
        return self.header_path

    def announce(self) -> FileBoundaryEvent:
        self.announced = True
        return FileBoundaryEvent(self.identity())


def parse_unified_diff(text: str) -> Iterator[DiffEvent]:
    header: _FileHeader | None = None
    in_hunk = False

    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()

    for line in lines:
        if line.startswith(_DIFF_HEADER):
            if header is not None and not header.announced:
                yield header.announce()
            header = _FileHeader(_header_path(line))
            in_hunk = False
            continue

        if header is None:
            continue

        if not in_hunk:
            if line.startswith(_OLD_FILE):
                header.old_path = _strip_prefix(line[len(_OLD_FILE):])
            elif line.startswith(_NEW_FILE):
                header.new_path = _strip_prefix(line[len(_NEW_FILE):])
            elif line.startswith(_HUNK):
                yield header.announce()
                in_hunk = True
            continue

        if line.startswith("+"):
            yield LineEvent("+", line[1:])
        elif line.startswith("-"):
            yield LineEvent("-", line[1:])

    if header is not None and not header.announced:
        yield header.announce()
