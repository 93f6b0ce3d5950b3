"""Parse .desktop text into a ``Document`` without losing any layout."""

from collections.abc import Iterator

from usm.desktop.document import Blank, Comment, Document, Group, KeyValue, Line
from usm.errors import KeyBeforeGroup, MalformedGroupHeader, UnterminatedGroup

_COMMENT_PREFIXES = ("#", ";")
_BOM = "\ufeff"


def iter_lines(text: str) -> Iterator[tuple[str, str]]:
    """Yield ``(body, terminator)`` pairs.

    Only ``\\n`` and ``\\r\\n`` end a line; the final line may have no
    terminator. Form feeds and Unicode line separators stay inside the body.
    """
    pieces = text.split("\n")
    tail = pieces.pop()
    for piece in pieces:
        if piece.endswith("\r"):
            yield piece[:-1], "\r\n"
        else:
            yield piece, "\n"
    if tail:
        yield tail, ""


def parse_header(body: str, line_no: int) -> str:
    """Return the group name of a ``[Name]`` header line."""
    stripped = body.strip()
    if "]" not in stripped:
        raise UnterminatedGroup(f"group header {stripped!r} is missing ']'", line_no)
    if not stripped.endswith("]"):
        raise MalformedGroupHeader(f"unexpected text after group header {stripped!r}", line_no)
    name = stripped[1:-1]
    if not name.strip() or "[" in name or "]" in name:
        raise MalformedGroupHeader(f"invalid group name in {stripped!r}", line_no)
    return name


def parse_line(body: str, eol: str) -> Line:
    """Classify one line that sits inside a group."""
    stripped = body.strip()
    if not stripped:
        return Blank(body, eol)
    if stripped.startswith(_COMMENT_PREFIXES) or "=" not in body:
        return Comment(body, eol)
    raw_key, _, rest = body.partition("=")
    key = raw_key.strip()
    if not key:
        return Comment(body, eol)
    value = rest.lstrip(" \t")
    gap = rest[: len(rest) - len(value)]
    return KeyValue(key=key, value=value, raw_key=raw_key, gap=gap, eol=eol)


def parse(text: str) -> Document:
    """Build a ``Document`` from raw .desktop text.

    Unknown keys are never rejected. A leading byte-order mark is kept on the
    document rather than treated as text. Raises ``KeyBeforeGroup``,
    ``UnterminatedGroup`` or ``MalformedGroupHeader`` on structurally invalid
    input.
    """
    document = Document()
    if text.startswith(_BOM):
        document.bom = _BOM
        text = text[len(_BOM) :]
    current: Group | None = None
    for line_no, (body, eol) in enumerate(iter_lines(text), start=1):
        stripped = body.strip()
        if stripped.startswith("["):
            current = Group(name=parse_header(body, line_no), header=body, eol=eol)
            document.groups.append(current)
            continue
        if current is not None:
            current.lines.append(parse_line(body, eol))
            continue
        if not stripped:
            document.preamble.append(Blank(body, eol))
        elif stripped.startswith(_COMMENT_PREFIXES):
            document.preamble.append(Comment(body, eol))
        else:
            raise KeyBeforeGroup(f"{stripped!r} appears before any group header", line_no)
    return document
