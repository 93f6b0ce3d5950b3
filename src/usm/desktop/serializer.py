"""Render a ``Document`` back to .desktop text."""

from usm.desktop.document import Document, Group, KeyValue, Line


def render_line(line: Line) -> str:
    if isinstance(line, KeyValue):
        raw_key = line.key if line.raw_key is None else line.raw_key
        return f"{raw_key}={line.gap}{line.value}{line.eol}"
    return f"{line.text}{line.eol}"


def render_header(group: Group) -> str:
    header = f"[{group.name}]" if group.header is None else group.header
    return f"{header}{group.eol}"


def serialize(document: Document) -> str:
    """Return the text of ``document``.

    Parsed lines that were not patched come back exactly as read; new lines
    use the canonical ``key=value`` form.
    """
    parts = [document.bom]
    parts.extend(render_line(line) for line in document.preamble)
    for group in document.groups:
        parts.append(render_header(group))
        parts.extend(render_line(line) for line in group.lines)
    return "".join(parts)
