"""Read-only detail view of the highlighted entry."""

from rich.markup import escape
from textual.widgets import Static

from usm.models import Entry


class DetailPanel(Static):
    """Shows every managed field of one entry, plus whether it can be edited."""

    def show(self, entry: Entry | None, editable: bool = False) -> None:
        if entry is None:
            self.update("[dim]No entry selected[/]")
            return
        lines = [
            f"[b]{escape(entry.name)}[/]",
            "",
            f"Command  {escape(entry.command) or '-'}",
            f"Source   {entry.source.label}",
            f"Status   {entry.status_label}",
            f"File     {escape(str(entry.path)) if entry.path else '-'}",
        ]
        if entry.comment:
            lines.append(f"Comment  {escape(entry.comment)}")
        if entry.icon:
            lines.append(f"Icon     {escape(entry.icon)}")
        if entry.localized_names:
            lines.append("")
            lines.append("Localized names")
            for locale, name in sorted(entry.localized_names.items()):
                lines.append(f"  {escape(locale)}: {escape(name)}")
        lines.append("")
        lines.append("[green]editable[/]" if editable else "[yellow]read-only[/]")
        self.update("\n".join(lines))
