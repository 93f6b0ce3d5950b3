"""Autostart entry table widget."""

from collections.abc import Sequence

from rich.text import Text
from textual.binding import Binding
from textual.events import Click
from textual.message import Message
from textual.widgets import DataTable
from textual.widgets.data_table import RowDoesNotExist

from usm.constants import TABLE_COLUMNS
from usm.models import Entry, Source

_SYSTEM_BADGE = Text("system", style="dim")
_USER_BADGE = Text("user", style="bold cyan")
_ENABLED = Text("enabled", style="green")
_DISABLED = Text("disabled", style="red")


def row_key(entry: Entry) -> str:
    """Stable row key for an entry: its file path."""
    return str(entry.path) if entry.path is not None else entry.name


class EntryTable(DataTable):
    """Scrollable table of autostart entries with vim-style navigation.

    Rows are keyed by the entry's file path, so the cursor can be put back on
    the same entry after the list is re-derived from a fresh load.

    Double-clicking a row posts ``EntryTable.RowDoubleClicked`` so the app
    can open the edit modal without any keyboard interaction.
    """

    class RowDoubleClicked(Message):
        """Posted when the user double-clicks a row."""

    BINDINGS = [
        Binding("j", "cursor_down", show=False),
        Binding("k", "cursor_up", show=False),
        Binding("enter", "app.edit_entry", show=False),
    ]

    def action_cursor_down(self) -> None:
        """Move down one row, wrapping from the last row to the first."""
        if self.row_count == 0:
            return
        if self.cursor_row == self.row_count - 1:
            self.move_cursor(row=0)
        else:
            super().action_cursor_down()

    def action_cursor_up(self) -> None:
        """Move up one row, wrapping from the first row to the last."""
        if self.row_count == 0:
            return
        if self.cursor_row == 0:
            self.move_cursor(row=self.row_count - 1)
        else:
            super().action_cursor_up()

    def on_mount(self) -> None:
        self.cursor_type = "row"
        self.zebra_stripes = True
        self.add_columns(*TABLE_COLUMNS)

    def load(self, entries: Sequence[Entry], indices: Sequence[int]) -> None:
        """Replace table contents with ``entries[i]`` for each visible index, in order."""
        self.clear()
        for position, index in enumerate(indices, start=1):
            entry = entries[index]
            self.add_row(
                str(position),
                Text(entry.name),
                Text(entry.command),
                _USER_BADGE if entry.source is Source.USER else _SYSTEM_BADGE,
                _ENABLED if entry.enabled else _DISABLED,
                key=row_key(entry),
            )

    def selected_key(self) -> str | None:
        """Return the row key of the highlighted row, or None when empty."""
        if self.row_count == 0:
            return None
        return self.coordinate_to_cell_key(self.cursor_coordinate).row_key.value

    def select_key(self, key: str) -> bool:
        """Move the cursor to the row with ``key``. Returns False if it is not shown."""
        try:
            row = self.get_row_index(key)
        except RowDoesNotExist:
            return False
        self.move_cursor(row=row)
        return True

    def on_click(self, event: Click) -> None:
        """Post RowDoubleClicked on a double-click (chain == 2)."""
        if event.chain == 2 and self.row_count > 0:
            self.post_message(EntryTable.RowDoubleClicked())
