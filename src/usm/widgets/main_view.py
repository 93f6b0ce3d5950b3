"""Main view: search bar above the entry table and its detail panel."""

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Input, LoadingIndicator

from usm.widgets.detail_panel import DetailPanel
from usm.widgets.entry_table import EntryTable


class MainView(Vertical):
    """Composes the search input, the entry table and the detail panel into one panel."""

    def compose(self) -> ComposeResult:
        yield Input(placeholder="Search names, commands and files…", id="search")
        with Horizontal(id="body"):
            yield EntryTable(id="entry-table")
            yield DetailPanel(id="detail")
        yield LoadingIndicator(id="loading")
