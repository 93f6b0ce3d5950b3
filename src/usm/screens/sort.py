"""Sort picker modal — choose the list order."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.screen import ModalScreen
from textual.widgets import ListItem, ListView, Static

from usm.models import SortOrder

_ORDERS = list(SortOrder)


class SortScreen(ModalScreen[SortOrder | None]):
    """Modal listing every sort order with the active one pre-highlighted.

    Dismisses with the chosen ``SortOrder`` on Enter or None on Escape/q.
    """

    BINDINGS = [
        Binding("escape", "cancel", show=False),
        Binding("q", "cancel", show=False),
        Binding("j", "cursor_down", show=False),
        Binding("k", "cursor_up", show=False),
    ]

    def __init__(self, current: SortOrder, enabled_first: bool = True) -> None:
        super().__init__()
        self._current = current
        self._enabled_first = enabled_first

    def _label(self, order: SortOrder) -> str:
        if order is SortOrder.STATUS and not self._enabled_first:
            return "Status (disabled first)"
        return order.label

    def compose(self) -> ComposeResult:
        items = []
        for order in _ORDERS:
            marker = "→" if order is self._current else " "
            items.append(ListItem(Static(f"  {marker} {self._label(order)}"), classes="sort-item"))
        yield Static("  Sort entries", id="sort-title")
        yield ListView(*items, id="sort-list")
        yield Static("  Enter to select · Esc/q to cancel", id="sort-hint")

    def on_mount(self) -> None:
        list_view = self.query_one("#sort-list", ListView)
        list_view.index = _ORDERS.index(self._current)
        list_view.focus()

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        index = event.list_view.index
        if index is not None:
            self.dismiss(_ORDERS[index])

    def action_cursor_down(self) -> None:
        self.query_one("#sort-list", ListView).action_cursor_down()

    def action_cursor_up(self) -> None:
        self.query_one("#sort-list", ListView).action_cursor_up()

    def action_cancel(self) -> None:
        self.dismiss(None)
