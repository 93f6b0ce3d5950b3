"""Filter screen — choose which entries the list shows."""

from dataclasses import replace

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Checkbox, Label

from usm.models import FilterConfig

_CHECKBOXES = (
    ("show_enabled", "Show enabled"),
    ("show_disabled", "Show disabled"),
    ("show_user", "Show user entries"),
    ("show_system", "Show system entries"),
)


class FilterScreen(ModalScreen[FilterConfig | None]):
    """Modal with one checkbox per status and source flag.

    Dismisses with the new ``FilterConfig`` (search query carried over) on
    apply, or None on cancel.
    """

    BINDINGS = [
        Binding("escape", "cancel", show=False),
        Binding("ctrl+s", "apply", show=False, priority=True),
    ]

    def __init__(self, current: FilterConfig) -> None:
        super().__init__()
        self._current = current

    def compose(self) -> ComposeResult:
        with Vertical(id="filter-container"):
            yield Label("Filter entries", id="filter-title")
            for attr, label in _CHECKBOXES:
                yield Checkbox(label, value=getattr(self._current, attr), id=f"filter-{attr}")
            with Horizontal(id="filter-buttons"):
                yield Button("Apply", variant="success", id="filter-apply")
                yield Button("Cancel", variant="primary", id="filter-cancel")

    def on_mount(self) -> None:
        self.query_one("#filter-show_enabled", Checkbox).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "filter-apply":
            self.action_apply()
        else:
            self.dismiss(None)

    def action_apply(self) -> None:
        flags = {attr: self.query_one(f"#filter-{attr}", Checkbox).value for attr, _ in _CHECKBOXES}
        self.dismiss(replace(self._current, **flags))

    def action_cancel(self) -> None:
        self.dismiss(None)
