"""Help and about overlay screen."""

from pathlib import Path

from rich.markup import escape
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.screen import ModalScreen
from textual.widgets import Static

from usm.constants import HELP_TEXT


class HelpScreen(ModalScreen):
    """Keyboard shortcuts, version, and the two directories being managed."""

    BINDINGS = [
        Binding("escape", "dismiss", show=False),
        Binding("?", "dismiss", show=False),
        Binding("q", "dismiss", show=False),
    ]

    def __init__(self, user_dir: Path, system_dir: Path) -> None:
        super().__init__()
        self._user_dir = user_dir
        self._system_dir = system_dir

    def compose(self) -> ComposeResult:
        dirs = (
            f" User entries    {escape(str(self._user_dir))}\n"
            f" System entries  {escape(str(self._system_dir))}"
        )
        yield Container(
            Static(HELP_TEXT, id="help-text", markup=False),
            Static(dirs, id="help-dirs"),
            id="help-container",
        )

    def on_click(self) -> None:
        """Dismiss on any click outside the help box."""
        self.dismiss()
