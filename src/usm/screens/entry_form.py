"""Entry form — modal for adding a new autostart entry or editing one."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Input, Label

from usm.models import EntryDraft

_HINT = "Enter for next field · Enter on the last field saves · Escape to cancel"
_FIELD_ORDER = ("form-name", "form-command", "form-comment")


class EntryFormScreen(ModalScreen[EntryDraft | None]):
    """Modal with name, command and comment inputs.

    Dismisses with an ``EntryDraft`` on save, or None on cancel. Inline
    validation refuses a blank name or command.
    """

    BINDINGS = [
        Binding("escape", "cancel", show=False),
        Binding("ctrl+s", "save", show=False, priority=True),
    ]

    def __init__(self, title: str, draft: EntryDraft | None = None) -> None:
        super().__init__()
        self._title = title
        self._draft = draft or EntryDraft(name="", command="")

    def compose(self) -> ComposeResult:
        with Vertical(id="form-container"):
            yield Label(self._title, id="form-title")
            yield Label("Name", classes="form-label")
            yield Input(value=self._draft.name, placeholder="My App", id="form-name")
            yield Label("Command", classes="form-label")
            yield Input(value=self._draft.command, placeholder="/usr/bin/my-app", id="form-command")
            yield Label("Comment (optional)", classes="form-label")
            yield Input(value=self._draft.comment, id="form-comment")
            yield Label("", id="form-error")
            yield Label(_HINT, id="form-hint")

    def on_mount(self) -> None:
        name_input = self.query_one("#form-name", Input)
        name_input.focus()
        name_input.cursor_position = len(self._draft.name)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        input_id = event.input.id
        if input_id in _FIELD_ORDER[:-1]:
            next_id = _FIELD_ORDER[_FIELD_ORDER.index(input_id) + 1]
            self.query_one(f"#{next_id}", Input).focus()
            return
        self._try_save()

    def action_save(self) -> None:
        """Save — triggered by ctrl+s from anywhere in the modal."""
        self._try_save()

    def _try_save(self) -> None:
        name = self.query_one("#form-name", Input).value.strip()
        command = self.query_one("#form-command", Input).value.strip()
        comment = self.query_one("#form-comment", Input).value.strip()
        error = self.query_one("#form-error", Label)

        if not name:
            error.update("Name cannot be blank")
            self.query_one("#form-name", Input).focus()
            return

        if not command:
            error.update("Command cannot be blank")
            self.query_one("#form-command", Input).focus()
            return

        self.dismiss(EntryDraft(name=name, command=command, comment=comment, icon=self._draft.icon))

    def action_cancel(self) -> None:
        self.dismiss(None)
