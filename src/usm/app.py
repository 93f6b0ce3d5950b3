"""Main application entry point."""

import logging

from rich.markup import escape
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.logging import TextualHandler
from textual.reactive import reactive
from textual.widgets import Footer, Header, Input, LoadingIndicator

from usm.config import ConfigError, FilterSettings, Settings, load_settings, save_settings
from usm.constants import APP_SUBTITLE, APP_TITLE
from usm.domain.listing import visible_indices
from usm.errors import MutationRefused
from usm.manager import StartupManager
from usm.models import Entry, EntryDraft, Field, FilterConfig, Result, SortOrder
from usm.screens.confirm import ConfirmScreen
from usm.screens.entry_form import EntryFormScreen
from usm.screens.filter import FilterScreen
from usm.screens.help import HelpScreen
from usm.screens.sort import SortScreen
from usm.widgets.detail_panel import DetailPanel
from usm.widgets.entry_table import EntryTable, row_key
from usm.widgets.main_view import MainView


class UsmApp(App):
    """usm — XDG autostart manager TUI."""

    CSS_PATH = "app.tcss"
    TITLE = APP_TITLE
    SUB_TITLE = APP_SUBTITLE

    loading: reactive[bool] = reactive(False)

    _persist_settings: bool = False

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("?", "toggle_help", "Help"),
        Binding("/", "focus_search", "Search"),
        Binding("escape", "clear_search", show=False),
        Binding("g", "jump_top", show=False),
        Binding("G", "jump_bottom", show=False),
        Binding("y", "copy_command", "Copy"),
        Binding("t", "toggle_entry", "Toggle"),
        Binding("i", "edit_entry", "Edit"),
        Binding("o", "add_entry", "Add"),
        Binding("d", "delete_entry", "dd Delete"),
        Binding("f", "filter", "Filter"),
        Binding("s", "sort", "Sort"),
        Binding("r", "reload", "Reload"),
    ]

    def __init__(
        self,
        manager: StartupManager | None = None,
        settings: Settings | None = None,
        _use_config: bool = False,
    ) -> None:
        super().__init__()
        self._config_error: str | None = None
        if settings is None:
            settings = Settings()
            if _use_config:
                try:
                    settings = load_settings()
                except ConfigError as exc:
                    self._config_error = str(exc)
        self._settings = settings
        self._persist_settings = _use_config
        self._manager = manager or StartupManager(settings.user_dir, settings.system_dir)
        self._entries: list[Entry] = []
        self._visible: list[int] = []
        self._filter: FilterConfig = settings.filter.to_config()
        self._sort: SortOrder = settings.sort
        self._enabled_first: bool = settings.enabled_first
        self._g_pressed: bool = False
        self._d_pressed: bool = False

    def compose(self) -> ComposeResult:
        yield Header()
        yield MainView(id="main")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#search", Input).display = False
        self.query_one("#loading", LoadingIndicator).display = False
        if self._settings.theme:
            self.theme = self._settings.theme
        if self._config_error:
            self.notify(
                f"Using default settings: {escape(self._config_error)}", severity="error", timeout=8
            )
        self._load_initial()

    @work(exclusive=True)
    async def _load_initial(self) -> None:
        """Read both autostart directories on startup."""
        self.loading = True
        self._reload()
        self.loading = False
        self._get_table().focus()

    def watch_loading(self, loading: bool) -> None:
        """Show or hide the loading overlay."""
        self.query_one("#loading", LoadingIndicator).display = loading
        self.query_one("#body").display = not loading

    def watch_theme(self, theme: str) -> None:
        """Persist theme changes whenever the theme is changed."""
        if self._persist_settings:
            self._settings.theme = theme
            self._save_settings()

    def _save_settings(self) -> None:
        if not self._persist_settings:
            return
        self._settings.filter = FilterSettings.from_config(self._filter)
        self._settings.sort = self._sort
        try:
            save_settings(self._settings)
        except OSError as exc:
            self.notify(
                f"Could not save settings: {escape(str(exc))}", severity="warning", timeout=4
            )

    def _get_table(self) -> EntryTable:
        return self.query_one("#entry-table", EntryTable)

    def _reload(self, select_key: str | None = None) -> None:
        """Replace the entry collection with a fresh load and re-derive the view."""
        report = self._manager.load()
        self._entries = report.entries
        if report.failures:
            names = ", ".join(escape(failure.path.name) for failure in report.failures)
            self.notify(
                f"Skipped {len(report.failures)} unreadable file(s): {names}",
                severity="warning",
                timeout=8,
            )
        self._refresh_table(select_key)

    def _refresh_table(self, select_key: str | None = None) -> None:
        """Repopulate the table from the current filter and sort order."""
        table = self._get_table()
        keep = select_key or table.selected_key()
        self._visible = visible_indices(
            self._entries, self._filter, self._sort, self._enabled_first
        )
        table.load(self._entries, self._visible)
        if keep is not None:
            table.select_key(keep)
        self._update_detail()
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        shown = len(self._visible)
        total = len(self._entries)
        base = f"{shown} of {total} entries · {self._sort.label}"
        if total and not shown:
            base = f"{base} · no entries match the current filter"
        self.sub_title = base

    def _selected_entry(self) -> Entry | None:
        """Return the entry behind the highlighted table row, or None."""
        key = self._get_table().selected_key()
        if key is None:
            return None
        for index in self._visible:
            if row_key(self._entries[index]) == key:
                return self._entries[index]
        return None

    def _update_detail(self) -> None:
        entry = self._selected_entry()
        editable = entry is not None and self._manager.can_modify(entry)
        self.query_one("#detail", DetailPanel).show(entry, editable)

    def on_data_table_row_highlighted(self, event: EntryTable.RowHighlighted) -> None:
        self._update_detail()

    def on_entry_table_row_double_clicked(self, event: EntryTable.RowDoubleClicked) -> None:
        """Open the edit modal on double-click."""
        event.stop()
        self.action_edit_entry()

    def _render_result(self, result: Result, message: str) -> bool:
        """Notify the outcome of a manager call. Returns True on success."""
        if not result.ok:
            severity = "warning" if isinstance(result.error, MutationRefused) else "error"
            self.notify(escape(str(result.error)), severity=severity, timeout=8)
            return False
        for warning in result.warnings:
            self.notify(escape(warning), severity="warning", timeout=8)
        self.notify(escape(message), timeout=2)
        return True

    def _after_write(self, result: Result, message: str) -> None:
        if self._render_result(result, message):
            self._reload(row_key(result.entry) if result.entry is not None else None)

    def _refuse_read_only(self, entry: Entry) -> bool:
        if entry.read_only:
            self.notify(
                f"{escape(entry.name)} is a system entry and is read-only",
                severity="warning",
                timeout=4,
            )
            return True
        return False

    def action_toggle_help(self) -> None:
        self.push_screen(HelpScreen(self._manager.user_dir, self._manager.system_dir))

    def action_focus_search(self) -> None:
        """Show and focus the search bar."""
        search = self.query_one("#search", Input)
        search.display = True
        search.focus()

    def action_clear_search(self) -> None:
        """Clear the search query and hide the search bar."""
        search = self.query_one("#search", Input)
        if search.value:
            search.value = ""
            self._filter.query = ""
            self._refresh_table()
        search.display = False
        self._get_table().focus()

    def action_jump_top(self) -> None:
        """Implement vim-style gg: move to the first row on the second g press."""
        if self._g_pressed:
            self._g_pressed = False
            self._get_table().move_cursor(row=0)
        else:
            self._g_pressed = True
            self.set_timer(0.5, self._reset_g)

    def _reset_g(self) -> None:
        self._g_pressed = False

    def action_jump_bottom(self) -> None:
        """Move cursor to the last row (vim G)."""
        table = self._get_table()
        table.move_cursor(row=table.row_count - 1)

    def action_copy_command(self) -> None:
        entry = self._selected_entry()
        if entry is None:
            return
        self.copy_to_clipboard(entry.command)
        self.notify("Copied command to clipboard", timeout=2)

    def action_toggle_entry(self) -> None:
        """Flip the enabled flag of the selected entry and write it."""
        entry = self._selected_entry()
        if entry is None:
            return
        verb = "Disabled" if entry.enabled else "Enabled"
        self._after_write(self._manager.toggle(entry), f"{verb} {entry.name}")

    def action_add_entry(self) -> None:
        """Open the form to create a new user entry."""

        def on_save(draft: EntryDraft | None) -> None:
            if draft is not None:
                self._after_write(self._manager.create(draft), f"Added {draft.name}")
            self._get_table().focus()

        self.push_screen(EntryFormScreen("Add autostart entry"), on_save)

    def action_edit_entry(self) -> None:
        """Open the form for the selected entry and write only the fields that changed."""
        entry = self._selected_entry()
        if entry is None or self._refuse_read_only(entry):
            return
        current = EntryDraft(
            name=entry.name,
            command=entry.command,
            comment=entry.comment or "",
            icon=entry.icon or "",
        )

        def on_save(draft: EntryDraft | None) -> None:
            if draft is not None:
                changes: dict[Field, str] = {}
                if draft.name != current.name:
                    changes[Field.NAME] = draft.name
                if draft.command != current.command:
                    changes[Field.COMMAND] = draft.command
                if draft.comment != current.comment:
                    changes[Field.COMMENT] = draft.comment
                if changes:
                    self._after_write(self._manager.apply(entry, changes), f"Saved {draft.name}")
            self._get_table().focus()

        self.push_screen(EntryFormScreen("Edit autostart entry", current), on_save)

    def action_delete_entry(self) -> None:
        """Implement vim-style dd: delete the selected entry on second d press."""
        if not self._d_pressed:
            self._d_pressed = True
            self.set_timer(0.5, self._reset_d)
            return

        self._d_pressed = False
        entry = self._selected_entry()
        if entry is None or self._refuse_read_only(entry):
            return

        def on_confirm(confirmed: bool | None) -> None:
            if confirmed:
                result = self._manager.delete(entry)
                if self._render_result(result, f"Deleted {entry.name}"):
                    self._reload()
            self._get_table().focus()

        confirm = ConfirmScreen(f"Delete {escape(entry.name)}?", confirm_label="Delete")
        self.push_screen(confirm, on_confirm)

    def _reset_d(self) -> None:
        self._d_pressed = False

    def action_filter(self) -> None:
        def on_apply(config: FilterConfig | None) -> None:
            if config is not None:
                self._filter = config
                self._refresh_table()
                self._save_settings()
                self.notify("Filter applied", timeout=2)
            self._get_table().focus()

        self.push_screen(FilterScreen(self._filter), on_apply)

    def action_sort(self) -> None:
        def on_pick(order: SortOrder | None) -> None:
            if order is not None:
                self._sort = order
                self._refresh_table()
                self._save_settings()
            self._get_table().focus()

        self.push_screen(SortScreen(self._sort, self._enabled_first), on_pick)

    def action_reload(self) -> None:
        self._reload()
        self.notify("Reloaded", timeout=2)

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "search":
            self._filter.query = event.value
            self._refresh_table()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "search":
            self._get_table().focus()


def main() -> None:
    logging.basicConfig(level=logging.INFO, handlers=[TextualHandler()])
    UsmApp(_use_config=True).run()


if __name__ == "__main__":
    main()
