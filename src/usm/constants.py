"""Application-wide constants."""

import os
from pathlib import Path

APP_TITLE = "usm"
APP_SUBTITLE = "XDG autostart entries"
APP_VERSION = "1.0.1"


def _user_config_home() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    return Path(xdg) if xdg else Path("~/.config").expanduser()


USER_AUTOSTART_DIR: Path = _user_config_home() / "autostart"
SYSTEM_AUTOSTART_DIR: Path = Path("/etc/xdg/autostart")

DESKTOP_SUFFIX = ".desktop"
DEFAULT_SLUG = "entry"

# Keys of the [Desktop Entry] group that the editor reads and writes.
DESKTOP_ENTRY_GROUP = "Desktop Entry"
KEY_TYPE = "Type"
KEY_NAME = "Name"
KEY_EXEC = "Exec"
KEY_ICON = "Icon"
KEY_COMMENT = "Comment"
KEY_HIDDEN = "Hidden"
KEY_AUTOSTART_ENABLED = "X-GNOME-Autostart-enabled"

DEFAULT_NAME = "Unnamed"
DEFAULT_TYPE = "Application"

# Status sort puts enabled entries ahead of disabled ones unless overridden.
STATUS_ENABLED_FIRST = True

TABLE_COLUMNS = ("#", "Name", "Command", "Source", "Status")

HELP_TEXT = f"""\
 Navigation
 ──────────────────────────────
 j / ↓        Move down
 k / ↑        Move up
 g g          Jump to top
 G            Jump to bottom

 Entries
 ──────────────────────────────
 t            Toggle enabled
 i / Enter    Edit selected entry
 o            Add new entry
 d d          Delete selected entry
 r            Reload from disk

 View
 ──────────────────────────────
 /            Search
 Escape       Clear search / close
 f            Filter
 s            Sort

 General
 ──────────────────────────────
 y            Copy command to clipboard
 ?            Toggle this help
 q            Quit

 usm {APP_VERSION} · system entries are read-only\
"""
