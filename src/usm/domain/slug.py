"""Filename derivation for user autostart entries."""

import re

from usm.constants import DEFAULT_SLUG, DESKTOP_SUFFIX


def slugify(name: str) -> str:
    """Return a filesystem-safe base name for a display name.

    Lowercases, collapses every run of characters outside ``[a-z0-9]`` into a
    single ``-`` and trims leading/trailing ``-``. Falls back to ``"entry"``
    when nothing usable is left.
    """
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return slug or DEFAULT_SLUG


def entry_filename(name: str) -> str:
    return f"{slugify(name)}{DESKTOP_SUFFIX}"
