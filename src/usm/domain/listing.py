"""Pure functions deriving the visible, ordered view of loaded entries.

Nothing here mutates its input. Results are lists of indices into the
``entries`` sequence the caller owns, so the view can be recomputed from
scratch after every reload or mutation.
"""

from collections.abc import Sequence

from usm.constants import STATUS_ENABLED_FIRST
from usm.models import Entry, FilterConfig, SortOrder, Source


def _state_ok(entry: Entry, config: FilterConfig) -> bool:
    return config.show_enabled if entry.enabled else config.show_disabled


def _source_ok(entry: Entry, config: FilterConfig) -> bool:
    if entry.source is Source.USER:
        return config.show_user
    return config.show_system


def apply_filter(entries: Sequence[Entry], config: FilterConfig) -> list[int]:
    """Return indices of entries passing both the status and the source flags.

    Input order is preserved. Deselecting both enabled and disabled (or both
    user and system) yields an empty list. A non-empty ``config.query``
    additionally requires ``Entry.matches``.
    """
    return [
        index
        for index, entry in enumerate(entries)
        if _state_ok(entry, config)
        and _source_ok(entry, config)
        and (not config.query or entry.matches(config.query))
    ]


def _name_key(entry: Entry) -> str:
    return entry.name.lower()


def sort_indices(
    entries: Sequence[Entry],
    order: SortOrder,
    indices: Sequence[int] | None = None,
    enabled_first: bool = STATUS_ENABLED_FIRST,
) -> list[int]:
    """Order ``indices`` (all entries by default) by ``order``.

    Names compare case-insensitively using the base ``Name``. Every sort is
    stable, so entries with equal keys keep their original index order,
    including for ``NAME_DESC``.

    ``STATUS`` groups enabled entries first when ``enabled_first`` is True,
    disabled first otherwise; the ``SOURCE_*`` orders group by origin. Both
    break ties by ascending name.
    """
    if indices is None:
        indices = range(len(entries))

    if order is SortOrder.NAME_ASC:
        return sorted(indices, key=lambda i: _name_key(entries[i]))
    if order is SortOrder.NAME_DESC:
        return sorted(indices, key=lambda i: _name_key(entries[i]), reverse=True)
    if order is SortOrder.STATUS:
        return sorted(
            indices,
            key=lambda i: (entries[i].enabled != enabled_first, _name_key(entries[i])),
        )
    first = Source.USER if order is SortOrder.SOURCE_USER_FIRST else Source.SYSTEM
    return sorted(
        indices,
        key=lambda i: (entries[i].source is not first, _name_key(entries[i])),
    )


def visible_indices(
    entries: Sequence[Entry],
    config: FilterConfig,
    order: SortOrder,
    enabled_first: bool = STATUS_ENABLED_FIRST,
) -> list[int]:
    """Filter then sort: the list the UI renders."""
    return sort_indices(entries, order, apply_filter(entries, config), enabled_first)
