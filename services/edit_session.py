"""
Edit session tracker.

Holds the working copy of one editing surface: an ordered list of edit
entries plus the baseline record they were projected from. Purely
in-memory; nothing here talks to the backend.
"""

import copy
from typing import Any, Iterable, Iterator, Optional
import structlog

from exceptions import EditSessionError
from models.edit import EditEntry, FieldDescriptor, FieldKind, GroupKind, NESTED_GROUPS
from models.product import QUALITY_SPECS

logger = structlog.get_logger(__name__)


class EditSession:
    """
    Working copy of a record's editable fields.

    A session is bound to the baseline it was opened against. Opening the
    surface again against a fresh baseline means building a new session;
    two sessions are never merged.
    """

    def __init__(self, baseline: Optional[dict], entries: Iterable[EditEntry]):
        # Snapshot: later mutation of the caller's dict must not leak in.
        self.baseline: dict = copy.deepcopy(baseline) if baseline else {}
        self.entries: list[EditEntry] = list(entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[EditEntry]:
        return iter(self.entries)

    def __getitem__(self, index: int) -> EditEntry:
        return self._entry(index)

    def _entry(self, index: int) -> EditEntry:
        if index < 0 or index >= len(self.entries):
            raise EditSessionError(f"No edit entry at index {index}", index=index)
        return self.entries[index]

    # ===================
    # MUTATIONS
    # ===================

    def set(self, index: int, value: Any) -> EditEntry:
        """
        Update an entry's current value.

        The last write wins; is_changed follows from comparing against the
        original value, so writing the original back clears the change.
        """
        entry = self._entry(index)
        entry.current_value = value
        logger.debug("edit_value_set", index=index, path=entry.path, changed=entry.is_changed)
        return entry

    def set_key(self, index: int, new_key: str) -> EditEntry:
        """
        Rename the map key of an editable-key entry.

        Raises:
            EditSessionError: Entry's key is not user-editable
        """
        entry = self._entry(index)
        if not entry.descriptor.editable_key:
            raise EditSessionError(f"Key of '{entry.path}' is not editable", index=index)
        entry.current_key = new_key
        logger.debug("edit_key_set", index=index, key=new_key, original_key=entry.original_key)
        return entry

    def add_new(self, group: str = QUALITY_SPECS) -> int:
        """
        Append an empty, unnamed row to a free-form group.

        Returns:
            Index of the new entry

        Raises:
            EditSessionError: Group has fixed keys (dimensions) or is unknown
        """
        if NESTED_GROUPS.get(group) != GroupKind.SPEC_MAP:
            raise EditSessionError(f"Rows can only be added to a free-form group, not '{group}'")
        descriptor = FieldDescriptor(path=group, kind=FieldKind.SINGLE_LINE, editable_key=True)
        self.entries.append(EditEntry(descriptor=descriptor, is_new=True))
        logger.debug("edit_row_added", group=group, index=len(self.entries) - 1)
        return len(self.entries) - 1

    def remove(self, index: int) -> None:
        """
        Drop a row added in this session.

        Persisted attributes cannot be deleted through a partial update,
        so only new rows may be removed.

        Raises:
            EditSessionError: Entry exists in the baseline
        """
        entry = self._entry(index)
        if not entry.is_new:
            raise EditSessionError(
                f"Only newly added rows can be removed ('{entry.path}' exists on the record)",
                index=index
            )
        del self.entries[index]

    def reset(self, index: int) -> None:
        """Restore one entry; a new row is dropped instead."""
        entry = self._entry(index)
        if entry.is_new:
            del self.entries[index]
            return
        entry.current_value = entry.original_value
        entry.current_key = entry.original_key

    def reset_all(self) -> None:
        """Restore every existing entry and drop all new rows."""
        self.entries = [entry for entry in self.entries if not entry.is_new]
        for entry in self.entries:
            entry.current_value = entry.original_value
            entry.current_key = entry.original_key

    # ===================
    # QUERIES
    # ===================

    def is_changed(self, index: int) -> bool:
        return self._entry(index).is_changed

    def has_changes(self) -> bool:
        """Any changed entry, or any new row with both key and value filled in."""
        return any(entry.is_effective for entry in self.entries)

    def changed_entries(self) -> list[EditEntry]:
        """Entries that would go into a payload, in session order."""
        return [entry for entry in self.entries if entry.is_effective]

    def new_entries(self) -> list[EditEntry]:
        return [entry for entry in self.entries if entry.is_new]

    def group_entries(self, group: str) -> list[EditEntry]:
        if group not in NESTED_GROUPS:
            return []
        return [entry for entry in self.entries if entry.group == group]
