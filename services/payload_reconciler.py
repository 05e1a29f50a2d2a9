"""
Payload reconciler.

Turns the changed entries of an edit session into the smallest partial
update the backend can apply without losing data:

    - top-level fields pass through as typed;
    - fields under a nested group are merged into a copy of the
      baseline's group, so keys nobody touched survive the update;
    - unchanged entries never appear.

The backend applies updates key-by-key at the top level but replaces a
nested group wholesale, which is why a touched group is always re-sent
in full.
"""

import math
from typing import Any, Iterable, Optional, Union
import structlog

from exceptions import SpecKeyCollisionError
from models.edit import EditEntry, GroupKind, NESTED_GROUPS, is_blank
from services.edit_session import EditSession
from services.field_descriptors import descriptor_for_path, project
from utils.text_utils import sanitize_key

logger = structlog.get_logger(__name__)

COLLISION_RAISE = "raise"
COLLISION_LAST_WINS = "last_wins"


def parse_number(value: Any) -> float:
    """Float value of an input, 0 when it does not parse."""
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


class PayloadReconciler:
    """
    Builds reconciled payloads.

    Args:
        on_collision: "raise" to reject two entries resolving to the same
            key inside one group, "last_wins" to let the later entry
            overwrite the earlier one silently.
    """

    def __init__(self, on_collision: str = COLLISION_RAISE):
        if on_collision not in (COLLISION_RAISE, COLLISION_LAST_WINS):
            raise ValueError(f"Unknown collision policy: {on_collision}")
        self.on_collision = on_collision

    def reconcile(
        self,
        session: Union[EditSession, Iterable[EditEntry]],
        baseline: Optional[dict] = None
    ) -> dict:
        """
        Compute the partial-update payload for a session.

        Args:
            session: Edit session, or a plain sequence of entries
            baseline: Last-known-good record; defaults to the session's own

        Returns:
            Sparse payload ({} when nothing changed)

        Raises:
            SpecKeyCollisionError: Two entries claim the same group key
                (only with on_collision="raise")
        """
        if isinstance(session, EditSession):
            entries = session.entries
            if baseline is None:
                baseline = session.baseline
        else:
            entries = list(session)
        baseline = baseline or {}

        payload: dict = {}
        grouped: dict[str, list[EditEntry]] = {}

        for entry in entries:
            group = entry.group
            if group is None:
                if entry.is_effective:
                    payload[entry.descriptor.key] = entry.current_value
                continue
            grouped.setdefault(group, []).append(entry)

        for group, group_entries in grouped.items():
            merged = self._merge_group(group, group_entries, baseline.get(group))
            if merged is not None:
                payload[group] = merged

        logger.debug("payload_reconciled", fields=list(payload.keys()))
        return payload

    # ===================
    # GROUP MERGE
    # ===================

    def _merge_group(self, group: str, entries: list[EditEntry], existing: Any) -> Optional[dict]:
        """
        Merge a group's effective entries into a copy of its baseline map.

        Returns None when no entry writes anything, so an untouched group
        never shows up in the payload.
        """
        kind = NESTED_GROUPS[group]
        merged = dict(existing) if isinstance(existing, dict) else {}

        writes: list[tuple[EditEntry, str, Any]] = []
        claims: dict[str, list[str]] = {}

        for entry in entries:
            if entry.is_new and not entry.is_effective:
                continue

            if not entry.is_effective:
                # Untouched existing entry keeps its key in the merged map
                claims.setdefault(entry.original_key, []).append(entry.label)
                continue

            raw_key = entry.current_key if entry.descriptor.editable_key else entry.descriptor.key
            key = sanitize_key(raw_key)
            if not key or is_blank(entry.current_value):
                if not entry.is_new:
                    claims.setdefault(entry.original_key, []).append(entry.label)
                continue

            value = parse_number(entry.current_value) if kind == GroupKind.DIMENSIONS else entry.current_value
            claims.setdefault(key, []).append(entry.label)
            writes.append((entry, key, value))

        if not writes:
            return None

        if self.on_collision == COLLISION_RAISE:
            for key, labels in claims.items():
                if len(labels) > 1:
                    logger.warning("group_key_collision", group=group, key=key, labels=labels)
                    raise SpecKeyCollisionError(group, key, labels)

        # Renames are remove-old / add-new. Every old key goes before any
        # write lands, so a chain or swap never drops a value.
        for entry, key, _ in writes:
            if not entry.is_new and entry.original_key and entry.original_key != key:
                merged.pop(entry.original_key, None)
        for _, key, value in writes:
            merged[key] = value

        return merged or None


def reconcile(
    session: Union[EditSession, Iterable[EditEntry]],
    baseline: Optional[dict] = None,
    on_collision: str = COLLISION_RAISE
) -> dict:
    """Shortcut for PayloadReconciler(on_collision).reconcile(session, baseline)."""
    return PayloadReconciler(on_collision).reconcile(session, baseline)


def build_single_field_payload(baseline: Optional[dict], path: str, value: Any) -> dict:
    """
    Payload for editing one field of a record.

    Goes through the same projection and merge as multi-field sessions,
    so a nested field still carries its untouched siblings.
    """
    session = EditSession(baseline, project(baseline, [descriptor_for_path(path)]))
    session.set(0, value)
    return reconcile(session)
