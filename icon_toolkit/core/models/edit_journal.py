from __future__ import annotations

"""Edit journaling model for icon set edits.

This module defines a minimal in-memory journal for edit operations that can
be recorded during a session and later replayed against a freshly loaded
IconSet, e.g. to re-apply a cleanup to a newer release of the same set.

Scope:
- Pure core model (no I/O).
- Failures during replay are collected, not raised.
- JSON-serializable serialization format for persistence by callers.

Supported operations:
- "rename": {"old_name": str, "new_name": str}
- "remove": {"names": List[str]}

Dispatch is delegated to IconSetEditingService methods:
- rename -> IconSetEditingService.rename_icon
- remove -> IconSetEditingService.remove_icons
"""

from dataclasses import dataclass
from typing import Any, Dict, List, TypedDict
from typing import TYPE_CHECKING

import time

if TYPE_CHECKING:
    from icon_toolkit.core.icon_set import IconSet
    from icon_toolkit.core.services.icon_set_editing_service import IconSetEditingService

__all__ = ["JournalEntry", "EditJournal"]


class RenameEntry(TypedDict):
    old_name: str
    new_name: str


class RemoveEntry(TypedDict):
    names: List[str]


@dataclass
class JournalEntry:
    """Single journal entry representing one edit.

    Attributes
    ----------
    operation
        Operation kind, one of: "rename", "remove".
    details
        Operation-specific payload. Must be JSON-serializable.
    timestamp
        Unix epoch seconds when the entry was recorded.
    """
    operation: str
    details: Dict[str, Any]
    timestamp: float


class EditJournal:
    """In-memory journal of icon set edits with record/replay capabilities."""

    def __init__(self) -> None:
        self._entries: List[JournalEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> List[JournalEntry]:
        return list(self._entries)

    def record_edit(self, operation: str, details: Dict[str, Any]) -> None:
        """Record a new edit entry with current timestamp.

        The payload shape is validated during replay, not here.
        """
        entry = JournalEntry(operation=operation, details=dict(details), timestamp=time.time())
        self._entries.append(entry)

    def replay_edits(self, icon_set: "IconSet", editing_service: "IconSetEditingService") -> Dict[str, Any]:
        """Replay all recorded edits against *icon_set*.

        Returns
        -------
        dict
            Structured report:
            {
              "applied": int,   # number of edits successfully applied
              "skipped": int,   # number of edits that were skipped or failed
              "errors": List[str],  # collected error messages
            }

        Entries are applied in order; a failing entry is counted as skipped
        and replay continues with the next one.
        """
        applied = 0
        skipped = 0
        errors: List[str] = []

        for idx, entry in enumerate(self._entries):
            op = entry.operation
            details = entry.details
            if op == "rename":
                old_name = _safe_str(details.get("old_name"))
                new_name = _safe_str(details.get("new_name"))
                if not old_name or not new_name:
                    skipped += 1
                    errors.append(f"[{idx}] rename: invalid payload {details!r}")
                    continue
                result = editing_service.rename_icon(icon_set, old_name, new_name, record=False)

            elif op == "remove":
                names = details.get("names")
                if not isinstance(names, list) or not all(isinstance(x, str) for x in names):
                    skipped += 1
                    errors.append(f"[{idx}] remove: invalid payload {details!r}")
                    continue
                result = editing_service.remove_icons(icon_set, names, record=False)

            else:
                skipped += 1
                errors.append(f"[{idx}] unsupported operation '{op}'")
                continue

            if result.success:
                applied += 1
            else:
                skipped += 1
                errors.append(f"[{idx}] {op} failed: {result.message}")

        return {"applied": applied, "skipped": skipped, "errors": errors}

    def clear_journal(self) -> None:
        """Remove all entries from the journal."""
        self._entries.clear()

    def serialize(self) -> List[Dict[str, Any]]:
        """Serialize journal entries to a JSON-compatible list of dicts."""
        return [
            {
                "operation": e.operation,
                "details": e.details,
                "timestamp": e.timestamp,
            }
            for e in self._entries
        ]

    @classmethod
    def deserialize(cls, data: List[Dict[str, Any]]) -> "EditJournal":
        """Create an EditJournal from serialized data.

        Malformed items are skipped; a non-list input yields an empty journal.
        """
        journal = cls()
        if not isinstance(data, list):
            return journal
        for item in data:
            if not isinstance(item, dict):
                continue
            op = item.get("operation")
            details = item.get("details")
            ts = item.get("timestamp")
            if not isinstance(op, str) or not isinstance(details, dict) or not isinstance(ts, (int, float)):
                continue
            journal._entries.append(JournalEntry(operation=op, details=details, timestamp=float(ts)))
        return journal


def _safe_str(value: Any) -> str:
    """Return the value if it's a string; otherwise empty string."""
    return value if isinstance(value, str) else ""
