from __future__ import annotations

"""Undo/redo snapshot management for IconSet.

This service performs pure in-memory history tracking of the entire IconSet
state. Snapshots are raw dumps (nothing is filtered, so broken aliases survive
a round trip) and can be restored in place into an IconSet instance.

Design principles
-----------------
- No I/O.
- Snapshots are immutable blobs once stored.
- Redo stack is cleared on every new snapshot push (standard undo/redo behavior).
- Memory usage controlled by a max_history policy (trim oldest).
"""

from dataclasses import dataclass
import json
import logging
from typing import List, Optional

from icon_toolkit.core.icon_set import IconSet

__all__ = ["UndoService"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Snapshot:
    """Immutable in-memory snapshot of an IconSet.

    Attributes
    ----------
    data :
        JSON text of the raw icon set dump.
    """

    data: str


class UndoService:
    """Manage undo/redo stacks for :class:`IconSet`.

    Parameters
    ----------
    max_history : int, default=50
        Maximum number of undo snapshots to keep. Oldest entries are discarded
        when the capacity is exceeded. Values below 1 are coerced to 1.

    Notes
    -----
    Callers push a snapshot BEFORE a mutation (baseline) and AFTER it (post).
    Undo restores the baseline and moves the post snapshot to the redo stack.

    Examples
    --------
    >>> svc = UndoService(max_history=10)
    >>> svc.push_snapshot(icon_set)
    >>> icon_set.remove("home")
    >>> svc.push_snapshot(icon_set)
    >>> svc.undo(icon_set)
    True
    """

    def __init__(self, max_history: int = 50) -> None:
        self._max_history: int = max(1, int(max_history))
        self._undo_stack: List[_Snapshot] = []
        self._redo_stack: List[_Snapshot] = []

    # --------------------------------------------------------------------- API

    def push_snapshot(self, icon_set: IconSet) -> None:
        """Capture current state and push it onto the undo stack."""
        snap = self._create_snapshot(icon_set)
        if snap is None:
            return
        self._undo_stack.append(snap)
        # New action invalidates redo history
        self._redo_stack.clear()
        self._trim(self._undo_stack)

    def undo(self, icon_set: IconSet) -> bool:
        """Restore the previous state into *icon_set*."""
        if len(self._undo_stack) < 2:
            return False

        post_snap = self._undo_stack.pop()
        baseline_snap = self._undo_stack[-1]

        if not self._restore_snapshot(icon_set, baseline_snap):
            self._undo_stack.append(post_snap)
            return False

        self._redo_stack.append(post_snap)
        self._trim(self._redo_stack)
        return True

    def redo(self, icon_set: IconSet) -> bool:
        """Re-apply a state that was previously undone."""
        if not self._redo_stack:
            return False

        post_snap = self._redo_stack.pop()
        if not self._restore_snapshot(icon_set, post_snap):
            self._redo_stack.append(post_snap)
            return False

        self._undo_stack.append(post_snap)
        self._trim(self._undo_stack)
        return True

    def can_undo(self) -> bool:
        return len(self._undo_stack) > 1

    def can_redo(self) -> bool:
        return len(self._redo_stack) > 0

    def clear(self) -> None:
        """Clear both undo and redo histories."""
        self._undo_stack.clear()
        self._redo_stack.clear()

    # --------------------------------------------------------------- Internals

    def _trim(self, stack: List[_Snapshot]) -> None:
        overflow = len(stack) - self._max_history
        if overflow > 0:
            del stack[0:overflow]

    def _create_snapshot(self, icon_set: IconSet) -> Optional[_Snapshot]:
        try:
            return _Snapshot(data=json.dumps(icon_set.snapshot()))
        except (TypeError, ValueError) as exc:
            logger.warning("Could not snapshot icon set '%s': %s", icon_set.prefix, exc)
            return None

    def _restore_snapshot(self, icon_set: IconSet, snap: _Snapshot) -> bool:
        """Restore *snap* into *icon_set* in place; False if it cannot be parsed."""
        try:
            data = json.loads(snap.data)
        except ValueError as exc:
            logger.warning("Could not restore snapshot: %s", exc)
            return False
        icon_set.load(data)
        return True
