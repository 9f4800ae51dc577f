from __future__ import annotations

"""Service layer for edits on an in-memory icon set.

This module provides a testable service wrapping the mutating operations of
:class:`IconSet` (rename, cascading removal, export) for tooling pipelines.

Scope and guarantees:
- Operates purely in-memory on IconSet, no file I/O.
- Invalid operations return OperationResult(success=False, ...) with clear
  messaging, never raise.
- Successful edits are recorded in an optional EditJournal so they can be
  replayed against another release of the same icon set.

Examples
--------
Basic usage:

    service = IconSetEditingService()
    result = service.rename_icon(icon_set, "home-outline", "home")
    if not result.success:
        print(result.message)

"""

from dataclasses import dataclass
import logging
from typing import Any, Dict, List, Optional

from icon_toolkit.config import ConfigManager
from icon_toolkit.core.icon_set import MAX_ALIAS_DEPTH, IconSet
from icon_toolkit.core.models.edit_journal import EditJournal
from icon_toolkit.core.utils import bump_version as _bump_version

__all__ = ["OperationResult", "IconSetEditingService"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OperationResult:
    """Result of an editing operation.

    Attributes
    ----------
    success
        Whether the operation completed successfully.
    message
        Human-readable summary suitable for logs or reports.
    details
        Optional structured details for diagnostics or caller logic.
    """
    success: bool
    message: str
    details: Optional[Dict[str, Any]] = None


class IconSetEditingService:
    """Encapsulates edit operations on an :class:`IconSet`.

    Parameters
    ----------
    journal
        Optional journal receiving every successful edit.
    config
        Optional ``icon_set`` configuration section; read from
        :class:`ConfigManager` when omitted.
    """

    def __init__(self, journal: Optional[EditJournal] = None,
                 config: Optional[Dict[str, Any]] = None) -> None:
        self.journal = journal
        if config is None:
            config = ConfigManager().get_analysis_config().get("icon_set", {})
        self._config: Dict[str, Any] = dict(config or {})
        self._logger = logging.getLogger(f"{__name__}.IconSetEditingService")

    @property
    def max_alias_depth(self) -> int:
        try:
            return int(self._config.get("max_alias_depth", MAX_ALIAS_DEPTH))
        except (TypeError, ValueError):
            logger.warning("Invalid max_alias_depth in config, using %d", MAX_ALIAS_DEPTH)
            return MAX_ALIAS_DEPTH

    def load(self, data: Dict[str, Any]) -> IconSet:
        """Create an IconSet using the configured alias depth."""
        return IconSet(data, max_alias_depth=self.max_alias_depth)

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def rename_icon(self, icon_set: IconSet, old_name: str, new_name: str,
                    record: bool = True) -> OperationResult:
        """Rename an icon or alias; dependents follow the new name."""
        logger.info("Edit: rename_icon old=%s new=%s", old_name, new_name)
        if not new_name or not new_name.strip():
            return OperationResult(False, "New name must not be empty.", {"old_name": old_name})
        if old_name not in icon_set.entries:
            logger.warning("Edit FAIL: rename_icon not_found name=%s", old_name)
            return OperationResult(False, f"Icon not found: '{old_name}'.", {"old_name": old_name})
        if new_name in icon_set.entries:
            logger.warning("Edit FAIL: rename_icon name_taken name=%s", new_name)
            return OperationResult(False, f"Name already used: '{new_name}'.", {"new_name": new_name})

        if not icon_set.rename(old_name, new_name):
            return OperationResult(False, f"Could not rename '{old_name}'.", {"old_name": old_name})

        if record and self.journal is not None:
            self.journal.record_edit("rename", {"old_name": old_name, "new_name": new_name})
        logger.info("Edit OK: rename_icon old=%s new=%s", old_name, new_name)
        return OperationResult(True, f"Renamed '{old_name}' to '{new_name}'.",
                               {"old_name": old_name, "new_name": new_name})

    def remove_icons(self, icon_set: IconSet, names: List[str],
                     record: bool = True) -> OperationResult:
        """Remove icons or aliases together with every alias depending on them.

        Names that no longer exist (e.g. already removed as a dependent of an
        earlier name in the list) are reported in ``details["missing"]``.
        The operation fails only if nothing was removed.
        """
        logger.info("Edit: remove_icons count=%d", len(names or []))
        if not names:
            return OperationResult(False, "No icons selected for removal.", {"names": []})

        removed = 0
        missing: List[str] = []
        for name in names:
            count = icon_set.remove(name)
            if count:
                removed += count
            else:
                missing.append(name)

        if not removed:
            logger.warning("Edit FAIL: remove_icons nothing_removed names=%s", names)
            return OperationResult(False, "None of the selected icons exist.", {"missing": missing})

        if record and self.journal is not None:
            self.journal.record_edit("remove", {"names": list(names)})
        logger.info("Edit OK: remove_icons removed=%d missing=%d", removed, len(missing))
        return OperationResult(True, f"Removed {removed} entries.",
                               {"removed": removed, "missing": missing})

    def export_icon_set(self, icon_set: IconSet, validate: bool = True,
                        bump_version: Optional[bool] = None) -> OperationResult:
        """Export the icon set; the record is in ``details["data"]``.

        Dropped items are listed in ``details["dropped"]``. With
        *bump_version* (default from config), ``info.version`` is bumped in
        the exported record when present.
        """
        if bump_version is None:
            bump_version = bool(self._config.get("bump_version_on_export", False))

        dropped: List[str] = []
        data = icon_set.export(validate, report=dropped)

        info = data.get("info")
        if bump_version and isinstance(info, dict) and isinstance(info.get("version"), str):
            old_version = info["version"]
            info["version"] = _bump_version(old_version)
            logger.info("Export: bumped version %s -> %s", old_version, info["version"])

        if dropped:
            logger.info("Export: dropped %d invalid items from '%s'", len(dropped), icon_set.prefix)
        return OperationResult(True, f"Exported {len(data['icons'])} icons.",
                               {"data": data, "dropped": dropped})
