from __future__ import annotations

"""In-memory icon set with alias resolution.

An :class:`IconSet` is loaded from an Iconify JSON record, edited in place
(``rename``, ``remove``, ``set_icon``, ``set_alias``) and exported back to a
new record. Inconsistent data (aliases pointing to missing icons, alias
cycles, categories naming aliases) never raises: it resolves to ``None`` and
is dropped by a validating export.
"""

import copy
import json
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set

from icon_toolkit.core.models.icons import (
    DEFAULT_DIMENSIONS,
    DEFAULT_TRANSFORMATIONS,
    AliasRecord,
    IconEntry,
    IconRecord,
    ResolvedIcon,
)

__all__ = ["IconSet", "MAX_ALIAS_DEPTH", "ENTRY_TYPES"]

logger = logging.getLogger(__name__)

MAX_ALIAS_DEPTH = 5

ENTRY_TYPES = ("icon", "variation", "alias")

# Top-level keys owned by the icon set; everything else is passed through
_OWN_KEYS = ("icons", "aliases", "chars", "categories")


class IconSet:
    """Mutable icon set.

    Parameters
    ----------
    data
        Iconify JSON record. It is copied, never modified.
    max_alias_depth
        Default depth bound for :meth:`resolve`.

    Notes
    -----
    Names are unique across icons and aliases: an alias that reuses the name
    of an icon is ignored on import. Insertion order is preserved, icons
    first, then aliases.
    """

    def __init__(self, data: Optional[Mapping[str, Any]] = None,
                 max_alias_depth: int = MAX_ALIAS_DEPTH) -> None:
        self.max_alias_depth = max_alias_depth
        self.prefix: Optional[str] = None
        self.metadata: Dict[str, Any] = {}
        self.entries: Dict[str, IconEntry] = {}
        self._chars: Dict[str, str] = {}
        self._categories: Dict[str, List[str]] = {}
        self.load(data or {})

    # ------------------------------------------------------------------
    # Import
    # ------------------------------------------------------------------
    def load(self, data: Mapping[str, Any]) -> None:
        """Replace the whole content with *data*."""
        prefix = data.get("prefix")
        self.prefix = None if prefix is None else str(prefix)
        self.metadata = {
            k: copy.deepcopy(v) for k, v in data.items()
            if k not in _OWN_KEYS and k != "prefix"
        }
        self.entries = {}

        for name, icon_data in (data.get("icons") or {}).items():
            if isinstance(icon_data, Mapping):
                self.entries[name] = IconRecord.from_dict(copy.deepcopy(dict(icon_data)))

        for name, alias_data in (data.get("aliases") or {}).items():
            if not isinstance(alias_data, Mapping):
                continue
            if name in self.entries:
                logger.debug("Ignoring alias '%s': name is already used by an icon", name)
                continue
            self.entries[name] = AliasRecord.from_dict(copy.deepcopy(dict(alias_data)))

        self._chars = {str(k): str(v) for k, v in (data.get("chars") or {}).items()}
        self._categories = {
            str(title): [str(n) for n in names]
            for title, names in (data.get("categories") or {}).items()
            if isinstance(names, (list, tuple))
        }
        logger.debug(
            "Loaded icon set '%s': %d entries, %d chars, %d categories",
            self.prefix, len(self.entries), len(self._chars), len(self._categories),
        )

    @classmethod
    def from_json(cls, text: str, max_alias_depth: int = MAX_ALIAS_DEPTH) -> "IconSet":
        return cls(json.loads(text), max_alias_depth=max_alias_depth)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    @property
    def defaults(self) -> Dict[str, Any]:
        """Box defaults for icons: set-level values over global defaults."""
        result: Dict[str, Any] = dict(DEFAULT_DIMENSIONS)
        for key in DEFAULT_DIMENSIONS:
            if key in self.metadata:
                result[key] = self.metadata[key]
        return result

    @property
    def chars(self) -> Dict[str, str]:
        return dict(self._chars)

    @property
    def categories(self) -> Dict[str, List[str]]:
        return {title: list(names) for title, names in self._categories.items()}

    def entry_type(self, name: str) -> Optional[str]:
        """Return "icon", "variation", "alias" or None if *name* is unknown."""
        entry = self.entries.get(name)
        if entry is None:
            return None
        if isinstance(entry, IconRecord):
            return "icon"
        return "variation" if entry.is_variation else "alias"

    def is_variation(self, name: str) -> bool:
        return self.entry_type(name) == "variation"

    def list(self, types: Sequence[str] = ("icon",), include_hidden: bool = False) -> List[str]:
        """Return entry names of the given *types* in insertion order.

        Hidden entries are skipped unless *include_hidden* is set. Aliases that
        do not resolve are never listed.
        """
        result: List[str] = []
        for name in self.entries:
            entry_type = self.entry_type(name)
            if entry_type not in types:
                continue
            if entry_type != "icon" and self.resolve(name) is None:
                continue
            if not include_hidden and self.is_hidden(name):
                continue
            result.append(name)
        return result

    def count(self) -> int:
        """Return the number of visible icons."""
        return len(self.list())

    def exists(self, name: str) -> bool:
        """Return True for an icon or an alias that resolves, hidden or not."""
        entry = self.entries.get(name)
        if entry is None:
            return False
        if isinstance(entry, IconRecord):
            return True
        return self.resolve(name) is not None

    def is_hidden(self, name: str, max_depth: Optional[int] = None) -> bool:
        """Return True if *name* is hidden.

        An alias without its own ``hidden`` value inherits it from its parent.
        """
        if max_depth is None:
            max_depth = self.max_alias_depth
        depth = 0
        entry = self.entries.get(name)
        while entry is not None:
            if entry.hidden is not None:
                return bool(entry.hidden)
            if isinstance(entry, IconRecord):
                return False
            if depth > max_depth:
                return False
            depth += 1
            entry = self.entries.get(entry.parent)
        return False

    def resolve(self, name: str, max_depth: Optional[int] = None) -> Optional[ResolvedIcon]:
        """Return icon data for *name*, following aliases.

        Each alias hop increases the depth, starting at 0 for *name* itself.
        Resolution fails once an alias is reached at a depth above
        *max_depth*, which bounds both alias cycles and overly long chains.
        Returns None for unknown names, missing parents and exceeded depth.
        """
        if max_depth is None:
            max_depth = self.max_alias_depth
        return self._resolve(name, 0, max_depth)

    def _resolve(self, name: str, depth: int, max_depth: int) -> Optional[ResolvedIcon]:
        entry = self.entries.get(name)
        if entry is None:
            return None
        if isinstance(entry, IconRecord):
            return ResolvedIcon.from_icon(entry, self.defaults)
        if depth > max_depth:
            logger.debug("Alias '%s' exceeds depth %d", name, max_depth)
            return None
        parent = self._resolve(entry.parent, depth + 1, max_depth)
        if parent is None:
            return None
        return parent.merge_alias(entry)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def _dependents(self, name: str) -> List[str]:
        """Return every alias chained through *name*, at any depth."""
        found: List[str] = []
        seen: Set[str] = {name}
        queue = [name]
        while queue:
            current = queue.pop(0)
            for alias_name, entry in self.entries.items():
                if alias_name in seen or not isinstance(entry, AliasRecord):
                    continue
                if entry.parent == current:
                    seen.add(alias_name)
                    found.append(alias_name)
                    queue.append(alias_name)
        return found

    def remove(self, name: str) -> int:
        """Remove *name* and every alias depending on it.

        Returns the number of removed entries, 0 if *name* does not exist.
        Character codes and category memberships of removed names are dropped.
        """
        if name not in self.entries:
            return 0
        removed = [name] + self._dependents(name)
        for item in removed:
            del self.entries[item]
        self._forget_names(set(removed))
        logger.debug("Removed '%s' with %d dependent aliases", name, len(removed) - 1)
        return len(removed)

    def _forget_names(self, names: Set[str]) -> None:
        self._chars = {code: n for code, n in self._chars.items() if n not in names}
        for title, members in self._categories.items():
            self._categories[title] = [n for n in members if n not in names]

    def rename(self, old_name: str, new_name: str) -> bool:
        """Rename an icon or alias, keeping its position.

        Fails without changes if *old_name* does not exist or *new_name* is
        already used. Aliases, character codes and categories that referenced
        *old_name* are updated.
        """
        if old_name not in self.entries or new_name in self.entries:
            return False
        self.entries = {
            (new_name if name == old_name else name): entry
            for name, entry in self.entries.items()
        }
        for entry in self.entries.values():
            if isinstance(entry, AliasRecord) and entry.parent == old_name:
                entry.parent = new_name
        self._chars = {
            code: (new_name if n == old_name else n) for code, n in self._chars.items()
        }
        for title, members in self._categories.items():
            self._categories[title] = [new_name if n == old_name else n for n in members]
        logger.debug("Renamed '%s' to '%s'", old_name, new_name)
        return True

    def set_icon(self, name: str, icon: IconRecord) -> None:
        """Add an icon or replace the entry called *name*."""
        self.entries[name] = icon

    def set_alias(self, name: str, parent: str, **overrides: Any) -> bool:
        """Add or replace an alias. Fails if *parent* does not exist.

        *overrides* uses record attribute names (``h_flip``, ``rotate``...).
        """
        if parent not in self.entries or parent == name:
            return False
        self.entries[name] = AliasRecord(parent=parent, **overrides)
        return True

    def set_char(self, code: str, name: str) -> None:
        self._chars[code] = name

    def set_category(self, title: str, names: Iterable[str]) -> None:
        self._categories[title] = list(names)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------
    def export(self, validate: bool = True, report: Optional[List[str]] = None) -> Dict[str, Any]:
        """Export current content as a new Iconify JSON record.

        With *validate*, aliases that do not resolve are left out, along with
        character codes pointing to names that were not exported. Categories
        always list only visible icons; empty categories are omitted.

        If a *report* list is given, one message per dropped item is appended.
        """
        defaults = {**self.defaults, **DEFAULT_TRANSFORMATIONS}
        icons: Dict[str, Any] = {}
        aliases: Dict[str, Any] = {}
        for name, entry in self.entries.items():
            if isinstance(entry, IconRecord):
                icons[name] = entry.to_dict(defaults)
                continue
            if validate and self.resolve(name) is None:
                _note(report, f"alias '{name}' does not resolve")
                continue
            aliases[name] = entry.to_dict()

        result: Dict[str, Any] = {}
        if self.prefix is not None:
            result["prefix"] = self.prefix
        result.update(copy.deepcopy(self.metadata))
        result["icons"] = icons
        if aliases:
            result["aliases"] = aliases

        chars: Dict[str, str] = {}
        for code, name in self._chars.items():
            if validate and name not in icons and name not in aliases:
                _note(report, f"character '{code}' points to missing '{name}'")
                continue
            chars[code] = name
        if chars:
            result["chars"] = chars

        categories: Dict[str, List[str]] = {}
        for title, members in self._categories.items():
            valid = [n for n in members if n in icons and not self.is_hidden(n)]
            if len(valid) != len(members):
                _note(report, f"category '{title}': dropped {len(members) - len(valid)} names")
            if valid:
                categories[title] = valid
        if categories:
            result["categories"] = categories
        return result

    def snapshot(self) -> Dict[str, Any]:
        """Return the complete raw state as a record that :meth:`load` accepts.

        Unlike :meth:`export`, nothing is filtered: categories keep aliases,
        hidden icons and unknown names.
        """
        data = self.export(validate=False)
        categories = self.categories
        if categories:
            data["categories"] = categories
        else:
            data.pop("categories", None)
        return data

    def to_json(self, validate: bool = True, **kwargs: Any) -> str:
        return json.dumps(self.export(validate), **kwargs)


def _note(report: Optional[List[str]], message: str) -> None:
    logger.debug("Export drop: %s", message)
    if report is not None:
        report.append(message)
