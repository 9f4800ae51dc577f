from __future__ import annotations

"""Static SVG tag and attribute tables used by the structure analyser.

The tables are plain data so the analyser never branches on attribute names
directly: every ``url(#id)`` attribute is looked up in
:data:`REFERENCE_ATTRIBUTES` and dispatched on the returned kind.
"""

from enum import Enum
from typing import Dict, FrozenSet

__all__ = [
    "ReferenceKind",
    "DEFS_TAGS",
    "MASK_TAGS",
    "USE_TAGS",
    "REUSABLE_TAGS_WITH_PALETTE",
    "COLOR_ATTRIBUTES",
    "MARKER_ATTRIBUTES",
    "URL_ATTRIBUTES",
    "REFERENCE_ATTRIBUTES",
    "HREF_ATTRIBUTES",
]


class ReferenceKind(Enum):
    """Capacity in which an attribute references another element."""

    MASK = "mask"
    FILTER = "filter"
    PAINT = "paint"
    MARKER = "marker"

    @property
    def used_as_mask(self) -> bool:
        return self is ReferenceKind.MASK


# Tags
DEFS_TAGS: FrozenSet[str] = frozenset({"defs"})
MASK_TAGS: FrozenSet[str] = frozenset({"clipPath", "mask"})
USE_TAGS: FrozenSet[str] = frozenset({"use"})

GRADIENT_TAGS: FrozenSet[str] = frozenset({"linearGradient", "radialGradient"})
REUSABLE_TAGS_WITH_PALETTE: FrozenSet[str] = GRADIENT_TAGS | frozenset(
    {"pattern", "marker", "symbol", "filter"}
)

# Attributes
COLOR_ATTRIBUTES: FrozenSet[str] = frozenset(
    {"color", "fill", "stroke", "stop-color", "flood-color"}
)
MARKER_ATTRIBUTES: FrozenSet[str] = frozenset(
    {"marker", "marker-start", "marker-mid", "marker-end"}
)
URL_ATTRIBUTES: FrozenSet[str] = frozenset({"clip-path", "mask", "filter"})


def _build_reference_table() -> Dict[str, ReferenceKind]:
    table: Dict[str, ReferenceKind] = {}
    for attr in COLOR_ATTRIBUTES:
        table[attr] = ReferenceKind.PAINT
    for attr in MARKER_ATTRIBUTES:
        table[attr] = ReferenceKind.MARKER
    for attr in URL_ATTRIBUTES:
        # filter is applied to the painted element, it does not clip it
        table[attr] = ReferenceKind.FILTER if attr == "filter" else ReferenceKind.MASK
    return table


REFERENCE_ATTRIBUTES: Dict[str, ReferenceKind] = _build_reference_table()

# Checked in order
HREF_ATTRIBUTES = ("href", "xlink:href")
