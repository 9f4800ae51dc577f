from __future__ import annotations

"""SVG document wrapper and static SVG data tables."""

from .svg_document import SVGDocument, TraversalItem, iter_tree  # noqa: F401
from .svg_data import ReferenceKind  # noqa: F401

__all__: list[str] = [
    "SVGDocument",
    "TraversalItem",
    "iter_tree",
    "ReferenceKind",
]
