from __future__ import annotations

"""Data structures produced by the SVG structure analyser.

The analyser keeps its per-element annotations in a side table keyed by the
element index instead of attaching them to lxml nodes, so a result remains
valid after the tree it was computed from is modified or discarded.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

__all__ = [
    "ReusableElement",
    "IdentifierGroup",
    "ReferenceEdge",
    "AnalysedElement",
    "SVGStructure",
]


@dataclass(frozen=True)
class ReusableElement:
    """Nearest reusable ancestor (or the element itself) of an element."""

    id: str
    is_mask: bool
    index: int


@dataclass
class IdentifierGroup:
    """Set of element indexes that belong to the subtree of one id.

    The same instance is shared by every member, so adding an index while
    walking down the tree is visible from all of them.
    """

    id: str
    is_mask: bool
    indexes: Set[int] = field(default_factory=set)


@dataclass(frozen=True)
class ReferenceEdge:
    """Element ``used_by_index`` references ``id``.

    ``used_as_mask`` is True for clip-path and mask references, False for
    paint, marker, filter and ``<use>`` references.
    """

    id: str
    used_by_index: int
    used_as_mask: bool


@dataclass
class AnalysedElement:
    """Annotations for one element of the analysed tree.

    Attributes
    ----------
    index
        1-based position in document order, unique within one analysis.
    tag_name
        Local tag name.
    attribs
        Copy of the element attributes, namespaced names normalised.
    parent_index
        Index of the parent element, None for the root.
    id
        Id this element was registered under, if any.
    reusable
        Reusable element this element is part of, if any.
    belongs_to
        Every id group this element is a member of.
    links_to
        Outgoing references.
    used_as_paint, used_as_mask
        Usage classification. Only ever switched from False to True.
    """

    index: int
    tag_name: str
    attribs: Dict[str, str] = field(default_factory=dict)
    parent_index: Optional[int] = None
    id: Optional[str] = None
    reusable: Optional[ReusableElement] = None
    belongs_to: List[IdentifierGroup] = field(default_factory=list)
    links_to: List[ReferenceEdge] = field(default_factory=list)
    used_as_paint: bool = False
    used_as_mask: bool = False

    def group_for(self, element_id: str) -> Optional[IdentifierGroup]:
        for group in self.belongs_to:
            if group.id == element_id:
                return group
        return None

    @property
    def is_used(self) -> bool:
        return self.used_as_paint or self.used_as_mask


@dataclass(frozen=True)
class SVGStructure:
    """Result of one structure analysis.

    Attributes
    ----------
    elements
        Mapping of element index to its annotations, in document order.
    ids
        Mapping of id to the index of the element that owns it.
    links
        Every reference found in the document, in document order.
    """

    elements: Dict[int, AnalysedElement] = field(default_factory=dict)
    ids: Dict[str, int] = field(default_factory=dict)
    links: List[ReferenceEdge] = field(default_factory=list)

    def element_for_id(self, element_id: str) -> Optional[AnalysedElement]:
        index = self.ids.get(element_id)
        if index is None:
            return None
        return self.elements[index]

    def dangling_links(self) -> List[ReferenceEdge]:
        """Return references to ids that no element owns."""
        return [link for link in self.links if link.id not in self.ids]

    def unused_ids(self) -> List[str]:
        """Return ids whose element is neither rendered nor used as a mask."""
        return [
            element_id
            for element_id, index in self.ids.items()
            if not self.elements[index].is_used
        ]

    def children_of(self, index: int) -> List[AnalysedElement]:
        return [el for el in self.elements.values() if el.parent_index == index]
