from __future__ import annotations

"""Structure analysis for SVG documents.

Finds every element with an id, every reference to an id and classifies each
element as used for paint and/or used as a mask (clip path, mask). Callers
use the result to decide which definitions are dead and which must be kept.

Before running the analysis, run the cleanup passes that convert inline style
to attributes: only attributes are inspected.

The analysis never modifies the tree. All annotations live in the returned
:class:`SVGStructure`, keyed by element index, so analysing the same tree
twice always starts from a clean state.

Examples
--------

    doc = SVGDocument(svg_text)
    structure = analyse_svg_structure(doc)
    for element_id in structure.unused_ids():
        print("unused", element_id)

"""

from dataclasses import dataclass
import logging
from typing import Dict, List, Optional, Union

from lxml import etree as ET

from icon_toolkit.core.exceptions import StructuralError
from icon_toolkit.core.models import (
    AnalysedElement,
    IdentifierGroup,
    ReferenceEdge,
    ReusableElement,
    SVGStructure,
)
from icon_toolkit.core.parser.svg_data import (
    DEFS_TAGS,
    HREF_ATTRIBUTES,
    MASK_TAGS,
    REFERENCE_ATTRIBUTES,
    REUSABLE_TAGS_WITH_PALETTE,
    USE_TAGS,
)
from icon_toolkit.core.parser.svg_document import (
    SVGDocument,
    TraversalItem,
    element_attributes,
    iter_tree,
)
from icon_toolkit.core.utils import describe_element, parse_url_reference

__all__ = [
    "analyse_svg_structure",
    "propagate_usage",
    "element_nodes",
    "AnalysisSummary",
    "StructureAnalysisService",
]

logger = logging.getLogger(__name__)

SVGSource = Union[SVGDocument, ET._Element]


def _root_of(source: SVGSource) -> ET._Element:
    if isinstance(source, SVGDocument):
        return source.root
    return source


class _StructureBuilder:
    """Single traversal collecting elements, ids and references."""

    def __init__(self) -> None:
        self.elements: Dict[int, AnalysedElement] = {}
        self.ids: Dict[str, int] = {}
        self.links: List[ReferenceEdge] = []

    # ------------------------------------------------------------------
    # Registration helpers
    # ------------------------------------------------------------------
    def _add_id(self, element: AnalysedElement, element_id: str) -> None:
        if element_id in self.ids:
            raise StructuralError(
                f'Duplicate id "{element_id}"',
                describe_element(element.tag_name, element.attribs),
            )
        element.id = element_id
        self.ids[element_id] = element.index

    def _add_id_group(self, element: AnalysedElement, element_id: str, is_mask: bool) -> None:
        self._add_id(element, element_id)
        element.belongs_to.append(IdentifierGroup(element_id, is_mask, {element.index}))

    def _add_reusable(self, element: AnalysedElement, is_mask: bool) -> None:
        element_id = element.attribs.get("id")
        if element_id is None:
            description = describe_element(element.tag_name, element.attribs)
            raise StructuralError(f"Definition element {description} does not have id", description)
        element.reusable = ReusableElement(element_id, is_mask, element.index)
        self._add_id_group(element, element_id, is_mask)

    def _add_reference(self, element: AnalysedElement, element_id: str, used_as_mask: bool) -> None:
        link = ReferenceEdge(element_id, element.index, used_as_mask)
        self.links.append(link)
        element.links_to.append(link)

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------
    def visit(self, item: TraversalItem, index: int) -> None:
        item.index = index
        tag_name = item.tag_name
        parent: Optional[AnalysedElement] = None
        if item.parents:
            parent = self.elements[item.parents[0].index]

        element = AnalysedElement(
            index=index,
            tag_name=tag_name,
            attribs=element_attributes(item.element),
            parent_index=parent.index if parent is not None else None,
        )
        self.elements[index] = element

        if parent is None:
            # Root element is always rendered
            element.used_as_paint = True
            return

        if tag_name in MASK_TAGS:
            self._add_reusable(element, True)
        elif tag_name in REUSABLE_TAGS_WITH_PALETTE:
            self._add_reusable(element, False)
        elif parent.tag_name in DEFS_TAGS:
            # Symbol without <symbol> tag
            self._add_reusable(element, False)
        elif tag_name not in DEFS_TAGS:
            self._inherit_from_parent(element, parent)

        if tag_name in USE_TAGS:
            self._add_reference(element, self._use_target(element), False)
            return

        for attr, value in element.attribs.items():
            kind = REFERENCE_ATTRIBUTES.get(attr)
            if kind is None:
                continue
            target_id = parse_url_reference(value)
            if target_id is None:
                continue
            self._add_reference(element, target_id, kind.used_as_mask)

    def _inherit_from_parent(self, element: AnalysedElement, parent: AnalysedElement) -> None:
        element.used_as_mask = parent.used_as_mask
        element.used_as_paint = parent.used_as_paint

        if parent.reusable is not None:
            # visit() never registers a reusable before inheriting, so this
            # only fires if that order changes.
            if element.reusable is not None:
                description = describe_element(element.tag_name, element.attribs)
                raise StructuralError(
                    f'Reusable element {description} is inside another reusable '
                    f'element id="{parent.reusable.id}"',
                    description,
                )
            element.reusable = parent.reusable

        for group in parent.belongs_to:
            group.indexes.add(element.index)
            element.belongs_to.append(group)

        if element.id is None:
            own_id = element.attribs.get("id")
            if own_id is not None:
                self._add_id_group(element, own_id, False)

    @staticmethod
    def _use_target(element: AnalysedElement) -> str:
        description = describe_element(element.tag_name, element.attribs)
        for attr in HREF_ATTRIBUTES:
            href = element.attribs.get(attr)
            if href is None:
                continue
            if not href.startswith("#"):
                raise StructuralError(f"Invalid link in {description}", description)
            return href[1:]
        raise StructuralError(f'Missing "href" attribute in {description}', description)


# ----------------------------------------------------------------------
# Usage propagation
# ----------------------------------------------------------------------

def _mark_usage(structure: SVGStructure, flag: str, target: AnalysedElement) -> List[AnalysedElement]:
    """Set *flag* on every member of the target's own id group.

    Returns the elements that changed. Nothing is marked if the target
    already has the flag.
    """
    if getattr(target, flag) or target.id is None:
        return []
    group = target.group_for(target.id)
    if group is None:
        return []
    changed: List[AnalysedElement] = []
    for index in sorted(group.indexes):
        member = structure.elements[index]
        if not getattr(member, flag):
            setattr(member, flag, True)
            changed.append(member)
    return changed


def _target_of(structure: SVGStructure, link: ReferenceEdge) -> Optional[AnalysedElement]:
    index = structure.ids.get(link.id)
    if index is None:
        return None
    return structure.elements[index]


def _propagate_paint(structure: SVGStructure) -> int:
    changes = 0
    frontier = [el for el in structure.elements.values() if el.used_as_paint]
    while frontier:
        added: List[AnalysedElement] = []
        for item in frontier:
            for link in item.links_to:
                target = _target_of(structure, link)
                if target is None:
                    continue
                if not link.used_as_mask and item.used_as_paint:
                    added.extend(_mark_usage(structure, "used_as_paint", target))
                if link.used_as_mask or item.used_as_mask:
                    changes += len(_mark_usage(structure, "used_as_mask", target))
        changes += len(added)
        frontier = added
    return changes


def _propagate_mask(structure: SVGStructure) -> int:
    # Anything referenced from a mask is part of the mask, whatever the
    # capacity of the reference.
    changes = 0
    frontier = [el for el in structure.elements.values() if el.used_as_mask]
    while frontier:
        added: List[AnalysedElement] = []
        for item in frontier:
            for link in item.links_to:
                target = _target_of(structure, link)
                if target is None:
                    continue
                added.extend(_mark_usage(structure, "used_as_mask", target))
        changes += len(added)
        frontier = added
    return changes


def propagate_usage(structure: SVGStructure) -> int:
    """Propagate paint and mask usage along references until nothing changes.

    Flags are only ever set, never cleared, so both passes terminate. Returns
    the number of flags that were set; running it again on its own output
    returns 0.
    """
    if not structure.ids:
        return 0
    return _propagate_paint(structure) + _propagate_mask(structure)


# ----------------------------------------------------------------------
# Public API
# ----------------------------------------------------------------------

def analyse_svg_structure(source: SVGSource) -> SVGStructure:
    """Analyse ids, references and usage of every element in *source*.

    Parameters
    ----------
    source
        An :class:`SVGDocument` or the root element of an lxml tree.

    Returns
    -------
    SVGStructure
        Elements indexed 1..N in document order, id table and references.

    Raises
    ------
    StructuralError
        For duplicate ids, definitions without an id and broken ``<use>``
        links.
    """
    builder = _StructureBuilder()
    for index, item in enumerate(iter_tree(_root_of(source)), start=1):
        builder.visit(item, index)

    structure = SVGStructure(elements=builder.elements, ids=builder.ids, links=builder.links)
    if not structure.ids:
        return structure

    propagate_usage(structure)
    return structure


def element_nodes(source: SVGSource) -> Dict[int, ET._Element]:
    """Map element indexes to lxml nodes using the analyser's traversal order.

    Only meaningful for a tree that has not been restructured since it was
    analysed.
    """
    return {
        index: item.element
        for index, item in enumerate(iter_tree(_root_of(source)), start=1)
    }


@dataclass(frozen=True)
class AnalysisSummary:
    """Counts describing one analysis, suitable for logs or reports."""
    elements: int
    ids: int
    links: int
    unused_ids: List[str]
    dangling_links: int


class StructureAnalysisService:
    """Runs structure analysis with logging and summaries.

    Errors are not swallowed: a :class:`StructuralError` means the document
    cannot be processed and is propagated after being logged.
    """

    def __init__(self) -> None:
        self._logger = logging.getLogger(f"{__name__}.StructureAnalysisService")

    def analyse(self, source: SVGSource) -> SVGStructure:
        try:
            structure = analyse_svg_structure(source)
        except StructuralError as exc:
            self._logger.warning("Analysis FAIL: %s", exc)
            raise
        self._logger.debug(
            "Analysis OK: elements=%d ids=%d links=%d",
            len(structure.elements), len(structure.ids), len(structure.links),
        )
        return structure

    def summarize(self, structure: SVGStructure) -> AnalysisSummary:
        return AnalysisSummary(
            elements=len(structure.elements),
            ids=len(structure.ids),
            links=len(structure.links),
            unused_ids=structure.unused_ids(),
            dangling_links=len(structure.dangling_links()),
        )
