from __future__ import annotations

"""Thin wrapper around an lxml SVG tree.

Parsing markup is delegated to lxml; this module only provides the pieces the
analyser needs: a document object that can be (re)loaded and serialised, and
a pre-order traversal yielding each element with its ancestor chain.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Union

from lxml import etree as ET

__all__ = ["SVGDocument", "TraversalItem", "iter_tree", "local_name", "element_attributes"]

logger = logging.getLogger(__name__)

_NAMESPACE_PREFIXES: Dict[str, str] = {
    "http://www.w3.org/1999/xlink": "xlink",
    "http://www.w3.org/XML/1998/namespace": "xml",
}


def _make_parser() -> ET.XMLParser:
    return ET.XMLParser(resolve_entities=False, no_network=True, remove_comments=False)


def local_name(tag: str) -> str:
    """Return *tag* without its ``{namespace}`` part."""
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


def _attribute_name(key: str) -> str:
    if not key.startswith("{"):
        return key
    namespace, name = key[1:].split("}", 1)
    prefix = _NAMESPACE_PREFIXES.get(namespace)
    return f"{prefix}:{name}" if prefix else name


def element_attributes(element: ET._Element) -> Dict[str, str]:
    """Return a plain dict of the element's attributes with normalised names."""
    return {_attribute_name(str(k)): str(v) for k, v in element.attrib.items()}


@dataclass
class TraversalItem:
    """One element reached during traversal.

    Attributes
    ----------
    element
        The lxml element.
    tag_name
        Local tag name, without namespace.
    parents
        Ancestor items, nearest first. Empty for the root element.
    index
        Position assigned by the consumer of the traversal, 0 until set.
    """

    element: ET._Element
    tag_name: str
    parents: List["TraversalItem"] = field(default_factory=list)
    index: int = 0


def iter_tree(root: ET._Element) -> Iterator[TraversalItem]:
    """Yield every element below and including *root* in document order.

    Comments, processing instructions and entities are skipped.
    """

    def walk(element: ET._Element, parents: List[TraversalItem]) -> Iterator[TraversalItem]:
        item = TraversalItem(element, local_name(element.tag), parents)
        yield item
        child_parents = [item] + parents
        for child in element:
            if not isinstance(child.tag, str):
                continue
            yield from walk(child, child_parents)

    if not isinstance(root.tag, str):
        return
    yield from walk(root, [])


class SVGDocument:
    """Mutable SVG document backed by an lxml tree.

    Examples
    --------
    >>> doc = SVGDocument('<svg xmlns="http://www.w3.org/2000/svg"><path d="M0 0"/></svg>')
    >>> local_name(doc.root.tag)
    'svg'
    """

    def __init__(self, content: Union[str, bytes]) -> None:
        self._root: ET._Element
        self.load(content)

    @classmethod
    def from_element(cls, root: ET._Element) -> "SVGDocument":
        """Wrap an existing lxml tree without copying it."""
        doc = cls.__new__(cls)
        doc._root = root
        return doc

    @property
    def root(self) -> ET._Element:
        return self._root

    def load(self, content: Union[str, bytes]) -> None:
        """Replace the document tree by parsing *content*."""
        if isinstance(content, str):
            content = content.encode("utf-8")
        self._root = ET.fromstring(content, _make_parser())
        logger.debug("Loaded SVG document <%s>", local_name(self._root.tag))

    def to_string(self) -> str:
        return ET.tostring(self._root, encoding="unicode")
