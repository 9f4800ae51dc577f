from __future__ import annotations

"""Simple reusable helper functions.

These helpers are side-effect-free and contain no disk I/O; they can be
used across all layers of the toolkit.
"""

from typing import Mapping, Optional
import logging

__all__ = [
    "describe_element",
    "parse_url_reference",
    "bump_version",
]

logger = logging.getLogger(__name__)


def describe_element(tag_name: str, attribs: Optional[Mapping[str, str]] = None) -> str:
    """Return a short human-readable description of an element for messages.

    Examples:
        >>> describe_element("path")
        '<path>'
        >>> describe_element("use", {"id": "a"})
        '<use id="a">'
    """
    element_id = (attribs or {}).get("id")
    if isinstance(element_id, str):
        return f'<{tag_name} id="{element_id}">'
    return f"<{tag_name}>"


def parse_url_reference(value: str) -> Optional[str]:
    """Extract the id from a ``url(#id)`` attribute value.

    The ``url(#`` prefix is matched case-insensitively and the value must end
    with ``)``. Whitespace around the id is trimmed. Returns None for values
    that are not local url references.

    Examples:
        >>> parse_url_reference("url(#grad)")
        'grad'
        >>> parse_url_reference("URL(# grad )")
        'grad'
        >>> parse_url_reference("#fff") is None
        True
    """
    if not isinstance(value, str) or value[:5].lower() != "url(#":
        return None
    value = value[5:]
    if not value.endswith(")"):
        return None
    return value[:-1].strip()


def bump_version(version: str) -> str:
    """Increment the last part of a dotted version string.

    A numeric last part is incremented, anything else gets ``.1`` appended.

    Examples:
        >>> bump_version("1.0.9")
        '1.0.10'
        >>> bump_version("1.0.0-beta")
        '1.0.0-beta.1'
    """
    parts = version.split(".")
    last = parts.pop()
    if last.isascii() and last.isdigit() and str(int(last)) == last:
        parts.append(str(int(last) + 1))
    else:
        parts.append(last + ".1")
    return ".".join(parts)
