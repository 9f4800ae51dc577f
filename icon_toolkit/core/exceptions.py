from __future__ import annotations

"""Exception classes raised by the icon toolkit core.

Only structural problems in an SVG document are reported as exceptions.
Inconsistent icon set data never raises: it surfaces as a ``None``
resolution or as an entry dropped on export.
"""

from typing import Optional

__all__ = ["IconToolkitError", "StructuralError"]


class IconToolkitError(Exception):
    """Base exception for all toolkit errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.cause = cause


class StructuralError(IconToolkitError):
    """Raised when an SVG document cannot be analysed.

    This covers duplicate ids, reusable elements without an id, reusable
    elements nested inside other reusable elements and broken ``<use>``
    references. The whole document must be treated as unanalysable.
    """

    def __init__(self, message: str, element: Optional[str] = None,
                 cause: Optional[Exception] = None) -> None:
        super().__init__(message, cause)
        self.element = element
