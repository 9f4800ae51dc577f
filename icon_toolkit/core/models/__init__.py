from __future__ import annotations

"""Shared data structures used across the icon toolkit core.

This package exposes dataclasses and value objects used by services and other
core layers. It is intentionally free of I/O code so that the contained
objects can be reused in any context (unit-tests, CLI, pipelines, etc.).
"""

from .structure import (  # noqa: F401
    AnalysedElement,
    IdentifierGroup,
    ReferenceEdge,
    ReusableElement,
    SVGStructure,
)
from .icons import AliasRecord, IconEntry, IconRecord, ResolvedIcon  # noqa: F401

__all__ = [
    "AnalysedElement",
    "IdentifierGroup",
    "ReferenceEdge",
    "ReusableElement",
    "SVGStructure",
    "AliasRecord",
    "IconEntry",
    "IconRecord",
    "ResolvedIcon",
]
