"""Top-level package for the icon toolkit.

Front-ends (CLI, build scripts) should only depend on the public API exposed
here rather than importing internal modules directly.
"""

from .core.exceptions import StructuralError  # noqa: F401
from .core.icon_set import IconSet  # noqa: F401
from .core.parser.svg_document import SVGDocument  # noqa: F401
from .core.services.structure_analysis_service import analyse_svg_structure  # noqa: F401

__all__: list[str] = [
    "IconSet",
    "SVGDocument",
    "StructuralError",
    "analyse_svg_structure",
]
