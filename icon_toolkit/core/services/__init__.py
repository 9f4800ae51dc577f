from __future__ import annotations

"""High-level services: structure analysis, icon set editing, undo/redo."""

from .structure_analysis_service import StructureAnalysisService, analyse_svg_structure  # noqa: F401
from .icon_set_editing_service import IconSetEditingService, OperationResult  # noqa: F401
from .undo_service import UndoService  # noqa: F401

__all__: list[str] = [
    "StructureAnalysisService",
    "analyse_svg_structure",
    "IconSetEditingService",
    "OperationResult",
    "UndoService",
]
