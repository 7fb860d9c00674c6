from .cell import (
    CellType,
    SpecCellFormat,
    SpecDataValidation,
    SpecFormula,
    SpecHyperlink,
)
from .grid import (
    ReportSheetLayout,
    SpecCellAssignment,
    SpecFilterRange,
    SpecHeaderBlock,
    SpecMergeRegion,
)
from .node import SpecDataNode, SpecFooterNode, SpecHeaderNode
from .sheet import ReportSheetCheck, SpecThemeContext, SpecWorksheetConfig
from .table import SpecTable, SpecTableStaging
from .workbook import ReportWorkbookCheck, SpecBuildStats, SpecWorkbookMetadata

__all__ = [
    "CellType",
    "ReportSheetCheck",
    "ReportSheetLayout",
    "ReportWorkbookCheck",
    "SpecBuildStats",
    "SpecCellAssignment",
    "SpecCellFormat",
    "SpecDataNode",
    "SpecDataValidation",
    "SpecFilterRange",
    "SpecFooterNode",
    "SpecFormula",
    "SpecHeaderBlock",
    "SpecHeaderNode",
    "SpecHyperlink",
    "SpecMergeRegion",
    "SpecTable",
    "SpecTableStaging",
    "SpecThemeContext",
    "SpecWorkbookMetadata",
    "SpecWorksheetConfig",
]
