from .assembler import (
    apply_table_decoration,
    assemble_sheet,
    assemble_table,
    calculate_table_width,
)
from .column_index import build_column_index, resolve_column
from .grid import SheetGrid
from .header_grid import build_nested_headers, plan_smart_merges
from .ingest import (
    normalize_cell_format,
    normalize_color,
    normalize_data_node,
    normalize_footer_node,
    normalize_header_node,
)
from .row_composer import place_data_row, place_footer_row
from .sink import SheetSink
from .span import calculate_col_span, calculate_max_depth, calculate_total_cols
from .spec import (
    CellType,
    ReportSheetCheck,
    ReportSheetLayout,
    ReportWorkbookCheck,
    SpecBuildStats,
    SpecCellFormat,
    SpecDataNode,
    SpecDataValidation,
    SpecFilterRange,
    SpecFooterNode,
    SpecFormula,
    SpecHeaderNode,
    SpecHyperlink,
    SpecMergeRegion,
    SpecTable,
    SpecThemeContext,
    SpecWorkbookMetadata,
    SpecWorksheetConfig,
)
from .workbook import WorkbookBuilder
from .worksheet import Worksheet

__all__ = [
    "CellType",
    "ReportSheetCheck",
    "ReportSheetLayout",
    "ReportWorkbookCheck",
    "SheetGrid",
    "SheetSink",
    "SpecBuildStats",
    "SpecCellFormat",
    "SpecDataNode",
    "SpecDataValidation",
    "SpecFilterRange",
    "SpecFooterNode",
    "SpecFormula",
    "SpecHeaderNode",
    "SpecHyperlink",
    "SpecMergeRegion",
    "SpecTable",
    "SpecThemeContext",
    "SpecWorkbookMetadata",
    "SpecWorksheetConfig",
    "WorkbookBuilder",
    "Worksheet",
    "apply_table_decoration",
    "assemble_sheet",
    "assemble_table",
    "build_column_index",
    "build_nested_headers",
    "calculate_col_span",
    "calculate_max_depth",
    "calculate_total_cols",
    "calculate_table_width",
    "normalize_cell_format",
    "normalize_color",
    "normalize_data_node",
    "normalize_footer_node",
    "normalize_header_node",
    "place_data_row",
    "place_footer_row",
    "plan_smart_merges",
    "resolve_column",
]
