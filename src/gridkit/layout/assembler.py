from collections.abc import Sequence
from functools import reduce

from loguru import logger

from .column_index import build_column_index
from .conf import (
    DEFAULT_THEME,
    N_COL_FIRST,
    N_NCOLS_EXCEL_MAX,
    N_NROWS_EXCEL_MAX,
    N_ROW_FIRST,
)
from .grid import SheetGrid
from .header_grid import build_nested_headers
from .row_composer import place_data_row, place_footer_row
from .span import calculate_total_cols
from .spec import ReportSheetLayout, SpecCellFormat, SpecTable, SpecThemeContext
from .value import apply_cell_dimensions, convert_node_value


def calculate_table_width(table: SpecTable) -> int:
    """Column count of a table, driven by its sub-headers; at least 1."""
    return calculate_total_cols(table.sub_headers) or 1


def apply_table_decoration(
    grid: SheetGrid,
    *,
    row_start: int,
    row_end: int,
    n_cols: int,
    if_borders: bool,
    if_stripes: bool,
    theme: SpecThemeContext,
) -> int:
    """
    Overlay default borders and/or stripe fills on ``[row_start, row_end] x
    [1, n_cols]``.

    Stripes go on every second row counting from ``row_start`` (offsets 1, 3,
    ...). Cells with an explicit style are left untouched.

    Returns:
        int: Number of cells skipped because they carry an explicit style.
    """
    n_skipped = 0
    for _row in range(row_start, row_end + 1):
        b_stripe_row_ = if_stripes and (_row - row_start) % 2 == 1
        fmt_row_: SpecCellFormat | None = theme.fmt_border if if_borders else None
        if b_stripe_row_:
            fmt_row_ = (
                theme.fmt_stripe if fmt_row_ is None else fmt_row_.merge(theme.fmt_stripe)
            )
        if fmt_row_ is None:
            continue
        for _col in range(N_COL_FIRST, N_COL_FIRST + n_cols):
            if not grid.apply_table_style(_row, _col, fmt_row_):
                n_skipped += 1
    return n_skipped


def assemble_table(
    grid: SheetGrid,
    table: SpecTable,
    *,
    row_start: int,
    if_add_spacing: bool = False,
    theme: SpecThemeContext = DEFAULT_THEME,
    report: ReportSheetLayout | None = None,
) -> int:
    """
    Lay out one table starting at ``row_start`` and return the next row pointer.

    Order: spacing (when not the first table), title headers, nested
    sub-header block, body nodes, footer nodes, then the decoration overlay and
    the optional filter-range registration over the occupied rectangle.
    """
    n_row = row_start + (theme.rows_spacing if if_add_spacing else 0)
    n_row_table_start = n_row
    n_cols_table = calculate_table_width(table)

    for _header in table.headers:
        grid.set_cell(n_row, N_COL_FIRST, convert_node_value(_header), _header.style)
        if _header.merge_cell and n_cols_table > 1:
            grid.merge_range(n_row, N_COL_FIRST, n_row, n_cols_table)
        apply_cell_dimensions(grid, n_row, N_COL_FIRST, _header)
        n_row += 1

    if table.sub_headers:
        n_row = build_nested_headers(grid, table.sub_headers, row_start=n_row).row_next

    # rebuilt per table, never shared
    dict_column_index = build_column_index(table.sub_headers)
    for _node in table.body:
        n_row = place_data_row(
            grid, _node, row=n_row, column_index=dict_column_index, report=report
        )
    for _node in table.footers:
        n_row = place_footer_row(
            grid, _node, row=n_row, column_index=dict_column_index, report=report
        )

    n_row_table_end = grid.max_row_between(n_row_table_start, n_row)
    if n_row_table_end is None:
        logger.debug(f"Table {table.name!r} is empty, nothing to decorate.")
        return n_row

    if table.borders or table.stripes:
        n_skipped = apply_table_decoration(
            grid,
            row_start=n_row_table_start,
            row_end=n_row_table_end,
            n_cols=n_cols_table,
            if_borders=table.borders,
            if_stripes=table.stripes,
            theme=theme,
        )
        if n_skipped:
            logger.debug(
                f"Table {table.name!r}: kept explicit style on {n_skipped} cells."
            )

    if table.auto_filter:
        grid.register_filter_range(
            n_row_table_start, N_COL_FIRST, n_row_table_end, n_cols_table
        )

    logger.debug(
        f"Table {table.name!r}: rows {n_row_table_start}..{n_row_table_end}, "
        f"{n_cols_table} columns, next row {n_row}"
    )
    return n_row


def assemble_sheet(
    tables: Sequence[SpecTable],
    *,
    sheet_name: str,
    theme: SpecThemeContext = DEFAULT_THEME,
    row_start: int = N_ROW_FIRST,
) -> tuple[SheetGrid, ReportSheetLayout]:
    """
    Fold ``tables`` over a single row pointer into one fresh grid.

    Every table after the first is preceded by ``theme.rows_spacing`` blank rows.
    """
    grid = SheetGrid()
    report = ReportSheetLayout(sheet_name=sheet_name)

    def _fold_table(row: int, item: tuple[int, SpecTable]) -> int:
        n_idx, table = item
        return assemble_table(
            grid,
            table,
            row_start=row,
            if_add_spacing=n_idx > 0,
            theme=theme,
            report=report,
        )

    reduce(_fold_table, enumerate(tables), row_start)

    report.n_rows = grid.n_rows
    report.n_cols = grid.n_cols
    report.n_cells = len(grid.cells)
    report.n_merges = len(grid.merges)
    if report.n_rows > N_NROWS_EXCEL_MAX or report.n_cols > N_NCOLS_EXCEL_MAX:
        c_msg = (
            f"Sheet {sheet_name!r} spans {report.n_rows} rows x {report.n_cols} columns, "
            f"beyond the Excel limit of {N_NROWS_EXCEL_MAX} x {N_NCOLS_EXCEL_MAX}."
        )
        logger.warning(c_msg)
        report.warn(c_msg)
    return grid, report
