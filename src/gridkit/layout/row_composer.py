from collections.abc import Mapping, Sequence

from loguru import logger

from .column_index import resolve_column
from .conf import N_COL_FIRST
from .grid import SheetGrid
from .spec import ReportSheetLayout, SpecDataNode, SpecFooterNode
from .value import apply_cell_dimensions, convert_node_value


def _write_node(
    grid: SheetGrid, node: SpecDataNode | SpecFooterNode, *, row: int, col: int
) -> None:
    grid.set_cell(
        row,
        col,
        convert_node_value(node),
        node.style,
        num_format=node.num_format,
        comment=node.comment,
        validation=node.validation,
    )
    apply_cell_dimensions(grid, row, col, node)


def _resolve_main_column(
    node: SpecDataNode | SpecFooterNode,
    column_index: Mapping[str, int],
    *,
    row: int,
    report: ReportSheetLayout | None,
) -> int:
    n_col = resolve_column(column_index, key=node.key, header_ref=node.header_ref)
    if n_col is not None:
        return n_col

    c_msg = (
        f"Row {row}: no column for key={node.key!r} header={node.header_ref!r}, "
        f"defaulting to column {N_COL_FIRST}."
    )
    logger.warning(c_msg)
    if report is not None:
        report.warn(c_msg)
    return N_COL_FIRST


def _place_same_row_children(
    grid: SheetGrid,
    children: Sequence[SpecDataNode],
    column_index: Mapping[str, int],
    *,
    row: int,
    report: ReportSheetLayout | None,
) -> None:
    for _child in children:
        n_col_ = resolve_column(
            column_index, key=_child.key, header_ref=_child.header_ref
        )
        if n_col_ is None:
            c_msg = (
                f"Row {row}: skipping child key={_child.key!r} "
                f"header={_child.header_ref!r}, no matching column."
            )
            logger.warning(c_msg)
            if report is not None:
                report.warn(c_msg)
            continue
        _write_node(grid, _child, row=row, col=n_col_)


def place_data_row(
    grid: SheetGrid,
    node: SpecDataNode,
    *,
    row: int,
    column_index: Mapping[str, int],
    report: ReportSheetLayout | None = None,
) -> int:
    """
    Place a body node (and its same-row children) on ``row``.

    The node's column is looked up by ``key``, then by ``header_ref``; an
    unresolved node falls back to the first column. Children that cannot be
    resolved are skipped.

    Returns:
        int: ``row + 1`` when ``node.jump`` is set, otherwise ``row`` so the next
        node shares the same physical row.
    """
    n_col = _resolve_main_column(node, column_index, row=row, report=report)
    _write_node(grid, node, row=row, col=n_col)
    _place_same_row_children(
        grid, node.children, column_index, row=row, report=report
    )
    return row + 1 if node.jump else row


def place_footer_row(
    grid: SheetGrid,
    node: SpecFooterNode,
    *,
    row: int,
    column_index: Mapping[str, int],
    report: ReportSheetLayout | None = None,
) -> int:
    """
    Same contract as :func:`place_data_row`, plus an optional horizontal merge
    between the resolved column and ``merge_to`` (either side) when
    ``merge_cell`` is set.
    """
    n_col = _resolve_main_column(node, column_index, row=row, report=report)
    _write_node(grid, node, row=row, col=n_col)

    if node.merge_cell and node.merge_to:
        if node.merge_to != n_col:
            # merge_to may sit left of the resolved column
            grid.merge_range(
                row, min(n_col, node.merge_to), row, max(n_col, node.merge_to)
            )
        else:
            logger.warning(
                f"Row {row}: footer merge_to={node.merge_to} equals its own "
                "column, merge skipped."
            )

    _place_same_row_children(
        grid, node.children, column_index, row=row, report=report
    )
    return row + 1 if node.jump else row
