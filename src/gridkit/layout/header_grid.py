from collections.abc import Sequence

from loguru import logger

from .conf import N_COL_FIRST
from .grid import SheetGrid
from .span import calculate_col_span, calculate_max_depth
from .spec import SpecHeaderBlock, SpecHeaderNode, SpecMergeRegion
from .value import apply_cell_dimensions, convert_node_value


def _plan_smart_merges_for_header(
    header: SpecHeaderNode,
    *,
    row_start: int,
    row_end: int,
    col_start: int,
    merges: list[SpecMergeRegion],
) -> None:
    n_col_span = calculate_col_span(header)
    n_col_end = col_start + n_col_span - 1
    if header.is_leaf:
        # leaf: one tall cell down to the bottom of the block
        merges.append(SpecMergeRegion(row_start, col_start, row_end, n_col_end))
        return

    if n_col_span > 1:
        merges.append(SpecMergeRegion(row_start, col_start, row_start, n_col_end))

    n_col_child = col_start
    for _child in header.children:
        _plan_smart_merges_for_header(
            _child,
            row_start=row_start + 1,
            row_end=row_end,
            col_start=n_col_child,
            merges=merges,
        )
        n_col_child += calculate_col_span(_child)


def plan_smart_merges(
    headers: Sequence[SpecHeaderNode],
    *,
    row_start: int,
    row_end: int,
    col_start: int = N_COL_FIRST,
) -> list[SpecMergeRegion]:
    """
    Derive merge regions for a header block spanning ``[row_start, row_end]``.

    Rule per header, given its first column:

    - leaf: merge vertically over every remaining block row, across its span;
    - parent: merge horizontally on its own row (only if it spans > 1 column),
      then apply the rule to each child one row further down.

    The plan may contain single-cell regions (e.g. leaves on the last block
    row); writers are expected to skip those.
    """
    l_merges: list[SpecMergeRegion] = []
    n_col_cursor = col_start
    for _header in headers:
        _plan_smart_merges_for_header(
            _header,
            row_start=row_start,
            row_end=row_end,
            col_start=n_col_cursor,
            merges=l_merges,
        )
        n_col_cursor += calculate_col_span(_header)
    return l_merges


def build_nested_headers(
    grid: SheetGrid,
    headers: Sequence[SpecHeaderNode],
    *,
    row_start: int,
) -> SpecHeaderBlock:
    """
    Write a (possibly nested) sub-header block into ``grid``.

    One row is allocated per depth level. The first row holds every top-level
    header at its first column; each following row holds the immediate children
    of every top-level parent, while top-level leaves get a blank placeholder so
    later columns stay aligned. Children without a style inherit their parent's.

    Merge regions are derived from the tree structure after all rows exist and
    single-cell regions are dropped.
    """
    n_depth_max = calculate_max_depth(headers)
    n_row_end = row_start + n_depth_max - 1

    for _depth in range(n_depth_max):
        n_row_ = row_start + _depth
        n_col_ = N_COL_FIRST
        for _header in headers:
            if _depth == 0:
                grid.set_cell(n_row_, n_col_, convert_node_value(_header), _header.style)
                apply_cell_dimensions(grid, n_row_, n_col_, _header)
                n_col_ += calculate_col_span(_header)
            elif _header.children:
                for _child in _header.children:
                    grid.set_cell(
                        n_row_,
                        n_col_,
                        convert_node_value(_child),
                        _child.style if _child.style is not None else _header.style,
                    )
                    apply_cell_dimensions(grid, n_row_, n_col_, _child)
                    n_col_ += calculate_col_span(_child)
            else:
                grid.set_cell(n_row_, n_col_, None)
                n_col_ += 1

    l_merges = [
        _merge
        for _merge in plan_smart_merges(headers, row_start=row_start, row_end=n_row_end)
        if not _merge.is_single_cell
    ]
    for _merge in l_merges:
        grid.merge_range(
            _merge.row_start, _merge.col_start, _merge.row_end, _merge.col_end
        )

    logger.debug(
        f"Header block rows {row_start}..{n_row_end}: "
        f"{len(headers)} top-level headers, {len(l_merges)} merges"
    )
    return SpecHeaderBlock(
        row_start=row_start,
        row_next=row_start + n_depth_max,
        n_cols=sum(calculate_col_span(_h) for _h in headers),
        merges=tuple(l_merges),
    )
