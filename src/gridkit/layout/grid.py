from collections.abc import Iterator
from dataclasses import replace
from typing import Any

from .sink import SheetSink
from .spec import (
    SpecCellAssignment,
    SpecCellFormat,
    SpecDataValidation,
    SpecFilterRange,
    SpecMergeRegion,
)


class SheetGrid:
    """
    Sparse, in-memory rendition of one sheet.

    The layout engine writes into a ``SheetGrid`` through the same calls a real
    output sink accepts (see :class:`gridkit.layout.sink.SheetSink`), so the
    finished grid can be inspected in isolation and then replayed onto a sink
    with :meth:`emit`.

    A later ``set_cell`` on an occupied coordinate replaces the earlier
    assignment.
    """

    def __init__(self) -> None:
        self.cells: dict[tuple[int, int], SpecCellAssignment] = {}
        self.merges: list[SpecMergeRegion] = []
        self.row_heights: dict[int, float] = {}
        self.col_widths: dict[int, float] = {}
        self.filter_ranges: list[SpecFilterRange] = []

    # #region SinkContract
    def set_cell(
        self,
        row: int,
        col: int,
        value: Any,
        style: SpecCellFormat | None = None,
        *,
        num_format: str | None = None,
        comment: str | None = None,
        validation: SpecDataValidation | None = None,
    ) -> None:
        self.cells[(row, col)] = SpecCellAssignment(
            value=value,
            style=style,
            num_format=num_format,
            comment=comment,
            validation=validation,
        )

    def merge_range(
        self, row_start: int, col_start: int, row_end: int, col_end: int
    ) -> None:
        self.merges.append(SpecMergeRegion(row_start, col_start, row_end, col_end))

    def set_row_height(self, row: int, height: float) -> None:
        self.row_heights[row] = height

    def set_column_width(self, col: int, width: float) -> None:
        self.col_widths[col] = width

    def register_filter_range(
        self, row_start: int, col_start: int, row_end: int, col_end: int
    ) -> None:
        self.filter_ranges.append(
            SpecFilterRange(row_start, col_start, row_end, col_end)
        )

    # #endregion

    def get_cell(self, row: int, col: int) -> SpecCellAssignment | None:
        return self.cells.get((row, col))

    def get_value(self, row: int, col: int) -> Any:
        cell = self.cells.get((row, col))
        return None if cell is None else cell.value

    def apply_table_style(self, row: int, col: int, fmt: SpecCellFormat) -> bool:
        """
        Attach a decoration format to a cell that carries no explicit style.

        Missing cells are created blank. Returns ``False`` (and changes nothing)
        when the cell already has an explicit style.
        """
        cell = self.cells.get((row, col))
        if cell is None:
            self.cells[(row, col)] = SpecCellAssignment(style_table=fmt)
            return True
        if cell.style is not None:
            return False
        self.cells[(row, col)] = replace(cell, style_table=fmt)
        return True

    def iter_cells(self) -> Iterator[tuple[int, int, SpecCellAssignment]]:
        """Yield ``(row, col, cell)`` in row-major order."""
        for (n_row, n_col) in sorted(self.cells):
            yield n_row, n_col, self.cells[(n_row, n_col)]

    @property
    def n_rows(self) -> int:
        return max((_row for _row, _ in self.cells), default=0)

    @property
    def n_cols(self) -> int:
        return max((_col for _, _col in self.cells), default=0)

    def max_row_between(self, row_start: int, row_end: int) -> int | None:
        """Highest occupied row within ``[row_start, row_end]``."""
        return max(
            (_row for _row, _ in self.cells if row_start <= _row <= row_end),
            default=None,
        )

    def emit(self, sink: SheetSink) -> None:
        """Replay cells, merges, dimensions and filter ranges onto ``sink``."""
        for n_row, n_col, cell in self.iter_cells():
            sink.set_cell(
                n_row,
                n_col,
                cell.value,
                cell.style_effective,
                num_format=cell.num_format,
                comment=cell.comment,
                validation=cell.validation,
            )
        for _merge in self.merges:
            sink.merge_range(
                _merge.row_start, _merge.col_start, _merge.row_end, _merge.col_end
            )
        for _row, _height in sorted(self.row_heights.items()):
            sink.set_row_height(_row, _height)
        for _col, _width in sorted(self.col_widths.items()):
            sink.set_column_width(_col, _width)
        for _rng in self.filter_ranges:
            sink.register_filter_range(
                _rng.row_start, _rng.col_start, _rng.row_end, _rng.col_end
            )
