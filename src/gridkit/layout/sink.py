from typing import Any, Protocol

from .spec import SpecCellFormat, SpecDataValidation


class SheetSink(Protocol):
    """
    Output contract of the layout engine.

    Coordinate semantics
    --------------------
    All rows and columns are 1-based and ranges are inclusive. Implementations
    backed by 0-based libraries convert at their own boundary.

    Optional metadata (``num_format``, ``comment``, ``validation``) travels with
    ``set_cell`` so a sink can apply it in the same call.
    """

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
    ) -> None: ...

    def merge_range(
        self, row_start: int, col_start: int, row_end: int, col_end: int
    ) -> None: ...

    def set_row_height(self, row: int, height: float) -> None: ...

    def set_column_width(self, col: int, width: float) -> None: ...

    def register_filter_range(
        self, row_start: int, col_start: int, row_end: int, col_end: int
    ) -> None: ...
