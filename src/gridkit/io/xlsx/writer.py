import io
import math
import os
from datetime import date, datetime, time
from decimal import Decimal
from pathlib import Path
from types import TracebackType
from typing import Any, Self

import xlsxwriter
import xlsxwriter.format
import xlsxwriter.worksheet

from gridkit.layout.conf import DEFAULT_THEME, N_LEN_EXCEL_SHEET_NAME_MAX
from gridkit.layout.spec import (
    SpecCellFormat,
    SpecDataValidation,
    SpecFilterRange,
    SpecFormula,
    SpecHyperlink,
    SpecWorkbookMetadata,
    SpecWorksheetConfig,
)

from .util import (
    convert_nan_inf_to_str,
    convert_validation_options,
    sanitize_sheet_name,
)

_SPEC_FMT_EMPTY = SpecCellFormat()


class XlsxWorkbookSink:
    """
    Single shared ``xlsxwriter`` workbook that sheets are laid out onto, one at
    a time.

    The target is either a file path or, when ``file_out`` is ``None``, an
    in-memory buffer whose bytes are available after :meth:`close` through
    :meth:`getvalue`::

        with XlsxWorkbookSink("report.xlsx") as sink:
            grid.emit(sink.add_sheet(SpecWorksheetConfig(name="Report")))
    """

    def __init__(
        self,
        file_out: os.PathLike[str] | str | None = None,
        *,
        metadata: SpecWorkbookMetadata | None = None,
        fmt_date: str = DEFAULT_THEME.fmt_date,
    ):
        self.file_out = None if file_out is None else Path(file_out)
        self._buffer = io.BytesIO() if file_out is None else None
        self.wb = xlsxwriter.Workbook(
            self._buffer if self.file_out is None else self.file_out.as_posix(),
            {
                # vertical header merges need random row access
                "constant_memory": False,
                "in_memory": self.file_out is None,
                "nan_inf_to_errors": False,
            },
        )
        if metadata is not None:
            self.wb.set_properties(metadata.to_xlsxwriter())
        self.fmt_date = fmt_date
        self._format_cache: dict[SpecCellFormat, xlsxwriter.format.Format] = {}
        self._existing_sheet_names: set[str] = set()
        self._sheets: list[XlsxSheetSink] = []
        self.is_closed = False

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self, exc_type: type | None, exc: BaseException | None, tb: TracebackType | None
    ) -> None:
        self.close()

    def close(self) -> None:
        if self.is_closed:
            return
        for _sheet in self._sheets:
            _sheet.finish()
        self.wb.close()
        self.is_closed = True

    def getvalue(self) -> bytes:
        if self._buffer is None:
            raise ValueError("Workbook was written to a file, not to memory.")
        if not self.is_closed:
            raise ValueError("Workbook must be closed before reading its bytes.")
        return self._buffer.getvalue()

    @property
    def size_file(self) -> int:
        if not self.is_closed:
            return 0
        if self._buffer is not None:
            return len(self._buffer.getvalue())
        return self.file_out.stat().st_size if self.file_out is not None else 0

    def create_format_cached(
        self, spec: SpecCellFormat | None
    ) -> xlsxwriter.format.Format | None:
        if spec is None or spec == _SPEC_FMT_EMPTY:
            return None
        fmt = self._format_cache.get(spec)
        if fmt is None:
            fmt = self.wb.add_format(spec.to_xlsxwriter())
            self._format_cache[spec] = fmt
        return fmt

    def _create_unique_sheet_name(self, name: str) -> str:
        # Excel compares sheet names case-insensitively
        if name.lower() not in self._existing_sheet_names:
            self._existing_sheet_names.add(name.lower())
            return name

        # deterministic bump: name__2, name__3 ...
        c_base_name = name[: max(1, N_LEN_EXCEL_SHEET_NAME_MAX - 3)]
        i = 2
        c_candidate_name = f"{c_base_name}__{i}"[:N_LEN_EXCEL_SHEET_NAME_MAX]
        while c_candidate_name.lower() in self._existing_sheet_names:
            i += 1
            c_candidate_name = f"{c_base_name}__{i}"[:N_LEN_EXCEL_SHEET_NAME_MAX]
        self._existing_sheet_names.add(c_candidate_name.lower())
        return c_candidate_name

    def add_sheet(self, config: SpecWorksheetConfig) -> "XlsxSheetSink":
        c_sheet_name = self._create_unique_sheet_name(sanitize_sheet_name(config.name))
        ws = self.wb.add_worksheet(c_sheet_name)
        sheet = XlsxSheetSink(self, ws, config)
        self._sheets.append(sheet)
        return sheet


class XlsxSheetSink:
    """
    Sheet-level sink: receives 1-based layout calls and writes them through
    ``xlsxwriter`` (0-based).

    Cells must be set before a merge that starts on them; the merge then
    re-writes the top-left value with its format so that hyperlinks and
    formulas survive merging.
    """

    def __init__(
        self,
        workbook: XlsxWorkbookSink,
        ws: xlsxwriter.worksheet.Worksheet,
        config: SpecWorksheetConfig,
    ):
        self.workbook = workbook
        self.ws = ws
        self.config = config
        self.name = ws.get_name()
        self._cells: dict[tuple[int, int], tuple[Any, Any]] = {}
        self._col_widths: dict[int, float] = {}
        self._filter_range: SpecFilterRange | None = None
        self._n_col_max = 0
        self._is_finished = False
        self._apply_config()

    def _apply_config(self) -> None:
        cfg = self.config
        if cfg.tab_color:
            self.ws.set_tab_color(cfg.tab_color)
        if cfg.hidden:
            self.ws.hide()
        if not cfg.show_grid_lines:
            self.ws.hide_gridlines(2)
        if cfg.zoom is not None:
            self.ws.set_zoom(cfg.zoom)
        if cfg.freeze_panes is not None:
            n_row, n_col = cfg.freeze_panes
            self.ws.freeze_panes(n_row - 1, n_col - 1)
        self.ws.set_default_row(cfg.default_row_height)

    def _resolve_format(self, value: Any, style: SpecCellFormat | None, num_format: str | None):
        fmt_spec = style if style is not None else _SPEC_FMT_EMPTY
        if num_format:
            fmt_spec = fmt_spec.with_(num_format=num_format)
        elif isinstance(value, (date, time)) and fmt_spec.num_format is None:
            fmt_spec = fmt_spec.with_(num_format=self.workbook.fmt_date)
        return self.workbook.create_format_cached(fmt_spec)

    def _write_value(self, row_idx: int, col_idx: int, value: Any, cfg_fmt: Any) -> None:
        if value is None or value == "":
            self.ws.write_blank(row_idx, col_idx, None, cfg_fmt)
        elif isinstance(value, SpecHyperlink):
            self.ws.write_url(row_idx, col_idx, value.url, cfg_fmt, string=value.text)
        elif isinstance(value, SpecFormula):
            c_expr = value.expression
            self.ws.write_formula(
                row_idx, col_idx, c_expr if c_expr.startswith("=") else f"={c_expr}", cfg_fmt
            )
        elif isinstance(value, bool):
            self.ws.write_boolean(row_idx, col_idx, value, cfg_fmt)
        elif isinstance(value, (int, float, Decimal)):
            n_value = float(value) if isinstance(value, Decimal) else value
            if isinstance(n_value, float) and not math.isfinite(n_value):
                # xlsxwriter rejects NaN/Inf as numbers
                self.ws.write_string(
                    row_idx, col_idx, convert_nan_inf_to_str(n_value), cfg_fmt
                )
            else:
                self.ws.write_number(row_idx, col_idx, n_value, cfg_fmt)
        elif isinstance(value, (datetime, date, time)):
            self.ws.write_datetime(row_idx, col_idx, value, cfg_fmt)
        else:
            self.ws.write_string(row_idx, col_idx, str(value), cfg_fmt)

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
        cfg_fmt = self._resolve_format(value, style, num_format)
        self._cells[(row, col)] = (value, cfg_fmt)
        self._n_col_max = max(self._n_col_max, col)
        self._write_value(row - 1, col - 1, value, cfg_fmt)
        if comment:
            self.ws.write_comment(row - 1, col - 1, comment)
        if validation is not None:
            self.ws.data_validation(
                row - 1,
                col - 1,
                row - 1,
                col - 1,
                convert_validation_options(validation),
            )

    def merge_range(
        self, row_start: int, col_start: int, row_end: int, col_end: int
    ) -> None:
        value, cfg_fmt = self._cells.get((row_start, col_start), (None, None))
        self.ws.merge_range(
            row_start - 1, col_start - 1, row_end - 1, col_end - 1, "", cfg_fmt
        )
        self._write_value(row_start - 1, col_start - 1, value, cfg_fmt)
        self._n_col_max = max(self._n_col_max, col_end)

    def set_row_height(self, row: int, height: float) -> None:
        self.ws.set_row(row - 1, height)

    def set_column_width(self, col: int, width: float) -> None:
        self._col_widths[col] = width
        self.ws.set_column(col - 1, col - 1, width)

    def register_filter_range(
        self, row_start: int, col_start: int, row_end: int, col_end: int
    ) -> None:
        # a worksheet holds one autofilter; the last request wins
        self._filter_range = SpecFilterRange(row_start, col_start, row_end, col_end)

    # #endregion

    def finish(self) -> None:
        """Apply sheet-wide settings that depend on everything written so far."""
        if self._is_finished:
            return
        for _col in range(1, self._n_col_max + 1):
            if _col not in self._col_widths:
                self.ws.set_column(_col - 1, _col - 1, self.config.default_col_width)
        if self._filter_range is not None:
            rng = self._filter_range
            self.ws.autofilter(
                rng.row_start - 1, rng.col_start - 1, rng.row_end - 1, rng.col_end - 1
            )
        self._is_finished = True
