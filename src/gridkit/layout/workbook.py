import os
import time
from typing import Any

from loguru import logger

from gridkit._optional_deps import import_optional_attr

from .conf import DEFAULT_THEME, N_NSHEETS_MAX
from .spec import (
    ReportSheetLayout,
    ReportWorkbookCheck,
    SpecBuildStats,
    SpecThemeContext,
    SpecWorkbookMetadata,
    SpecWorksheetConfig,
)
from .worksheet import Worksheet


def _load_workbook_sink_cls() -> Any:
    return import_optional_attr(
        module_name="gridkit.io.xlsx.writer",
        attr_name="XlsxWorkbookSink",
        package=__package__,
        feature="gridkit.layout.WorkbookBuilder.build",
        extras=("xlsx",),
        required_modules=("xlsxwriter",),
    )


class WorkbookBuilder:
    """
    Collection of worksheets rendered into one .xlsx workbook.

    Sheets are laid out one at a time into a :class:`SheetGrid` and replayed
    onto a single shared workbook sink, so only one sheet grid is alive at any
    point of a build::

        wb = WorkbookBuilder()
        ws = wb.add_worksheet("Report")
        ws.add_sub_headers([{"key": "a", "value": "A"}])
        ws.add_row({"key": "a", "value": 1})
        wb.build("report.xlsx")
    """

    def __init__(
        self,
        metadata: SpecWorkbookMetadata | None = None,
        theme: SpecThemeContext | None = None,
    ):
        self.metadata = metadata
        self.theme = theme if theme is not None else DEFAULT_THEME
        self.worksheets: dict[str, Worksheet] = {}
        self.worksheet_current: Worksheet | None = None
        self.is_building = False
        self._reports: list[ReportSheetLayout] = []
        self._stats = SpecBuildStats()

    # #region Worksheets
    def add_worksheet(self, name: str, **config: Any) -> Worksheet:
        if name in self.worksheets:
            raise ValueError(f"Worksheet {name!r} already exists.")
        if len(self.worksheets) >= N_NSHEETS_MAX:
            raise ValueError(f"A workbook holds at most {N_NSHEETS_MAX} worksheets.")
        worksheet = Worksheet(SpecWorksheetConfig(name=name, **config))
        self.worksheets[name] = worksheet
        self.worksheet_current = worksheet
        return worksheet

    def get_worksheet(self, name: str) -> Worksheet | None:
        return self.worksheets.get(name)

    def remove_worksheet(self, name: str) -> bool:
        worksheet = self.worksheets.pop(name, None)
        if worksheet is None:
            return False
        if self.worksheet_current is worksheet:
            self.worksheet_current = next(reversed(self.worksheets.values()), None)
        return True

    def set_current_worksheet(self, name: str) -> bool:
        worksheet = self.worksheets.get(name)
        if worksheet is None:
            return False
        self.worksheet_current = worksheet
        return True

    def clear(self) -> None:
        self.worksheets.clear()
        self.worksheet_current = None
        self._reports = []
        self._stats = SpecBuildStats()

    # #endregion

    def validate(self) -> ReportWorkbookCheck:
        if not self.worksheets:
            return ReportWorkbookCheck(ok=False, errors=("No worksheets found",))

        l_errors: list[str] = []
        for _name, _worksheet in self.worksheets.items():
            check = _worksheet.validate()
            l_errors.extend(f"Worksheet {_name!r}: {_err}" for _err in check.errors)
            for _warning in check.warnings:
                logger.warning(f"Worksheet {_name!r}: {_warning}")
        return ReportWorkbookCheck(ok=not l_errors, errors=tuple(l_errors))

    # #region Build
    def build(
        self, file_out: os.PathLike[str] | str, *, if_validate: bool = True
    ) -> SpecBuildStats:
        """Write the workbook to ``file_out``."""
        self._render(file_out, if_validate=if_validate)
        return self._stats

    def to_bytes(self, *, if_validate: bool = True) -> bytes:
        """Render the workbook in memory and return the .xlsx bytes."""
        sink = self._render(None, if_validate=if_validate)
        return sink.getvalue()

    def _render(self, file_out: os.PathLike[str] | str | None, *, if_validate: bool) -> Any:
        if self.is_building:
            raise RuntimeError("Build already in progress")
        if if_validate:
            check = self.validate()
            if not check.ok:
                raise ValueError("Workbook validation failed: " + "; ".join(check.errors))

        cls_sink = _load_workbook_sink_cls()
        self.is_building = True
        n_time_start = time.perf_counter()
        l_reports: list[ReportSheetLayout] = []
        try:
            with cls_sink(
                file_out, metadata=self.metadata, fmt_date=self.theme.fmt_date
            ) as sink:
                for _worksheet in self.worksheets.values():
                    grid, report = _worksheet.build_grid(theme=self.theme)
                    grid.emit(sink.add_sheet(_worksheet.config))
                    l_reports.append(report)
                    logger.debug(
                        f"Sheet {_worksheet.name!r}: {report.n_cells} cells, "
                        f"{report.n_merges} merges."
                    )
        finally:
            self.is_building = False

        self._reports = l_reports
        self._stats = SpecBuildStats(
            n_sheets=len(l_reports),
            n_cells=sum(_r.n_cells for _r in l_reports),
            n_merges=sum(_r.n_merges for _r in l_reports),
            seconds_build=time.perf_counter() - n_time_start,
            size_file=sink.size_file,
        )
        logger.info(
            f"Workbook built: {self._stats.n_sheets} sheets, "
            f"{self._stats.n_cells} cells in {self._stats.seconds_build:.3f}s."
        )
        return sink

    # #endregion

    def report(self) -> tuple[ReportSheetLayout, ...]:
        """Per-sheet layout reports of the last build."""
        return tuple(self._reports)

    def stats(self) -> SpecBuildStats:
        return self._stats
