from typing import Any, Self

from loguru import logger

from gridkit._optional_deps import import_optional_attr

from .assembler import assemble_sheet
from .conf import DEFAULT_THEME
from .grid import SheetGrid
from .ingest import (
    normalize_data_node,
    normalize_footer_node,
    normalize_header_node,
    normalize_many,
)
from .spec import (
    ReportSheetCheck,
    ReportSheetLayout,
    SpecTable,
    SpecTableStaging,
    SpecThemeContext,
    SpecWorksheetConfig,
)


class Worksheet:
    """
    Declarative builder for one sheet.

    Content is staged with :meth:`add_header`, :meth:`add_sub_headers`,
    :meth:`add_row` and :meth:`add_footer`, then moved into a table with
    :meth:`finalize_table`. A sheet may hold several tables, laid out top to
    bottom with blank spacing rows in between::

        ws = Worksheet(SpecWorksheetConfig(name="Report"))
        ws.add_table(name="Sales")
        ws.add_sub_headers([{"key": "a", "value": "A"}])
        ws.add_row({"key": "a", "value": 1, "jump": True})
        ws.finalize_table()
        grid, report = ws.build_grid()

    When no table was ever created, the staged content is laid out as a single
    implicit table without spacing or decoration.
    """

    def __init__(self, config: SpecWorksheetConfig | str):
        self.config = (
            SpecWorksheetConfig(name=config) if isinstance(config, str) else config
        )
        self.tables: list[SpecTable] = []
        self.is_built = False
        self._staging = SpecTableStaging()

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def staging(self) -> SpecTableStaging:
        return self._staging

    # #region Staging
    def add_header(self, header: Any) -> Self:
        self._staging.headers.append(normalize_header_node(header))
        return self

    def add_sub_headers(self, sub_headers: Any) -> Self:
        self._staging.sub_headers.extend(
            normalize_many(sub_headers, normalize_header_node)
        )
        return self

    def add_row(self, row: Any) -> Self:
        self._staging.body.extend(normalize_many(row, normalize_data_node))
        return self

    def add_footer(self, footer: Any) -> Self:
        self._staging.footers.extend(normalize_many(footer, normalize_footer_node))
        return self

    def add_frame(self, df: Any, *, if_add_sub_headers: bool = True) -> Self:
        """Stage a frame: sub-headers from its columns, one body row per frame row."""
        feature_kwargs: dict[str, Any] = dict(
            module_name=".frame",
            package=__package__,
            feature="gridkit.layout.Worksheet.add_frame",
            extras=("frame",),
            required_modules=("polars",),
        )
        fn_sub_headers = import_optional_attr(
            attr_name="create_sub_headers_from_frame", **feature_kwargs
        )
        fn_body = import_optional_attr(attr_name="create_body_from_frame", **feature_kwargs)
        if if_add_sub_headers:
            self._staging.sub_headers.extend(fn_sub_headers(df))
        self._staging.body.extend(fn_body(df))
        return self

    # #endregion

    # #region Tables
    def add_table(self, **table_config: Any) -> Self:
        """
        Append a new table. Unset fields default to an auto name
        (``Table_<n>``), borders and stripes on, no filter.
        """
        table_config.setdefault("name", f"Table_{len(self.tables) + 1}")
        for _field in ("headers", "sub_headers"):
            if _field in table_config:
                table_config[_field] = tuple(
                    normalize_many(table_config[_field], normalize_header_node)
                )
        if "body" in table_config:
            table_config["body"] = tuple(
                normalize_many(table_config["body"], normalize_data_node)
            )
        if "footers" in table_config:
            table_config["footers"] = tuple(
                normalize_many(table_config["footers"], normalize_footer_node)
            )
        self.tables.append(SpecTable(**table_config))
        return self

    def finalize_table(self) -> Self:
        """Move staged content into the last table, creating one if needed."""
        if not self.tables:
            self.add_table()
        if not self.tables:
            raise RuntimeError("No table available to finalize.")

        table_current = self.tables[-1]
        self.tables[-1] = table_current.with_(
            headers=(*table_current.headers, *self._staging.headers),
            sub_headers=(*table_current.sub_headers, *self._staging.sub_headers),
            body=(*table_current.body, *self._staging.body),
            footers=(*table_current.footers, *self._staging.footers),
        )
        self._staging.clear()
        return self

    def get_table(self, name: str) -> SpecTable | None:
        for _table in self.tables:
            if _table.name == name:
                return _table
        return None

    # #endregion

    def validate(self) -> ReportSheetCheck:
        l_errors: list[str] = []
        l_warnings: list[str] = []

        b_has_headers = bool(self._staging.headers) or any(
            _t.headers for _t in self.tables
        )
        b_has_body = bool(self._staging.body) or any(_t.body for _t in self.tables)
        if not b_has_headers and not b_has_body:
            l_errors.append("The sheet has no headers and no body rows.")

        if self.tables and not self._staging.is_empty:
            l_warnings.append(
                "Staged content is not finalized into a table and will be ignored."
            )
        return ReportSheetCheck(
            ok=not l_errors, errors=tuple(l_errors), warnings=tuple(l_warnings)
        )

    def _collect_tables(self) -> list[SpecTable]:
        if self.tables:
            if not self._staging.is_empty:
                logger.warning(
                    f"Sheet {self.name!r}: staged content was never finalized "
                    "into a table and is ignored."
                )
            return list(self.tables)

        # legacy path: one implicit table, no spacing or decoration
        return [
            SpecTable(
                name=f"{self.name}__implicit",
                headers=tuple(self._staging.headers),
                sub_headers=tuple(self._staging.sub_headers),
                body=tuple(self._staging.body),
                footers=tuple(self._staging.footers),
                borders=False,
                stripes=False,
            )
        ]

    def build_grid(
        self, theme: SpecThemeContext = DEFAULT_THEME
    ) -> tuple[SheetGrid, ReportSheetLayout]:
        grid, report = assemble_sheet(
            self._collect_tables(), sheet_name=self.name, theme=theme
        )
        if self.config.auto_filter is not None:
            cls_rng = self.config.auto_filter
            grid.register_filter_range(
                cls_rng.row_start, cls_rng.col_start, cls_rng.row_end, cls_rng.col_end
            )
        self.is_built = True
        return grid, report
