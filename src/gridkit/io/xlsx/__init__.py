from __future__ import annotations

from typing import TYPE_CHECKING, Any

from gridkit._optional_deps import import_optional_attr

__all__ = [
    "XlsxWorkbookSink",
    "XlsxSheetSink",
    "sanitize_sheet_name",
]

if TYPE_CHECKING:
    from .util import sanitize_sheet_name
    from .writer import XlsxSheetSink, XlsxWorkbookSink


def __getattr__(name: str) -> Any:
    if name == "sanitize_sheet_name":
        return import_optional_attr(
            module_name=".util",
            attr_name=name,
            package=__name__,
            feature="gridkit.io.xlsx",
            extras=("xlsx",),
            required_modules=(),
        )
    if name in {"XlsxWorkbookSink", "XlsxSheetSink"}:
        return import_optional_attr(
            module_name=".writer",
            attr_name=name,
            package=__name__,
            feature="gridkit.io.xlsx",
            extras=("xlsx",),
            required_modules=("xlsxwriter",),
        )
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
