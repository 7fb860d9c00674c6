"""
Hierarchical table layout for spreadsheet reports.

The builder classes are re-exported lazily so that ``import gridkit`` stays
cheap and does not pull in optional engines (``xlsxwriter``, ``polars``)::

    import gridkit

    wb = gridkit.WorkbookBuilder()
    ws = wb.add_worksheet("Report")
"""

from __future__ import annotations

from importlib import import_module
from importlib.metadata import PackageNotFoundError, version
from typing import TYPE_CHECKING, Any

__all__ = [
    "__version__",
    "WorkbookBuilder",
    "Worksheet",
    "SheetGrid",
    "layout",
]

try:
    __version__ = version("gridkit")
except PackageNotFoundError:
    __version__ = "0.0.0"

if TYPE_CHECKING:
    import gridkit.layout as layout
    from gridkit.layout import SheetGrid, WorkbookBuilder, Worksheet

# public name -> (module, attribute or None for the module itself)
_LAZY_EXPORTS: dict[str, tuple[str, str | None]] = {
    "layout": ("gridkit.layout", None),
    "WorkbookBuilder": ("gridkit.layout", "WorkbookBuilder"),
    "Worksheet": ("gridkit.layout", "Worksheet"),
    "SheetGrid": ("gridkit.layout", "SheetGrid"),
}


def __getattr__(name: str) -> Any:
    target = _LAZY_EXPORTS.get(name)
    if target is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module_name, attr_name = target
    value = import_module(module_name)
    if attr_name is not None:
        value = getattr(value, attr_name)
    globals()[name] = value
    return value


def __dir__() -> list[str]:
    return sorted(set(globals()) | set(__all__))
