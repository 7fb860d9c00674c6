from typing import Any

from .sink import SheetSink
from .spec import (
    CellType,
    SpecDataNode,
    SpecFooterNode,
    SpecFormula,
    SpecHeaderNode,
    SpecHyperlink,
)


def convert_node_value(node: SpecHeaderNode | SpecDataNode | SpecFooterNode) -> Any:
    """
    Resolve what a node writes into its cell.

    Links win over formulas, formulas win over the raw value. The visible text of
    a link is the mask if set, else the value, else the URL itself. A link whose
    URL is blank degrades to the raw value.
    """
    if node.link or node.cell_type == CellType.LINK:
        c_link = node.link or (node.value if isinstance(node.value, str) else "")
        if not c_link.strip():
            return node.value
        c_text = node.mask or node.value or c_link
        return SpecHyperlink(url=c_link, text=str(c_text))

    c_formula = getattr(node, "formula", None)
    if c_formula:
        return SpecFormula(expression=c_formula)
    if node.cell_type == CellType.FORMULA and isinstance(node.value, str):
        return SpecFormula(expression=node.value)

    return node.value


def apply_cell_dimensions(
    sink: SheetSink,
    row: int,
    col: int,
    node: SpecHeaderNode | SpecDataNode | SpecFooterNode,
) -> None:
    if node.row_height is not None:
        sink.set_row_height(row, node.row_height)
    if node.col_width is not None:
        sink.set_column_width(col, node.col_width)
