from collections.abc import Sequence
from typing import Any

import polars as pl

from .spec import SpecCellFormat, SpecDataNode, SpecHeaderNode


def convert_to_polars(df: Any) -> pl.DataFrame:
    return df if isinstance(df, pl.DataFrame) else pl.DataFrame(df)


def validate_unique_columns(df: pl.DataFrame) -> None:
    l_cols = df.columns
    if len(l_cols) == len(set(l_cols)):
        return

    dict_pos: dict[str, list[int]] = {}
    for _idx, _val in enumerate(l_cols):
        dict_pos.setdefault(_val, []).append(_idx)
    c_msg = "; ".join(
        f"{c_name!r} x{len(l_pos)} at indices {l_pos}"
        for c_name, l_pos in dict_pos.items()
        if len(l_pos) > 1
    )
    raise ValueError(f"Duplicate column names detected: {c_msg}")


def create_sub_headers_from_frame(
    df: Any, *, style: SpecCellFormat | None = None
) -> list[SpecHeaderNode]:
    """One leaf sub-header per frame column, keyed by the column name."""
    df_custom = convert_to_polars(df)
    validate_unique_columns(df_custom)
    return [
        SpecHeaderNode(key=_col, value=_col, style=style) for _col in df_custom.columns
    ]


def create_body_from_frame(
    df: Any,
    *,
    num_formats: dict[str, str] | None = None,
    cols: Sequence[str] | None = None,
) -> list[SpecDataNode]:
    """
    Turn every frame row into same-row data nodes.

    Each cell becomes a node keyed by its column name; the last cell of a row
    carries ``jump`` so the next frame row lands on the next sheet row. Numeric
    columns default to integer/decimal number formats unless ``num_formats``
    names one.
    """
    df_custom = convert_to_polars(df)
    validate_unique_columns(df_custom)
    if cols is not None:
        df_custom = df_custom.select(list(cols))
    if df_custom.width == 0:
        return []

    dict_num_formats: dict[str, str] = {}
    for _col, _dtype in df_custom.schema.items():
        if _dtype.is_integer():
            dict_num_formats[_col] = "#,##0"
        elif _dtype.is_float() or _dtype.is_decimal():
            dict_num_formats[_col] = "#,##0.00"
    dict_num_formats |= num_formats or {}

    l_cols = df_custom.columns
    n_idx_last = len(l_cols) - 1
    l_nodes: list[SpecDataNode] = []
    for _row in df_custom.iter_rows():
        for _idx, (_col, _val) in enumerate(zip(l_cols, _row)):
            l_nodes.append(
                SpecDataNode(
                    key=_col,
                    value=_val,
                    num_format=dict_num_formats.get(_col),
                    jump=_idx == n_idx_last,
                )
            )
    return l_nodes
