from collections.abc import Mapping, Sequence
from typing import Any

from .conf import N_COL_FIRST
from .spec import SpecHeaderNode


def _register_aliases(
    dict_index: dict[str, int], header: SpecHeaderNode, n_col: int
) -> None:
    if header.key:
        dict_index[header.key] = n_col
    # falsy display values (None, "", 0) are not registered as aliases
    if header.value:
        dict_index[str(header.value)] = n_col


def build_column_index(sub_headers: Sequence[SpecHeaderNode]) -> dict[str, int]:
    """
    Map header identifiers to 1-based column numbers.

    Each sub-header contributes one column per *immediate* child, or one column
    for itself when it has no children. Both the ``key`` and the stringified
    display value of the column-owning header are registered as aliases of the
    same column.

    Notes
    -----
    - Flattening is one level only: descendants deeper than the immediate
      children do not get their own columns.
    - When two headers share an alias (e.g. the same display value without a
      key), the later header's column wins.

    Examples:
        >>> build_column_index([SpecHeaderNode(key="a", value="A")])
        {'a': 1, 'A': 1}
    """
    dict_index: dict[str, int] = {}
    n_col_cursor = N_COL_FIRST
    for _header in sub_headers:
        if _header.children:
            for _child in _header.children:
                _register_aliases(dict_index, _child, n_col_cursor)
                n_col_cursor += 1
        else:
            _register_aliases(dict_index, _header, n_col_cursor)
            n_col_cursor += 1
    return dict_index


def resolve_column(
    column_index: Mapping[str, int],
    *,
    key: str | None,
    header_ref: Any,
) -> int | None:
    """Look up ``key`` first, then ``header_ref``; ``None`` when neither resolves."""
    if key and key in column_index:
        return column_index[key]
    if header_ref and str(header_ref) in column_index:
        return column_index[str(header_ref)]
    return None
