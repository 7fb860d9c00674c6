from collections.abc import Sequence

from .spec import SpecHeaderNode


def calculate_col_span(header: SpecHeaderNode) -> int:
    """
    Number of grid columns a header reserves.

    A leaf (no children, or an empty children tuple) spans one column; a parent
    spans the sum of its children's spans.
    """
    if header.is_leaf:
        return 1
    return sum(calculate_col_span(_child) for _child in header.children)


def calculate_max_depth(headers: Sequence[SpecHeaderNode]) -> int:
    """
    Number of stacked header rows needed to render ``headers``.

    Always >= 1, also for an empty sequence.
    """
    n_depth_max = 1
    for _header in headers:
        if _header.children:
            n_depth_max = max(n_depth_max, calculate_max_depth(_header.children) + 1)
    return n_depth_max


def calculate_total_cols(headers: Sequence[SpecHeaderNode]) -> int:
    """Total column count of a header block, 0 when there are no headers."""
    return sum(calculate_col_span(_header) for _header in headers)
