"""
Normalisation of caller input into the canonical ``Spec*`` node types.

Callers may hand in ``Spec*`` instances or plain mappings with snake_case keys.
Mappings may carry both a legacy ``childrens`` list and a ``children`` list; both
collapse into the single ``children`` tuple here, so the layout engine only ever
sees one shape.
"""

from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar

from .conf import DEFAULT_NUMBER_FORMATS
from .spec import (
    CellType,
    SpecCellFormat,
    SpecDataNode,
    SpecDataValidation,
    SpecFooterNode,
    SpecHeaderNode,
)

_T = TypeVar("_T")

_TUP_COLOR_FIELDS = ("font_color", "bg_color", "border_color")
_SET_COMMON_KEYS = frozenset(
    {
        "key",
        "value",
        "children",
        "childrens",
        "style",
        "styles",
        "row_height",
        "col_width",
        "link",
        "mask",
        "type",
        "cell_type",
        "comment",
    }
)
_SET_HEADER_KEYS = _SET_COMMON_KEYS | {"merge_cell"}
_SET_DATA_KEYS = _SET_COMMON_KEYS | {
    "header",
    "header_ref",
    "jump",
    "num_format",
    "number_format",
    "formula",
    "validation",
}
_SET_FOOTER_KEYS = _SET_DATA_KEYS | {"merge_cell", "merge_to"}
_SET_VALIDATION_KEYS = frozenset(SpecDataValidation.__dataclass_fields__)


################################################################################
# #region StyleNormalization


def normalize_color(color: Any) -> str | None:
    """
    Normalise a colour to ``#RRGGBB``.

    Accepts ``#RGB`` / ``RRGGBB`` / ``AARRGGBB`` hex strings and ``{"r", "g",
    "b"}`` mappings. Anything else that is a string (e.g. a named colour) is
    returned unchanged.

    Examples:
        >>> normalize_color("#abc")
        '#AABBCC'
        >>> normalize_color({"r": 255, "g": 0, "b": 16})
        '#FF0010'
    """
    if color is None:
        return None
    if isinstance(color, Mapping):
        if not {"r", "g", "b"} <= set(color):
            raise ValueError(f"Unsupported colour mapping: {dict(color)!r}")
        return "#{:02X}{:02X}{:02X}".format(
            int(color["r"]), int(color["g"]), int(color["b"])
        )
    if not isinstance(color, str):
        raise ValueError(f"Unsupported colour value: {color!r}")

    c_hex = color.strip().lstrip("#")
    if not all(_ch in "0123456789abcdefABCDEF" for _ch in c_hex):
        return color
    if len(c_hex) == 3:
        c_hex = "".join(_ch * 2 for _ch in c_hex)
    if len(c_hex) == 8:
        # ARGB: drop alpha
        c_hex = c_hex[2:]
    if len(c_hex) != 6:
        return color
    return f"#{c_hex.upper()}"


def normalize_num_format(num_format: str | None) -> str | None:
    if num_format is None:
        return None
    return DEFAULT_NUMBER_FORMATS.get(num_format, num_format)


def normalize_cell_format(style: Any) -> SpecCellFormat | None:
    if style is None or isinstance(style, SpecCellFormat):
        return style
    if not isinstance(style, Mapping):
        raise ValueError(f"Unsupported style value: {style!r}")

    set_unknown = set(style) - set(SpecCellFormat.__dataclass_fields__)
    if set_unknown:
        raise ValueError(f"Unknown style keys: {sorted(set_unknown)}")

    dict_fields = dict(style)
    for _field in _TUP_COLOR_FIELDS:
        if _field in dict_fields:
            dict_fields[_field] = normalize_color(dict_fields[_field])
    if "num_format" in dict_fields:
        dict_fields["num_format"] = normalize_num_format(dict_fields["num_format"])
    return SpecCellFormat(**dict_fields)


# #endregion
################################################################################
# #region NodeNormalization


def _validate_keys(raw: Mapping[str, Any], allowed: frozenset[str], kind: str) -> None:
    set_unknown = set(raw) - allowed
    if set_unknown:
        raise ValueError(f"Unknown {kind} keys: {sorted(set_unknown)}")


def _collect_children(raw: Mapping[str, Any]) -> list[Any]:
    return [*(raw.get("childrens") or ()), *(raw.get("children") or ())]


def _normalize_cell_type(raw: Mapping[str, Any]) -> CellType | None:
    value = raw.get("cell_type", raw.get("type"))
    if value is None or isinstance(value, CellType):
        return value
    return CellType(value)


def _pick_style(raw: Mapping[str, Any]) -> SpecCellFormat | None:
    return normalize_cell_format(raw.get("style", raw.get("styles")))


def normalize_validation(raw: Any) -> SpecDataValidation | None:
    if raw is None or isinstance(raw, SpecDataValidation):
        return raw
    if not isinstance(raw, Mapping):
        raise ValueError(f"Unsupported validation value: {raw!r}")
    _validate_keys(raw, _SET_VALIDATION_KEYS, "validation")
    if "type" not in raw:
        raise ValueError("Validation requires a `type`.")
    return SpecDataValidation(**raw)


def normalize_header_node(raw: SpecHeaderNode | Mapping[str, Any]) -> SpecHeaderNode:
    if isinstance(raw, SpecHeaderNode):
        return raw
    _validate_keys(raw, _SET_HEADER_KEYS, "header")
    return SpecHeaderNode(
        key=raw.get("key"),
        value=raw.get("value"),
        children=tuple(normalize_header_node(_c) for _c in _collect_children(raw)),
        style=_pick_style(raw),
        merge_cell=bool(raw.get("merge_cell", False)),
        row_height=raw.get("row_height"),
        col_width=raw.get("col_width"),
        link=raw.get("link"),
        mask=raw.get("mask"),
        cell_type=_normalize_cell_type(raw),
        comment=raw.get("comment"),
    )


def _collect_data_fields(raw: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "key": raw.get("key"),
        "header_ref": raw.get("header_ref", raw.get("header")),
        "value": raw.get("value"),
        "children": tuple(normalize_data_node(_c) for _c in _collect_children(raw)),
        "jump": bool(raw.get("jump", False)),
        "style": _pick_style(raw),
        "num_format": normalize_num_format(
            raw.get("num_format", raw.get("number_format"))
        ),
        "link": raw.get("link"),
        "mask": raw.get("mask"),
        "formula": raw.get("formula"),
        "cell_type": _normalize_cell_type(raw),
        "comment": raw.get("comment"),
        "validation": normalize_validation(raw.get("validation")),
        "row_height": raw.get("row_height"),
        "col_width": raw.get("col_width"),
    }


def normalize_data_node(raw: SpecDataNode | Mapping[str, Any]) -> SpecDataNode:
    if isinstance(raw, SpecDataNode):
        return raw
    _validate_keys(raw, _SET_DATA_KEYS, "data")
    return SpecDataNode(**_collect_data_fields(raw))


def normalize_footer_node(raw: SpecFooterNode | Mapping[str, Any]) -> SpecFooterNode:
    if isinstance(raw, SpecFooterNode):
        return raw
    _validate_keys(raw, _SET_FOOTER_KEYS, "footer")
    return SpecFooterNode(
        **_collect_data_fields(raw),
        merge_cell=bool(raw.get("merge_cell", False)),
        merge_to=raw.get("merge_to"),
    )


def normalize_many(raw: Any, normalizer: Callable[[Any], _T]) -> list[_T]:
    """Apply ``normalizer`` to a single node or to every node of an iterable."""
    if isinstance(raw, (Mapping, SpecHeaderNode, SpecDataNode, SpecFooterNode)):
        return [normalizer(raw)]
    if isinstance(raw, Iterable) and not isinstance(raw, (str, bytes)):
        return [normalizer(_item) for _item in raw]
    raise ValueError(f"Expected a node or an iterable of nodes, got {raw!r}")


# #endregion
################################################################################
