import math
from typing import Any

from gridkit.layout.conf import N_LEN_EXCEL_SHEET_NAME_MAX, TUP_EXCEL_ILLEGAL
from gridkit.layout.spec import SpecDataValidation

# xlsxwriter spells a few validation types differently
_DICT_VALIDATION_TYPES = {"textLength": "length"}
_DICT_VALIDATION_OPERATORS = {
    "between": "between",
    "notBetween": "not between",
    "equal": "equal to",
    "notEqual": "not equal to",
    "greaterThan": "greater than",
    "lessThan": "less than",
    "greaterThanOrEqual": "greater than or equal to",
    "lessThanOrEqual": "less than or equal to",
}


def sanitize_sheet_name(name: str, *, replace_to: str = "_") -> str:
    for ch in TUP_EXCEL_ILLEGAL:
        name = name.replace(ch, replace_to)
    name = name.strip() or "Sheet"
    return name[:N_LEN_EXCEL_SHEET_NAME_MAX]


def convert_nan_inf_to_str(x: float) -> str:
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "Inf" if x > 0 else "-Inf"
    raise ValueError(f"Value is neither NaN nor Inf: {x!r}")


def convert_validation_options(validation: SpecDataValidation) -> dict[str, Any]:
    """Translate a validation request into ``worksheet.data_validation`` options."""
    c_type = _DICT_VALIDATION_TYPES.get(validation.type, validation.type)
    dict_options: dict[str, Any] = {
        "validate": c_type,
        "ignore_blank": validation.allow_blank,
    }
    if c_type == "list":
        v_source = validation.formula1
        if isinstance(v_source, str) and not v_source.startswith("="):
            v_source = [_item.strip() for _item in v_source.split(",")]
        dict_options["source"] = v_source
    elif c_type == "custom":
        dict_options["value"] = validation.formula1
    else:
        dict_options["criteria"] = _DICT_VALIDATION_OPERATORS.get(
            validation.operator or "between", validation.operator
        )
        if dict_options["criteria"] in {"between", "not between"}:
            dict_options["minimum"] = validation.formula1
            dict_options["maximum"] = validation.formula2
        else:
            dict_options["value"] = validation.formula1

    if validation.show_input_message and validation.input_message:
        dict_options["input_message"] = validation.input_message
    if validation.show_error_message and validation.error_message:
        dict_options["error_message"] = validation.error_message
    return dict_options
