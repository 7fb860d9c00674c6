from .constant import (
    N_COL_FIRST,
    N_LEN_EXCEL_SHEET_NAME_MAX,
    N_NCOLS_EXCEL_MAX,
    N_NROWS_EXCEL_MAX,
    N_NSHEETS_MAX,
    N_ROW_FIRST,
    TUP_EXCEL_ILLEGAL,
)
from .default import (
    DEFAULT_NUMBER_FORMATS,
    DEFAULT_THEME,
)

__all__ = [
    "N_NROWS_EXCEL_MAX",
    "N_NCOLS_EXCEL_MAX",
    "N_LEN_EXCEL_SHEET_NAME_MAX",
    "N_NSHEETS_MAX",
    "N_ROW_FIRST",
    "N_COL_FIRST",
    "TUP_EXCEL_ILLEGAL",
    "DEFAULT_NUMBER_FORMATS",
    "DEFAULT_THEME",
]
