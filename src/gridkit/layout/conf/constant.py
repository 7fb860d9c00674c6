N_NROWS_EXCEL_MAX = 1_048_576
N_NCOLS_EXCEL_MAX = 16_384
N_LEN_EXCEL_SHEET_NAME_MAX = 31
N_NSHEETS_MAX = 255
TUP_EXCEL_ILLEGAL = ("*", ":", "?", "/", "\\", "[", "]")

# first row/column of a sheet; the layout engine is 1-based throughout
N_ROW_FIRST = 1
N_COL_FIRST = 1
