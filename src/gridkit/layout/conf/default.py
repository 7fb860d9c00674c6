# Strategy/Preference/Adjustable Parameters for table layout.

from collections.abc import Mapping
from types import MappingProxyType

from ..spec import SpecThemeContext

# Named number formats accepted wherever a `num_format` is given.
DEFAULT_NUMBER_FORMATS: Mapping[str, str] = MappingProxyType(
    {
        "general": "General",
        "number": "#,##0",
        "number_decimals": "#,##0.00",
        "currency": "$#,##0.00",
        "currency_integer": "$#,##0",
        "percentage": "0%",
        "percentage_decimals": "0.00%",
        "date": "dd/mm/yyyy",
        "date_time": "dd/mm/yyyy hh:mm",
        "time": "hh:mm:ss",
    }
)

DEFAULT_THEME = SpecThemeContext()
