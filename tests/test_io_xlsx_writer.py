from __future__ import annotations

import io
import sys
import xml.etree.ElementTree as ET
import zipfile
from datetime import date
from pathlib import Path

import polars as pl
import pytest

# Ensure src-layout imports work when running tests from repo checkout.
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
sys.path.insert(0, str(SRC_DIR))

from gridkit.io.xlsx import (  # noqa: E402
    XlsxWorkbookSink,
    sanitize_sheet_name,
)
from gridkit.io.xlsx.util import (  # noqa: E402
    convert_nan_inf_to_str,
    convert_validation_options,
)
from gridkit.layout import Worksheet  # noqa: E402
from gridkit.layout.spec import (  # noqa: E402
    SpecDataValidation,
    SpecWorkbookMetadata,
    SpecWorksheetConfig,
)

NS_MAIN = {"m": "http://schemas.openxmlformats.org/spreadsheetml/2006/main"}


def _read_shared_strings(zf: zipfile.ZipFile) -> list[str]:
    try:
        v_xml = zf.read("xl/sharedStrings.xml")
    except KeyError:
        return []

    root = ET.fromstring(v_xml)
    l_strings: list[str] = []
    for node_si in root.findall(".//m:si", NS_MAIN):
        l_text_nodes = node_si.findall(".//m:t", NS_MAIN)
        l_strings.append("".join((node.text or "") for node in l_text_nodes))
    return l_strings


def read_sheet(v_xlsx: bytes, n_sheet: int = 1) -> tuple[dict[str, str], ET.Element]:
    """Return ``{cell_ref: text}`` and the parsed sheet root."""
    with zipfile.ZipFile(io.BytesIO(v_xlsx)) as zf:
        l_shared_strings = _read_shared_strings(zf)
        root_sheet = ET.fromstring(zf.read(f"xl/worksheets/sheet{n_sheet}.xml"))

    dict_values: dict[str, str] = {}
    for node_cell in root_sheet.iter(f"{{{NS_MAIN['m']}}}c"):
        node_value = node_cell.find("m:v", NS_MAIN)
        if node_value is None or node_value.text is None:
            continue
        c_raw = node_value.text
        if node_cell.attrib.get("t") == "s":
            c_raw = l_shared_strings[int(c_raw)]
        dict_values[node_cell.attrib["r"]] = c_raw
    return dict_values, root_sheet


def read_sheet_names(v_xlsx: bytes) -> list[str]:
    with zipfile.ZipFile(io.BytesIO(v_xlsx)) as zf:
        root = ET.fromstring(zf.read("xl/workbook.xml"))
    return [_node.attrib["name"] for _node in root.findall(".//m:sheet", NS_MAIN)]


def _render(ws: Worksheet, **sink_kwargs) -> bytes:
    grid, _ = ws.build_grid()
    with XlsxWorkbookSink(**sink_kwargs) as sink:
        grid.emit(sink.add_sheet(ws.config))
    return sink.getvalue()


def test_nested_headers_and_rows_round_trip_through_xlsx() -> None:
    ws = Worksheet("Report")
    ws.add_table(name="T", auto_filter=True)
    ws.add_sub_headers(
        [
            {"key": "name", "value": "Name"},
            {"value": "Ventas", "children": [{"key": "q1", "value": "Q1"}, {"key": "q2", "value": "Q2"}]},
        ]
    )
    ws.add_row(
        [
            {"key": "name", "value": "north"},
            {"key": "q1", "value": 10},
            {"key": "q2", "value": 12.5, "jump": True},
        ]
    )
    ws.finalize_table()

    dict_values, root_sheet = read_sheet(_render(ws))

    assert dict_values["A1"] == "Name"
    assert dict_values["B1"] == "Ventas"
    assert dict_values["B2"] == "Q1"
    assert dict_values["A3"] == "north"
    assert float(dict_values["B3"]) == 10
    assert float(dict_values["C3"]) == 12.5

    l_merge_refs = sorted(
        _node.attrib["ref"] for _node in root_sheet.findall(".//m:mergeCell", NS_MAIN)
    )
    assert l_merge_refs == ["A1:A2", "B1:C1"]

    node_filter = root_sheet.find("m:autoFilter", NS_MAIN)
    assert node_filter is not None
    assert node_filter.attrib["ref"] == "A1:C3"


def test_links_formulas_and_dates_are_written() -> None:
    ws = Worksheet("Values")
    ws.add_sub_headers([{"key": "a", "value": "A"}, {"key": "b", "value": "B"}, {"key": "c", "value": "C"}])
    ws.add_row(
        [
            {"key": "a", "value": "site", "link": "https://example.com", "mask": "Example"},
            {"key": "b", "formula": "1+2"},
            {"key": "c", "value": date(2024, 1, 31), "jump": True},
        ]
    )

    dict_values, root_sheet = read_sheet(_render(ws))

    assert dict_values["A2"] == "Example"
    assert root_sheet.find(".//m:hyperlinks/m:hyperlink", NS_MAIN).attrib["ref"] == "A2"
    node_formula = root_sheet.find(".//m:c[@r='B2']/m:f", NS_MAIN)
    assert node_formula is not None
    assert node_formula.text == "1+2"
    # Excel serial date
    assert float(dict_values["C2"]) == 45322


def test_merged_title_keeps_its_value() -> None:
    ws = Worksheet("Title")
    ws.add_header({"value": "Quarterly report", "merge_cell": True})
    ws.add_sub_headers([{"key": "a", "value": "A"}, {"key": "b", "value": "B"}])

    dict_values, root_sheet = read_sheet(_render(ws))

    assert dict_values["A1"] == "Quarterly report"
    assert root_sheet.find(".//m:mergeCell", NS_MAIN).attrib["ref"] == "A1:B1"


def test_duplicate_sheet_names_are_bumped() -> None:
    with XlsxWorkbookSink() as sink:
        sink.add_sheet(SpecWorksheetConfig(name="Data"))
        sink.add_sheet(SpecWorksheetConfig(name="Data"))
        sink.add_sheet(SpecWorksheetConfig(name="a/b"))
    assert read_sheet_names(sink.getvalue()) == ["Data", "Data__2", "a_b"]


def test_metadata_is_written_to_document_properties() -> None:
    ws = Worksheet("S")
    ws.add_row({"value": 1})
    v_xlsx = _render(ws, metadata=SpecWorkbookMetadata(title="Quarterly", author="Finance"))
    with zipfile.ZipFile(io.BytesIO(v_xlsx)) as zf:
        c_core = zf.read("docProps/core.xml").decode()
    assert "Quarterly" in c_core
    assert "Finance" in c_core


def test_file_output(tmp_path: Path) -> None:
    ws = Worksheet("S")
    ws.add_row({"value": "x"})
    grid, _ = ws.build_grid()

    path_file_out = tmp_path / "out.xlsx"
    with XlsxWorkbookSink(path_file_out) as sink:
        grid.emit(sink.add_sheet(ws.config))

    assert path_file_out.exists()
    assert sink.size_file == path_file_out.stat().st_size


def test_sanitize_sheet_name() -> None:
    assert sanitize_sheet_name("a/b*c") == "a_b_c"
    assert sanitize_sheet_name("   ") == "Sheet"
    assert len(sanitize_sheet_name("x" * 40)) == 31


def test_validation_options_translation() -> None:
    assert convert_validation_options(
        SpecDataValidation(type="list", formula1="a, b,c")
    ) == {"validate": "list", "ignore_blank": True, "source": ["a", "b", "c"]}
    assert convert_validation_options(
        SpecDataValidation(type="whole", operator="between", formula1=1, formula2=9)
    ) == {
        "validate": "whole",
        "ignore_blank": True,
        "criteria": "between",
        "minimum": 1,
        "maximum": 9,
    }
    dict_options = convert_validation_options(
        SpecDataValidation(
            type="textLength",
            operator="lessThan",
            formula1=5,
            show_error_message=True,
            error_message="Too long",
        )
    )
    assert dict_options["validate"] == "length"
    assert dict_options["criteria"] == "less than"
    assert dict_options["value"] == 5
    assert dict_options["error_message"] == "Too long"


def test_non_finite_floats_are_written_as_text() -> None:
    ws = Worksheet("Floats")
    ws.add_sub_headers([{"key": "a", "value": "A"}])
    for _value in (1.5, float("nan"), float("inf"), float("-inf")):
        ws.add_row({"key": "a", "value": _value, "jump": True})

    dict_values, _ = read_sheet(_render(ws))

    assert float(dict_values["A2"]) == 1.5
    assert [dict_values["A3"], dict_values["A4"], dict_values["A5"]] == ["NaN", "Inf", "-Inf"]


def test_frame_with_nan_builds() -> None:
    ws = Worksheet("Frame")
    ws.add_frame(pl.DataFrame({"a": [1.5, float("nan"), float("inf")]}))

    dict_values, _ = read_sheet(_render(ws))

    assert dict_values["A1"] == "a"
    assert [dict_values["A3"], dict_values["A4"]] == ["NaN", "Inf"]


def test_convert_nan_inf_to_str() -> None:
    assert convert_nan_inf_to_str(float("nan")) == "NaN"
    assert convert_nan_inf_to_str(float("-inf")) == "-Inf"
    with pytest.raises(ValueError):
        convert_nan_inf_to_str(1.0)
