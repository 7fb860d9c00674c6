from __future__ import annotations

import sys
from pathlib import Path

# Ensure src-layout imports work when running tests from repo checkout.
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
sys.path.insert(0, str(SRC_DIR))

from gridkit.layout.grid import SheetGrid  # noqa: E402
from gridkit.layout.row_composer import place_data_row, place_footer_row  # noqa: E402
from gridkit.layout.spec import (  # noqa: E402
    ReportSheetLayout,
    SpecDataNode,
    SpecFooterNode,
    SpecHyperlink,
    SpecMergeRegion,
)

DICT_INDEX = {"a": 1, "A": 1, "b": 2, "B": 2, "c": 3, "C": 3}


def test_jump_controls_row_pointer() -> None:
    grid = SheetGrid()
    assert place_data_row(grid, SpecDataNode(key="a", value=1), row=2, column_index=DICT_INDEX) == 2
    assert (
        place_data_row(
            grid, SpecDataNode(key="b", value=2, jump=True), row=2, column_index=DICT_INDEX
        )
        == 3
    )
    assert [grid.get_value(2, 1), grid.get_value(2, 2)] == [1, 2]


def test_fragments_without_jump_share_one_row() -> None:
    grid = SheetGrid()
    n_row = 4
    n_row = place_data_row(grid, SpecDataNode(key="a", value="x"), row=n_row, column_index=DICT_INDEX)
    n_row = place_data_row(grid, SpecDataNode(key="b", value="y"), row=n_row, column_index=DICT_INDEX)
    n_row = place_data_row(
        grid, SpecDataNode(key="c", value="z", jump=True), row=n_row, column_index=DICT_INDEX
    )
    assert n_row == 5
    assert [grid.get_value(4, _c) for _c in (1, 2, 3)] == ["x", "y", "z"]


def test_header_ref_resolves_when_key_is_missing() -> None:
    grid = SheetGrid()
    place_data_row(grid, SpecDataNode(header_ref="C", value=9), row=1, column_index=DICT_INDEX)
    assert grid.get_value(1, 3) == 9


def test_same_row_children_are_written_on_the_node_row() -> None:
    grid = SheetGrid()
    node = SpecDataNode(
        key="a",
        value="main",
        children=(SpecDataNode(key="b", value="side"), SpecDataNode(key="c", value=3)),
        jump=True,
    )
    assert place_data_row(grid, node, row=7, column_index=DICT_INDEX) == 8
    assert [grid.get_value(7, _c) for _c in (1, 2, 3)] == ["main", "side", 3]


def test_unresolved_node_falls_back_to_first_column() -> None:
    grid = SheetGrid()
    report = ReportSheetLayout(sheet_name="S")
    place_data_row(
        grid, SpecDataNode(key="nope", value="lost"), row=1, column_index=DICT_INDEX, report=report
    )
    assert grid.get_value(1, 1) == "lost"
    assert len(report.warnings) == 1


def test_unresolved_child_is_skipped() -> None:
    grid = SheetGrid()
    report = ReportSheetLayout(sheet_name="S")
    node = SpecDataNode(key="b", value=1, children=(SpecDataNode(key="nope", value=2),))
    place_data_row(grid, node, row=1, column_index=DICT_INDEX, report=report)
    assert grid.get_value(1, 1) is None
    assert grid.get_value(1, 2) == 1
    assert "skipping child" in report.warnings[0]


def test_link_value_uses_mask_as_display_text() -> None:
    grid = SheetGrid()
    node = SpecDataNode(key="a", value="docs", link="https://example.com", mask="Docs")
    place_data_row(grid, node, row=1, column_index=DICT_INDEX)
    assert grid.get_value(1, 1) == SpecHyperlink(url="https://example.com", text="Docs")


def test_metadata_travels_with_the_cell() -> None:
    grid = SheetGrid()
    node = SpecDataNode(key="a", value=0.5, num_format="0%", comment="ratio", col_width=14)
    place_data_row(grid, node, row=1, column_index=DICT_INDEX)
    cell = grid.get_cell(1, 1)
    assert cell.num_format == "0%"
    assert cell.comment == "ratio"
    assert grid.col_widths == {1: 14}


def test_footer_merge_to_extends_from_resolved_column() -> None:
    grid = SheetGrid()
    node = SpecFooterNode(key="a", value="Total", merge_cell=True, merge_to=3, jump=True)
    assert place_footer_row(grid, node, row=10, column_index=DICT_INDEX) == 11
    assert grid.merges == [SpecMergeRegion(10, 1, 10, 3)]


def test_footer_merge_to_left_of_column_merges_leftwards() -> None:
    grid = SheetGrid()
    node = SpecFooterNode(key="c", value="Total", merge_cell=True, merge_to=1)
    place_footer_row(grid, node, row=5, column_index=DICT_INDEX)
    assert grid.merges == [SpecMergeRegion(5, 1, 5, 3)]


def test_footer_merge_to_own_column_is_skipped() -> None:
    grid = SheetGrid()
    node = SpecFooterNode(key="b", value="x", merge_cell=True, merge_to=2)
    place_footer_row(grid, node, row=1, column_index=DICT_INDEX)
    assert grid.merges == []
