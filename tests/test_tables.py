from __future__ import annotations

import re

import pytest

from marq.exceptions import InvalidTableConfigError, InvalidTableRowError, TableShapeError
from marq.models import Alignment
from marq.tables import (
    build_table,
    column_alignment,
    is_config_row,
    merge_header_cells,
    normalize_config_token,
    split_table_row,
    validate_table_configs,
    validate_table_row,
    validate_table_shape,
)


@pytest.mark.parametrize(
    ("token", "expected"),
    [
        ("-", Alignment.LEFT),
        ("--", Alignment.LEFT),
        (":-", Alignment.LEFT),
        (":--", Alignment.LEFT),
        (":-:", Alignment.CENTER),
        (":---:", Alignment.CENTER),
        ("-:", Alignment.RIGHT),
        ("---:", Alignment.RIGHT),
    ],
)
def test_column_alignment(token: str, expected: Alignment):
    assert column_alignment(token) is expected


def test_normalize_config_token():
    assert normalize_config_token(" :----: ") == ":-:"


def test_merge_header_cells():
    assert merge_header_cells(["A", "A", "B"]) == [("A", 2), ("B", 1)]
    assert merge_header_cells(["A", "B", "A"]) == [("A", 1), ("B", 1), ("A", 1)]
    assert merge_header_cells(["Solo"]) == [("Solo", 1)]
    assert merge_header_cells([]) == []


def test_split_table_row_keeps_pipes_inside_code():
    assert split_table_row("| a | `x|y` |") == ["a", "`x|y`"]


def test_split_table_row_strips_cells():
    assert split_table_row("|  left|right  |") == ["left", "right"]


def test_is_config_row():
    assert is_config_row([":-:", "-", "--:"])
    assert not is_config_row(["a", "-"])


def test_validate_table_row_requires_both_delimiters():
    validate_table_row("| a |", 0, "page")
    with pytest.raises(InvalidTableRowError) as excinfo:
        validate_table_row("| a", 3, "page")
    assert excinfo.value.line_number == 3
    assert excinfo.value.kind == "table-row"


def test_validate_table_configs():
    validate_table_configs([":-:", "-:"], 1, "page")
    with pytest.raises(InvalidTableConfigError):
        validate_table_configs([":-:", "left"], 1, "page")


@pytest.mark.parametrize(
    ("headers", "configs", "rows"),
    [
        (["A", "B"], ["-", "-"], []),
        (["A", "B"], ["-", "-"], [["1", "2"], ["3"]]),
        (["A", "B"], ["-"], [["1", "2"]]),
        (["A"], ["-", "-"], [["1", "2"]]),
        ([], ["-"], [["1", "2"]]),
    ],
)
def test_validate_table_shape_rejects_mismatches(headers, configs, rows):
    with pytest.raises(TableShapeError):
        validate_table_shape(headers, configs, rows, "page")


def test_validate_table_shape_returns_width():
    assert validate_table_shape(["A", "A"], ["-", "-"], [["1", "2"]], "page") == 2
    assert validate_table_shape([], ["-"], [["1"]], "page") == 1


def test_build_table_merges_headers(templates):
    html = build_table(
        ["A", "A", "B"],
        ["-", ":-:", "-:"],
        [["1", "2", "3"]],
        "page",
        templates,
        str,
    )

    assert html.count("<th ") == 2
    assert 'align-left{{marq-suffix}}" colspan="2">A</th>' in html
    assert 'align-right{{marq-suffix}}" colspan="1">B</th>' in html
    assert 'align-center{{marq-suffix}}">2</td>' in html
    assert sum(int(span) for span in re.findall(r'colspan="(\d+)"', html)) == 3


def test_build_table_without_headers(templates):
    html = build_table([], ["-", "-:"], [["a", "b"], ["c", "d"]], "page", templates, str)
    assert "<thead>" not in html
    assert html.count("<tr>") == 2
    assert "{{table-headers}}" not in html


def test_build_table_renders_headers_only(templates):
    html = build_table(["*x*"], ["-"], [["*y*"]], "page", templates, lambda text: text.upper())
    assert "*X*</th>" in html
    assert "*y*</td>" in html
