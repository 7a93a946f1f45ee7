"""Table row parsing, validation, and HTML building."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from .constants import DASH_RUN_PATTERN, TABLE_CELL_PATTERN, TABLE_CONFIG_PATTERN, TABLE_DELIMITER
from .exceptions import InvalidTableConfigError, InvalidTableRowError, TableShapeError
from .models import Alignment
from .templates import TemplateRenderer

ALIGNMENTS = {
    "-": Alignment.LEFT,
    ":-": Alignment.LEFT,
    ":-:": Alignment.CENTER,
    "-:": Alignment.RIGHT,
}


def validate_table_row(line: str, line_number: int, page: str) -> None:
    """Ensure a table line starts and ends with ``|``.

    Raises:
        InvalidTableRowError: If either delimiter is missing.
    """
    if not line.startswith(TABLE_DELIMITER) or not line.endswith(TABLE_DELIMITER):
        raise InvalidTableRowError(page, line_number)


def split_table_row(line: str) -> list[str]:
    """Split a table line into stripped cell texts.

    A ``|`` inside an inline code span does not end a cell; empty cells
    between adjacent delimiters are dropped.

    Examples:
        split_table_row("| a | `x|y` |")  # ["a", "`x|y`"]
    """
    return [cell.strip() for cell in TABLE_CELL_PATTERN.findall(line) if cell]


def is_config_token(token: str) -> bool:
    return TABLE_CONFIG_PATTERN.match(token.strip()) is not None


def is_config_row(cells: Sequence[str]) -> bool:
    """Return True when every cell is an alignment token such as ``:-:``."""
    return all(is_config_token(cell) for cell in cells)


def normalize_config_token(token: str) -> str:
    """Collapse the dash run of an alignment token: ``:---:`` -> ``:-:``."""
    return DASH_RUN_PATTERN.sub("-", token.strip(), count=1)


def validate_table_configs(configs: Sequence[str], line_number: int, page: str) -> None:
    """Ensure every configuration token matches ``^:?-+:?$``.

    Raises:
        InvalidTableConfigError: If any token is malformed.
    """
    if not is_config_row(configs):
        raise InvalidTableConfigError(page, line_number)


def column_alignment(token: str) -> Alignment:
    """Map an alignment token to a column alignment.

    Tokens are normalized first, so any dash count is accepted. Left is the
    default for anything outside the four known shapes.

    Examples:
        column_alignment(":-:")  # Alignment.CENTER
        column_alignment("---:")  # Alignment.RIGHT
    """
    return ALIGNMENTS.get(normalize_config_token(token), Alignment.LEFT)


def merge_header_cells(headers: Sequence[str]) -> list[tuple[str, int]]:
    """Merge runs of identical adjacent headers into ``(text, colspan)`` pairs.

    Examples:
        merge_header_cells(["A", "A", "B", "A"])  # [("A", 2), ("B", 1), ("A", 1)]
    """
    merged: list[tuple[str, int]] = []
    for header in headers:
        if merged and merged[-1][0] == header:
            merged[-1] = (header, merged[-1][1] + 1)
        else:
            merged.append((header, 1))
    return merged


def validate_table_shape(
    headers: Sequence[str], configs: Sequence[str], rows: Sequence[Sequence[str]], page: str
) -> int:
    """Check that headers, configurations, and rows agree on column count.

    Returns:
        int: Number of columns in the table.

    Raises:
        TableShapeError: If the table has no data rows, rows differ in width,
            or the configuration or header row disagrees with the row width.
    """
    widths = {len(row) for row in rows}
    if not widths:
        raise TableShapeError(page, detail="table has no data rows")
    if len(widths) != 1:
        raise TableShapeError(page, detail="unequal columns found in table data")
    (width,) = widths
    if headers:
        if len(headers) != len(configs) or len(configs) != width:
            raise TableShapeError(page)
    elif len(configs) != width:
        raise TableShapeError(page, detail="unequal table configurations and rows")
    return width


def build_table(
    headers: Sequence[str],
    configs: Sequence[str],
    rows: Sequence[Sequence[str]],
    page: str,
    templates: TemplateRenderer,
    render: Callable[[str], str],
) -> str:
    """Render a complete table.

    Args:
        headers: Raw header texts; empty for a table without a header row.
        configs: Alignment tokens, one per column.
        rows: Data rows of already rendered cell HTML.
        page: Identifier of the document, used in diagnostics.
        templates: Renderer for the ``table/*`` templates.
        render: Inline renderer applied to header texts.

    Returns:
        str: Table HTML.

    Raises:
        TableShapeError: If the table is not rectangular.
    """
    validate_table_shape(headers, configs, rows, page)
    alignments = [column_alignment(token).value for token in configs]

    table_headers = ""
    if headers:
        cells = []
        column = 0
        for text, colspan in merge_header_cells(headers):
            cells.append(
                templates.render(
                    "table/th",
                    {"header-align": alignments[column], "colspan": colspan, "header": render(text)},
                )
            )
            column += colspan
        header_row = templates.render("table/tr", {"row": "\n".join(cells)})
        table_headers = templates.render("table/thead", {"headers": header_row})

    body_rows = []
    for row in rows:
        cells = [
            templates.render("table/td", {"data-align": alignments[index], "data": cell})
            for index, cell in enumerate(row)
        ]
        body_rows.append(templates.render("table/tr", {"row": "\n".join(cells)}))

    return templates.render(
        "table/table",
        {
            "table-headers": table_headers,
            "table-rows": templates.render("table/tbody", {"body": "\n".join(body_rows)}),
        },
    )
