from __future__ import annotations

import re
import string

from hypothesis import given, settings
from hypothesis import strategies as st

from marq.converter import Converter
from marq.exceptions import MarkdownError
from marq.inline import escape_text, render_inline
from marq.tables import merge_header_cells

CONVERTER = Converter()
CODE = "<code>{{code}}</code>"

# No emphasis, link, code, or raw HTML markers, and no line breaks.
plain_text = st.text(alphabet=string.ascii_letters + string.digits + " ,.;:!&<>$%#+", min_size=0)


@given(plain_text)
def test_plain_line_is_one_escaped_paragraph(text: str):
    line = f"x{text}"
    assert CONVERTER.convert(line) == f'<p class="marq-p">{escape_text(line)}</p>'


@given(plain_text)
def test_rendered_plain_text_contains_no_markup(text: str):
    html = render_inline(text, CODE)
    assert "<" not in html
    assert ">" not in html
    assert "$" not in html
    assert render_inline(html, CODE) == html


@given(st.lists(st.sampled_from(["A", "B", "C"]), min_size=1, max_size=8))
def test_header_colspans_cover_every_column(headers: list[str]):
    row = "| " + " | ".join(headers) + " |"
    config = "| " + " | ".join("-" for _ in headers) + " |"
    data = "| " + " | ".join("x" for _ in headers) + " |"

    html = CONVERTER.convert(f"{row}\n{config}\n{data}\n")

    spans = [int(span) for span in re.findall(r'colspan="(\d+)"', html)]
    assert len(spans) == len(merge_header_cells(headers))
    assert sum(spans) == len(headers)


@given(st.lists(st.text(alphabet=string.ascii_letters, min_size=1, max_size=10), max_size=10))
def test_unordered_list_holds_every_item(items: list[str]):
    document = "".join(f"* {item}\n" for item in items)
    html = CONVERTER.convert(document)
    assert html.count('<li class="marq-li">') == len(items)


@settings(deadline=None)
@given(st.text(max_size=500))
def test_arbitrary_text_converts_or_reports_markdown_error(text: str):
    try:
        html = CONVERTER.convert(text)
    except MarkdownError:
        return
    assert isinstance(html, str)
