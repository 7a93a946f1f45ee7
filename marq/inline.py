"""Inline markup rendering: escaping, links, inline code, and emphasis."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator

from .constants import (
    CODE_ESCAPES,
    CODE_SPAN_PATTERN,
    DEFAULT_CSS_PREFIX,
    DEFAULT_CSS_SUFFIX,
    EMPHASIS_BOUNDARY,
    ESCAPES,
    INTERNAL_TARGET_PATTERN,
    LINK_PATTERN,
    RAW_HTML_SPAN_PATTERN,
)
from .templates import fill_template


def _build_emphasis_rules(marker: str) -> tuple[re.Pattern[str], ...]:
    """Compile the four boundary rules for one emphasis marker.

    Rules are applied in order: middle of text, start of text, end of text,
    and the whole text. Boundaries are lookarounds so they stay outside the
    generated tag, and a closing boundary can open the next match.
    """
    m = re.escape(marker)
    b = EMPHASIS_BOUNDARY
    return (
        re.compile(rf"(?<={b}){m}(.+?){m}(?={b})"),
        re.compile(rf"^{m}(.+?){m}(?={b})"),
        re.compile(rf"(?<={b}){m}(.+?){m}\Z"),
        re.compile(rf"^{m}(.+?){m}\Z"),
    )


ITALIC_RULES = _build_emphasis_rules("_")
BOLD_RULES = _build_emphasis_rules("**")
STRIKETHROUGH_RULES = _build_emphasis_rules("~~")


def escape_text(text: str) -> str:
    """Escape characters that would otherwise be read as HTML or templates.

    Examples:
        escape_text("<b>$5</b>")  # "&lt;b&gt;&#36;5&lt;/b&gt;"
    """
    for character, entity in ESCAPES:
        text = text.replace(character, entity)
    return text


def _segments(text: str, pattern: re.Pattern[str]) -> Iterator[tuple[str, bool]]:
    """Split `text` into ``(chunk, matched)`` pairs around `pattern` matches."""
    position = 0
    for match in pattern.finditer(text):
        if match.start() > position:
            yield text[position : match.start()], False
        yield match.group(0), True
        position = match.end()
    if position < len(text):
        yield text[position:], False


def protect_and_escape(text: str) -> str:
    """Escape `text` except inside ``===...===`` raw HTML spans.

    The text is first cut at inline code spans so a raw HTML span never
    straddles a code span boundary; raw spans lose their delimiters and are
    kept verbatim.

    Examples:
        protect_and_escape("a < b ===<br>===")  # "a &lt; b <br>"
    """
    parts = []
    for chunk, _ in _segments(text, CODE_SPAN_PATTERN):
        for piece, is_raw in _segments(chunk, RAW_HTML_SPAN_PATTERN):
            parts.append(piece[3:-3] if is_raw else escape_text(piece))
    return "".join(parts)


def is_internal_target(target: str) -> bool:
    """Return True for ``{{src:...}}`` and ``{{sys:home}}`` link targets."""
    return INTERNAL_TARGET_PATTERN.search(target) is not None


def render_links(
    text: str, css_prefix: str = DEFAULT_CSS_PREFIX, css_suffix: str = DEFAULT_CSS_SUFFIX
) -> str:
    """Turn ``[caption](target)`` into anchors.

    External targets open in a new tab; internal references do not.

    Examples:
        render_links("[Home]({{sys:home}})")
        # '<a class="marq-link" href="{{sys:home}}">Home</a>'
    """

    def anchor(match: re.Match[str]) -> str:
        caption = match.group("caption").split("]", 1)[0]
        target = match.group("target").rsplit("(", 1)[-1]
        css_class = f"{css_prefix}link{css_suffix}"
        if is_internal_target(target):
            return f'<a class="{css_class}" href="{target}">{caption}</a>'
        return f'<a class="{css_class}" href="{target}" target="_blank">{caption}</a>'

    return LINK_PATTERN.sub(anchor, text)


def render_inline_code(text: str, inline_code_template: str) -> str:
    """Wrap backtick spans with the inline code template.

    Emphasis markers inside the span become entities so the emphasis passes
    leave code alone.
    """

    def code(match: re.Match[str]) -> str:
        content = match.group(1).replace("`", "")
        for character, entity in CODE_ESCAPES:
            content = content.replace(character, entity)
        return fill_template("inline-code", inline_code_template, {"code": content})

    return CODE_SPAN_PATTERN.sub(code, text)


def _apply_rules(text: str, rules: tuple[re.Pattern[str], ...], wrap: Callable[[str], str]) -> str:
    for rule in rules:
        text = rule.sub(lambda match: wrap(match.group(1)), text)
    return text


def render_emphasis(
    text: str, css_prefix: str = DEFAULT_CSS_PREFIX, css_suffix: str = DEFAULT_CSS_SUFFIX
) -> str:
    """Render italics, bold, and strikethrough, in that order.

    A marker only counts when the character outside it is not alphanumeric,
    a quote, or a backtick, so ``snake_case_names`` stay intact.

    Examples:
        render_emphasis("a _b_ c")  # "a <i>b</i> c"
        render_emphasis("a_b_c")  # "a_b_c"
    """
    bold_open = f'<b class="{css_prefix}bold-text{css_suffix}">'
    text = _apply_rules(text, ITALIC_RULES, lambda inner: f"<i>{inner}</i>")
    text = _apply_rules(text, BOLD_RULES, lambda inner: f"{bold_open}{inner}</b>")
    text = _apply_rules(text, STRIKETHROUGH_RULES, lambda inner: f"<s>{inner}</s>")
    return text


def render_inline(
    text: str,
    inline_code_template: str,
    css_prefix: str = DEFAULT_CSS_PREFIX,
    css_suffix: str = DEFAULT_CSS_SUFFIX,
) -> str:
    """Render one line or phrase of inline markup to HTML.

    Args:
        text: Source text of a single line, cell, or phrase.
        inline_code_template: Raw text of the ``inline-code`` template.
        css_prefix: Prefix for generated class names.
        css_suffix: Suffix for generated class names.

    Returns:
        str: HTML for the phrase. Attribute tokens from templates are left
            unresolved.

    Examples:
        render_inline("Use `x_y` and **care**", "<code>{{code}}</code>")
        # 'Use <code>x&#95;y</code> and <b class="marq-bold-text">care</b>'
    """
    html = protect_and_escape(text)
    html = render_links(html, css_prefix, css_suffix)
    html = render_inline_code(html, inline_code_template)
    return render_emphasis(html, css_prefix, css_suffix)
