"""Block-level conversion of marq documents to HTML."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from functools import partial

from .attributes import resolve_attributes
from .config import MarqConfig, normalize_config, validate_config
from .constants import (
    BLOCKQUOTE_PREFIX,
    CENTERED_PREFIX,
    CODE_FENCE,
    COMMENT_PREFIX,
    HEADING_PREFIXES,
    HORIZONTAL_RULE_HTML,
    HORIZONTAL_RULES,
    HTML_BLOCK_FENCE,
    IMAGE_PATTERN,
    LINE_BREAK_HTML,
    ORDERED_ITEM_PATTERN,
    SEGMENT_SEPARATOR,
    SHOUTOUT_PREFIX,
    SLIDESHOW_CLOSE,
    SLIDESHOW_OPEN,
    TABLE_DELIMITER,
    UNORDERED_ITEM_PREFIX,
    VIDEO_PREFIX,
)
from .exceptions import (
    InvalidInputError,
    InvalidListItemError,
    InvalidTableRowError,
    UnclosedBlockError,
)
from .inline import escape_text, render_inline
from .models import (
    ConvertOptions,
    ParserContext,
    ParserState,
    PendingCodeBlock,
    PendingHtmlBlock,
    PendingList,
    PendingSlideshow,
    PendingTable,
)
from .slideshow import build_slide
from .tables import (
    build_table,
    is_config_row,
    normalize_config_token,
    split_table_row,
    validate_table_configs,
    validate_table_row,
)
from .templates import DirectoryTemplateProvider, TemplateProvider, TemplateRenderer

logger = logging.getLogger(__name__)

UNCLOSED_BLOCKS = {
    ParserState.IN_CODE_BLOCK: "code block",
    ParserState.IN_UNORDERED_LIST: "unordered list",
    ParserState.IN_ORDERED_LIST: "ordered list",
    ParserState.IN_TABLE: "table",
    ParserState.IN_SLIDESHOW: "slideshow",
    ParserState.IN_HTML_BLOCK: "HTML block",
}


def split_lines(content: str) -> list[str]:
    """Split a document on ``\\n``, dropping a trailing ``\\r`` from each line.

    A trailing newline yields a final empty line, which closes an open list
    or table.

    Examples:
        split_lines("* a\\r\\n")  # ["* a", ""]
    """
    return [line[:-1] if line.endswith("\r") else line for line in content.split("\n")]


class _Conversion:
    """Block state machine for a single document.

    Every conversion gets a fresh instance, so no buffers outlive a call.
    """

    def __init__(self, config: MarqConfig, templates: TemplateRenderer, page: str):
        self.config = config
        self.templates = templates
        self.ctx = ParserContext(page=page)
        self.render: Callable[[str], str] = partial(
            render_inline,
            inline_code_template=templates.fetch("inline-code"),
            css_prefix=config.css_prefix,
            css_suffix=config.css_suffix,
        )
        self.handlers: dict[ParserState, Callable[[str, int], None]] = {
            ParserState.NORMAL: self._normal_line,
            ParserState.IN_UNORDERED_LIST: self._unordered_list_line,
            ParserState.IN_ORDERED_LIST: self._ordered_list_line,
            ParserState.IN_TABLE: self._table_line,
            ParserState.IN_CODE_BLOCK: self._code_block_line,
            ParserState.IN_HTML_BLOCK: self._html_block_line,
            ParserState.IN_SLIDESHOW: self._slideshow_line,
        }
        self.rules: Sequence[Callable[[str, int], bool]] = (
            self._try_heading,
            self._try_shoutout,
            self._try_unordered_item,
            self._try_ordered_item,
            self._try_image,
            self._try_video,
            self._try_open_html_block,
            self._try_centered_text,
            self._try_comment,
            self._try_blockquote,
            self._try_open_table,
            self._try_open_code_block,
            self._try_open_slideshow,
            self._try_horizontal_rule,
            self._try_blank,
        )

    @property
    def page(self) -> str:
        return self.ctx.page

    def run(self, lines: Sequence[str]) -> str:
        for line_number, line in enumerate(lines):
            self.ctx.check()
            self.handlers[self.ctx.state](line, line_number)

        if self.ctx.state in UNCLOSED_BLOCKS:
            raise UnclosedBlockError(self.page, UNCLOSED_BLOCKS[self.ctx.state])

        return "".join(self.ctx.output)

    def _emit(self, html: str) -> None:
        self.ctx.output.append(html)

    def _open(self, state: ParserState, pending, line_number: int) -> None:
        logger.debug("%s: entering %s at line %d", self.page, state.name, line_number)
        self.ctx.open(state, pending)

    # Normal state

    def _normal_line(self, line: str, line_number: int) -> None:
        for rule in self.rules:
            if rule(line, line_number):
                return
        self._emit(self.templates.render("p", {"text": self.render(line)}))

    def _try_heading(self, line: str, line_number: int) -> bool:
        for level, prefix in enumerate(HEADING_PREFIXES, start=1):
            if line.startswith(prefix):
                title = self.render(line[len(prefix) :])
                self._emit(self.templates.render(f"headers/h{level}", {"title": title}))
                return True
        return False

    def _try_shoutout(self, line: str, line_number: int) -> bool:
        if not line.startswith(SHOUTOUT_PREFIX):
            return False
        title, _, text = line[len(SHOUTOUT_PREFIX) :].partition(SEGMENT_SEPARATOR)
        values = {"title": self.render(title), "text": self.render(text)}
        self._emit(self.templates.render("shoutout", values))
        return True

    def _try_unordered_item(self, line: str, line_number: int) -> bool:
        if not line.startswith(UNORDERED_ITEM_PREFIX):
            return False
        pending = PendingList(items=[line[len(UNORDERED_ITEM_PREFIX) :]])
        self._open(ParserState.IN_UNORDERED_LIST, pending, line_number)
        return True

    def _try_ordered_item(self, line: str, line_number: int) -> bool:
        match = ORDERED_ITEM_PATTERN.match(line)
        if match is None:
            return False
        pending = PendingList(items=[match.group("text")], start=int(match.group("start")))
        self._open(ParserState.IN_ORDERED_LIST, pending, line_number)
        return True

    def _try_image(self, line: str, line_number: int) -> bool:
        match = IMAGE_PATTERN.match(line)
        if match is None:
            return False
        rest = match.group("rest")
        subtitle = ""
        if len(rest) >= 2 and rest.startswith("<") and rest.endswith(">"):
            subtitle = self.render(rest[1:-1])
        self._emit(
            self.templates.render(
                "img",
                {
                    "alt": match.group("alt"),
                    "src": match.group("src"),
                    "img-subtitle": self.templates.render("img-subtitle", {"subtitle": subtitle}),
                },
            )
        )
        return True

    def _try_video(self, line: str, line_number: int) -> bool:
        if not line.startswith(VIDEO_PREFIX):
            return False
        video_id = line[len(VIDEO_PREFIX) :].removesuffix(")")
        self._emit(self.templates.render("youtube", {"video-id": video_id}))
        return True

    def _try_open_html_block(self, line: str, line_number: int) -> bool:
        if line != HTML_BLOCK_FENCE:
            return False
        self._open(ParserState.IN_HTML_BLOCK, PendingHtmlBlock(), line_number)
        return True

    def _try_centered_text(self, line: str, line_number: int) -> bool:
        if not line.startswith(CENTERED_PREFIX):
            return False
        text = self.render(line[len(CENTERED_PREFIX) :])
        self._emit(self.templates.render("centered-text", {"text": text}))
        return True

    def _try_comment(self, line: str, line_number: int) -> bool:
        return line.startswith(COMMENT_PREFIX)

    def _try_blockquote(self, line: str, line_number: int) -> bool:
        if not line.startswith(BLOCKQUOTE_PREFIX):
            return False
        quote = line[len(BLOCKQUOTE_PREFIX) :].removeprefix(" ")
        cite = ""
        if SEGMENT_SEPARATOR in quote:
            source, _, quote = quote.partition(SEGMENT_SEPARATOR)
            cite = f'cite="{source}"'
        values = {"marq-cite": cite, "blockquote": self.render(quote)}
        self._emit(self.templates.render("blockquote", values))
        return True

    def _try_open_table(self, line: str, line_number: int) -> bool:
        if not line.startswith(TABLE_DELIMITER):
            return False
        validate_table_row(line, line_number, self.page)
        cells = split_table_row(line)
        pending = PendingTable()
        if is_config_row(cells):
            pending.configs = [normalize_config_token(cell) for cell in cells]
        else:
            pending.headers = cells
        self._open(ParserState.IN_TABLE, pending, line_number)
        return True

    def _try_open_code_block(self, line: str, line_number: int) -> bool:
        if not line.startswith(CODE_FENCE):
            return False
        pending = PendingCodeBlock(language=line[len(CODE_FENCE) :].strip())
        self._open(ParserState.IN_CODE_BLOCK, pending, line_number)
        return True

    def _try_open_slideshow(self, line: str, line_number: int) -> bool:
        if line != SLIDESHOW_OPEN:
            return False
        self._open(ParserState.IN_SLIDESHOW, PendingSlideshow(), line_number)
        return True

    def _try_horizontal_rule(self, line: str, line_number: int) -> bool:
        if line not in HORIZONTAL_RULES:
            return False
        self._emit(HORIZONTAL_RULE_HTML)
        return True

    def _try_blank(self, line: str, line_number: int) -> bool:
        if line != "":
            return False
        self._emit(LINE_BREAK_HTML)
        return True

    # Lists

    def _unordered_list_line(self, line: str, line_number: int) -> None:
        pending = self.ctx.expect(PendingList)
        if line == "":
            self._flush_list("ul", "li", line_number)
        elif line.startswith(UNORDERED_ITEM_PREFIX):
            pending.items.append(line[len(UNORDERED_ITEM_PREFIX) :])
        else:
            raise InvalidListItemError(
                self.page, line_number, "expected '* ' item or an empty line to close the unordered list"
            )

    def _ordered_list_line(self, line: str, line_number: int) -> None:
        pending = self.ctx.expect(PendingList)
        match = ORDERED_ITEM_PATTERN.match(line)
        if line == "":
            self._flush_list("ol", "olli", line_number)
        elif match is not None:
            pending.items.append(match.group("text"))
        else:
            raise InvalidListItemError(
                self.page, line_number, "expected 'N.' item or an empty line to close the ordered list"
            )

    def _flush_list(self, list_template: str, item_template: str, line_number: int) -> None:
        pending = self.ctx.expect(PendingList)
        self.ctx.close()
        logger.debug(
            "%s: closing %s with %d items at line %d",
            self.page,
            list_template,
            len(pending.items),
            line_number,
        )
        items = "".join(
            self.templates.render(item_template, {"text": self.render(item)})
            for item in pending.items
        )
        values: dict[str, object] = {"list-items": items}
        if list_template == "ol":
            values["ol-start"] = pending.start
        self._emit(self.templates.render(list_template, values))

    # Tables

    def _table_line(self, line: str, line_number: int) -> None:
        pending = self.ctx.expect(PendingTable)
        if line == "":
            self.ctx.close()
            logger.debug("%s: closing table at line %d", self.page, line_number)
            html = build_table(
                pending.headers,
                pending.configs,
                pending.rows,
                self.page,
                self.templates,
                self.render,
            )
            self._emit(html)
            return

        if not line.startswith(TABLE_DELIMITER):
            raise InvalidTableRowError(
                self.page,
                line_number,
                "line does not start with '|', did you forget to end the table with an empty newline?",
            )
        validate_table_row(line, line_number, self.page)
        cells = split_table_row(line)
        if not pending.configs:
            validate_table_configs(cells, line_number, self.page)
            pending.configs = [normalize_config_token(cell) for cell in cells]
        else:
            pending.rows.append([self.render(cell) for cell in cells])

    # Fenced blocks

    def _code_block_line(self, line: str, line_number: int) -> None:
        pending = self.ctx.expect(PendingCodeBlock)
        if line != CODE_FENCE:
            pending.lines.append(escape_text(line))
            return

        self.ctx.close()
        logger.debug("%s: closing code block at line %d", self.page, line_number)
        language = f"language-{pending.language}" if pending.language else "nohighlight"
        self._emit(
            self.templates.render(
                "block-code",
                {
                    "code": "\n".join(pending.lines),
                    "codeblock-language": language,
                    "marq-blank-img": self.config.placeholder,
                },
            )
        )

    def _html_block_line(self, line: str, line_number: int) -> None:
        pending = self.ctx.expect(PendingHtmlBlock)
        if line != HTML_BLOCK_FENCE:
            pending.lines.append(line)
            return

        self.ctx.close()
        logger.debug("%s: closing HTML block at line %d", self.page, line_number)
        self._emit("\n".join(pending.lines))

    def _slideshow_line(self, line: str, line_number: int) -> None:
        pending = self.ctx.expect(PendingSlideshow)
        if line != SLIDESHOW_CLOSE:
            index = len(pending.slides) + 1
            pending.slides.append(build_slide(line, index, self.page, line_number, self.templates))
            return

        self.ctx.close()
        logger.debug("%s: closing slideshow at line %d", self.page, line_number)
        self._emit(
            self.templates.render(
                "slideshow/slideshow",
                {
                    "slides": "\n".join(slide for slide, _ in pending.slides),
                    "dots": "\n".join(dot for _, dot in pending.slides),
                    "marq-slideshow-script": self.config.slideshow_script,
                },
            )
        )


class Converter:
    """Convert marq documents to HTML fragments.

    The configuration is normalized and validated once, at construction, and
    never changes afterwards; an instance may be shared between threads.

    Args:
        config: Conversion settings; defaults to `MarqConfig()`.
        provider: Template source; defaults to reading `config.template_dir`.

    Raises:
        ConfigError: If the configuration is invalid.

    Examples:
        converter = Converter(MarqConfig(css_prefix="doc-"))
        html = converter.convert("# Title\\n", page="index")
    """

    def __init__(self, config: MarqConfig | None = None, provider: TemplateProvider | None = None):
        config = normalize_config(config or MarqConfig())
        validate_config(config)
        self.config = config
        self.templates = TemplateRenderer(provider or DirectoryTemplateProvider(config.template_dir))

    def convert(
        self,
        content: str,
        options: ConvertOptions | None = None,
        *,
        page: str = "",
        classes: str | Sequence[str | None] | None = None,
        element_id: str | None = None,
    ) -> str:
        """Convert a document to HTML.

        Args:
            content: The document text.
            options: Per-document options; when given, the keyword arguments
                are ignored.
            page: Identifier of the document, used in diagnostics.
            classes: Extra classes for the class token.
            element_id: Value for the id token.

        Returns:
            str: The HTML fragment.

        Raises:
            InvalidInputError: If `content` is not a string.
            MarkdownError: If the document is malformed.
            TemplateNotFoundError: If a required template is missing.
            AmbiguousStateError: If the block state machine loses consistency.
        """
        if options is None:
            options = ConvertOptions(page=page, classes=classes, element_id=element_id)
        if not isinstance(content, str):
            raise InvalidInputError(content)

        lines = split_lines(content)
        html = _Conversion(self.config, self.templates, options.page).run(lines)
        logger.debug("%s: converted %d lines into %d characters", options.page, len(lines), len(html))
        return resolve_attributes(
            html, options.classes, options.element_id, self.config.css_prefix, self.config.css_suffix
        )


def convert_markup(
    content: str,
    config: MarqConfig | None = None,
    provider: TemplateProvider | None = None,
    *,
    page: str = "",
    classes: str | Sequence[str | None] | None = None,
    element_id: str | None = None,
) -> str:
    """Convert a document with a one-off `Converter`.

    Examples:
        convert_markup("Hello _world_", page="greeting")
    """
    converter = Converter(config, provider)
    return converter.convert(content, page=page, classes=classes, element_id=element_id)
