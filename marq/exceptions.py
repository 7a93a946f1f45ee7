"""Package-specific exception types."""

from __future__ import annotations


class ParseError(ValueError):
    """Base class for conversion errors caused by the document itself."""


class MarkdownError(ParseError):
    """Raised when a document contains malformed markup.

    Args:
        page: Identifier of the document, used in diagnostics.
        line_number: Zero-based index of the offending line, if known.
        detail: Human-readable description of the problem.

    Attributes:
        kind: Short machine-readable category of the error.
    """

    kind = "syntax"
    default_detail = "invalid markup"

    def __init__(self, page: str, line_number: int | None = None, detail: str | None = None):
        self.page = page
        self.line_number = line_number
        self.detail = detail or self.default_detail
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        if self.line_number is None:
            return f"Invalid markdown in '{self.page}': {self.detail}"
        return f"Invalid markdown in '{self.page}' (line {self.line_number}): {self.detail}"


class InvalidTableRowError(MarkdownError):
    """Raised when a table line does not start and end with ``|``."""

    kind = "table-row"
    default_detail = "line does not start and end with '|'"


class InvalidTableConfigError(MarkdownError):
    """Raised when a table configuration row holds an invalid alignment token."""

    kind = "table-config"
    default_detail = "invalid table configuration"


class TableShapeError(MarkdownError):
    """Raised when headers, configurations and rows disagree on column count."""

    kind = "table-shape"
    default_detail = "unequal table headers, configurations, and rows"


class InvalidListItemError(MarkdownError):
    """Raised when a list is interrupted by a line that is not an item."""

    kind = "list-item"
    default_detail = "expected a list item or an empty line"


class InvalidSlideError(MarkdownError):
    """Raised when a slideshow line is not of the form ``[caption](target)``."""

    kind = "slide"
    default_detail = "invalid slide format, expecting [caption](image_url)"


class UnclosedBlockError(MarkdownError):
    """Raised when the document ends inside a multi-line construct.

    Args:
        page: Identifier of the document.
        block: Name of the construct left open (e.g. ``"code block"``).
    """

    kind = "unclosed-block"

    def __init__(self, page: str, block: str):
        self.block = block
        super().__init__(page, detail=f"unclosed {block}")


class InvalidInputError(TypeError):
    """Raised when the document handed to the converter is not text."""

    def __init__(self, received: object):
        self.received = received
        super().__init__(
            f"Markdown input must be a string, got {type(received).__name__}; "
            "decode it before converting"
        )


class TemplateNotFoundError(LookupError):
    """Raised when a template has no backing content.

    Args:
        name: Logical name of the missing template.
    """

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No such template: {name}")


class UnknownPlaceholderError(ValueError):
    """Raised when a template is filled with a key it does not declare."""

    def __init__(self, template: str, key: str):
        self.template = template
        self.key = key
        super().__init__(f"Template '{template}' has no placeholder '{key}'")


class AmbiguousStateError(RuntimeError):
    """Raised when the block state machine reaches an inconsistent state."""
