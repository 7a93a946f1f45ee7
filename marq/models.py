"""Data models for marq."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TypeVar, Union

from .exceptions import AmbiguousStateError


class ParserState(Enum):
    """Block states used while scanning a document.

    Attributes:
        NORMAL: No multi-line construct is open.
        IN_UNORDERED_LIST: Collecting ``* `` items.
        IN_ORDERED_LIST: Collecting ``N.`` items.
        IN_TABLE: Collecting table configuration and data rows.
        IN_CODE_BLOCK: Inside a backtick fence.
        IN_HTML_BLOCK: Inside a ``===`` raw HTML fence.
        IN_SLIDESHOW: Between ``[[[`` and ``]]]``.
    """

    NORMAL = auto()
    IN_UNORDERED_LIST = auto()
    IN_ORDERED_LIST = auto()
    IN_TABLE = auto()
    IN_CODE_BLOCK = auto()
    IN_HTML_BLOCK = auto()
    IN_SLIDESHOW = auto()


class Alignment(str, Enum):
    """Horizontal alignment of a table column."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


@dataclass
class PendingList:
    """Raw items of an open list.

    Attributes:
        items: Item texts, not yet inline-rendered.
        start: First number of an ordered list.
    """

    items: list[str] = field(default_factory=list)
    start: int = 1


@dataclass
class PendingTable:
    """Rows of an open table.

    Attributes:
        headers: Header cell texts; empty when the table has no header row.
        configs: Normalized alignment tokens, one per column.
        rows: Data rows, each a list of rendered cell HTML.
    """

    headers: list[str] = field(default_factory=list)
    configs: list[str] = field(default_factory=list)
    rows: list[list[str]] = field(default_factory=list)


@dataclass
class PendingCodeBlock:
    """Escaped lines of an open code block and its language tag."""

    lines: list[str] = field(default_factory=list)
    language: str = ""


@dataclass
class PendingHtmlBlock:
    """Verbatim lines of an open raw HTML block."""

    lines: list[str] = field(default_factory=list)


@dataclass
class PendingSlideshow:
    """Rendered ``(slide, indicator)`` pairs of an open slideshow."""

    slides: list[tuple[str, str]] = field(default_factory=list)


PendingBlock = Union[PendingList, PendingTable, PendingCodeBlock, PendingHtmlBlock, PendingSlideshow]

PendingT = TypeVar(
    "PendingT", PendingList, PendingTable, PendingCodeBlock, PendingHtmlBlock, PendingSlideshow
)

STATE_BUFFERS: dict[ParserState, type | None] = {
    ParserState.NORMAL: None,
    ParserState.IN_UNORDERED_LIST: PendingList,
    ParserState.IN_ORDERED_LIST: PendingList,
    ParserState.IN_TABLE: PendingTable,
    ParserState.IN_CODE_BLOCK: PendingCodeBlock,
    ParserState.IN_HTML_BLOCK: PendingHtmlBlock,
    ParserState.IN_SLIDESHOW: PendingSlideshow,
}


@dataclass
class ParserContext:
    """Encapsulate block state while walking a document.

    The state and the pending buffer always travel together: ``NORMAL`` owns
    no buffer, every other state owns exactly the buffer type listed in
    `STATE_BUFFERS`.

    Attributes:
        page: Identifier of the document, used in diagnostics.
        state: Current block state.
        pending: Buffer of the open construct, if any.
        output: Rendered HTML fragments in document order.
    """

    page: str = ""
    state: ParserState = ParserState.NORMAL
    pending: PendingBlock | None = None
    output: list[str] = field(default_factory=list)

    def open(self, state: ParserState, pending: PendingBlock) -> None:
        self.check()
        if self.state is not ParserState.NORMAL:
            raise AmbiguousStateError(
                f"Cannot enter {state.name} while {self.state.name} is still open"
            )
        self.state = state
        self.pending = pending
        self.check()

    def close(self) -> PendingBlock | None:
        pending = self.pending
        self.state = ParserState.NORMAL
        self.pending = None
        return pending

    def expect(self, buffer_type: type[PendingT]) -> PendingT:
        """Return the pending buffer, insisting on its type."""
        if not isinstance(self.pending, buffer_type):
            raise AmbiguousStateError(
                f"State {self.state.name} holds {type(self.pending).__name__}, "
                f"expected {buffer_type.__name__}"
            )
        return self.pending

    def check(self) -> None:
        """Fail fast when the state and its buffer disagree."""
        expected = STATE_BUFFERS[self.state]
        if expected is None:
            if self.pending is not None:
                raise AmbiguousStateError(
                    f"Normal state holds an open {type(self.pending).__name__}"
                )
            return
        self.expect(expected)


@dataclass(frozen=True)
class ConvertOptions:
    """Per-document options for a conversion.

    Attributes:
        page: Identifier of the document, used in diagnostics.
        classes: Extra classes substituted for the class token; a single
            string or a sequence of strings.
        element_id: Value substituted for the id token, if any.
    """

    page: str = ""
    classes: str | Sequence[str | None] | None = None
    element_id: str | None = None
