"""Slideshow slide building."""

from __future__ import annotations

from .constants import SLIDE_PATTERN
from .exceptions import InvalidSlideError
from .templates import TemplateRenderer


def build_slide(
    line: str, index: int, page: str, line_number: int, templates: TemplateRenderer
) -> tuple[str, str]:
    """Render one slideshow line into a slide and its indicator dot.

    Args:
        line: Slideshow line of the form ``[caption](image_url)``.
        index: One-based position of the slide.
        page: Identifier of the document, used in diagnostics.
        line_number: Zero-based line index, used in diagnostics.
        templates: Renderer for the ``slideshow/*`` templates.

    Returns:
        tuple[str, str]: Slide HTML and indicator HTML.

    Raises:
        InvalidSlideError: If the line holds no ``[caption](target)``.

    Examples:
        build_slide("[Sunset](img/sunset.jpg)", 1, "trip", 4, templates)
    """
    match = SLIDE_PATTERN.search(line.strip())
    if match is None:
        raise InvalidSlideError(page, line_number)

    caption = match.group("caption").split("]", 1)[0]
    target = match.group("target").rsplit("(", 1)[-1]
    alt = caption or f"Inline slideshow, slide {index}"

    slide = templates.render(
        "slideshow/slide", {"slide-caption": caption, "slide-content": target, "slide-alt": alt}
    )
    dot = templates.render("slideshow/dot", {"slide-index": index})
    return slide, dot
