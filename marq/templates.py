"""HTML template lookup and placeholder substitution."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

from .exceptions import TemplateNotFoundError, UnknownPlaceholderError

logger = logging.getLogger(__name__)

HEADING_TEMPLATES = tuple(f"headers/h{level}" for level in range(1, 7))

# Placeholder keys each template may be filled with. Attribute tokens
# (``{{marq-prefix}}`` and friends) are not listed: they are left in place
# and resolved once over the whole document.
TEMPLATE_KEYS: dict[str, frozenset[str]] = {
    **{name: frozenset({"title"}) for name in HEADING_TEMPLATES},
    "p": frozenset({"text"}),
    "blockquote": frozenset({"marq-cite", "blockquote"}),
    "shoutout": frozenset({"title", "text"}),
    "centered-text": frozenset({"text"}),
    "ul": frozenset({"list-items"}),
    "ol": frozenset({"list-items", "ol-start"}),
    "li": frozenset({"text"}),
    "olli": frozenset({"text"}),
    "img": frozenset({"alt", "src", "img-subtitle"}),
    "img-subtitle": frozenset({"subtitle"}),
    "youtube": frozenset({"video-id"}),
    "block-code": frozenset({"code", "codeblock-language", "marq-blank-img"}),
    "inline-code": frozenset({"code"}),
    "table/table": frozenset({"table-headers", "table-rows"}),
    "table/thead": frozenset({"headers"}),
    "table/tr": frozenset({"row"}),
    "table/th": frozenset({"header-align", "colspan", "header"}),
    "table/tbody": frozenset({"body"}),
    "table/td": frozenset({"data-align", "data"}),
    "slideshow/slideshow": frozenset({"slides", "dots", "marq-slideshow-script"}),
    "slideshow/slide": frozenset({"slide-caption", "slide-content", "slide-alt"}),
    "slideshow/dot": frozenset({"slide-index"}),
}

# Keys substituted at every occurrence; all others only at the first one.
REPEATED_KEYS = frozenset({"video-id"})

PLACEHOLDER_PATTERN = re.compile(r"\{\{([A-Za-z0-9_:-]+)\}\}")


class TemplateProvider(Protocol):
    """Source of raw template text, keyed by logical name."""

    def fetch(self, name: str) -> str:
        """Return the raw text of `name` or raise `TemplateNotFoundError`."""
        ...


class DirectoryTemplateProvider:
    """Serve templates from ``<directory>/<name><extension>`` files.

    Templates are read on every fetch; nothing is cached.

    Args:
        directory: Root directory holding the template files.
        extension: File extension appended to every logical name.

    Examples:
        provider = DirectoryTemplateProvider(Path("snippets"))
        provider.fetch("table/td")
    """

    def __init__(self, directory: Path | str, extension: str = ".html"):
        self.directory = Path(directory).resolve()
        self.extension = extension

    def fetch(self, name: str) -> str:
        path = (self.directory / f"{name}{self.extension}").resolve()
        try:
            path.relative_to(self.directory)
        except ValueError as error:
            raise TemplateNotFoundError(name) from error

        logger.debug("Reading template %s from %s", name, path)
        try:
            return path.read_text(encoding="UTF-8")
        except (OSError, UnicodeDecodeError) as error:
            raise TemplateNotFoundError(name) from error


class MappingTemplateProvider:
    """Serve templates from an in-memory mapping."""

    def __init__(self, templates: Mapping[str, str]):
        self.templates = dict(templates)

    def fetch(self, name: str) -> str:
        try:
            return self.templates[name]
        except KeyError as error:
            raise TemplateNotFoundError(name) from error


def fill_template(name: str, text: str, values: Mapping[str, object]) -> str:
    """Substitute placeholder values into a template.

    The template is scanned once, so text inserted for one placeholder is
    never itself searched for placeholders. Keys in `REPEATED_KEYS` are
    replaced at every occurrence; other keys only at their first occurrence.
    Tokens without a supplied value are left untouched.

    Args:
        name: Logical template name, used to look up the allowed keys.
        text: Raw template text.
        values: Placeholder values keyed by placeholder name (without braces).

    Returns:
        str: The filled template.

    Raises:
        UnknownPlaceholderError: If `name` is not a known template or a key in
            `values` is not declared for it.

    Examples:
        fill_template("p", "<p>{{text}}</p>", {"text": "hi"})  # "<p>hi</p>"
    """
    allowed = TEMPLATE_KEYS.get(name)
    if allowed is None:
        raise UnknownPlaceholderError(name, "*")
    for key in values:
        if key not in allowed:
            raise UnknownPlaceholderError(name, key)

    replaced: set[str] = set()

    def substitute(match: re.Match[str]) -> str:
        key = match.group(1)
        if key not in values or (key in replaced and key not in REPEATED_KEYS):
            return match.group(0)
        replaced.add(key)
        return str(values[key])

    return PLACEHOLDER_PATTERN.sub(substitute, text)


class TemplateRenderer:
    """Fetch templates from a provider and fill them."""

    def __init__(self, provider: TemplateProvider):
        self.provider = provider

    def fetch(self, name: str) -> str:
        return self.provider.fetch(name)

    def render(self, name: str, values: Mapping[str, object]) -> str:
        return fill_template(name, self.provider.fetch(name), values)
