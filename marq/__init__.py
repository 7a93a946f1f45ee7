"""
marq: converts the marq markup dialect to HTML fragments.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    marq docs/index.md -o build/index.html

Library Usage:
    from marq import Converter, MarqConfig

    converter = Converter(MarqConfig(css_prefix="doc-"))
    html = converter.convert("# Title\\n\\nSome _text_.\\n", page="index")
"""

from .attributes import resolve_attributes
from .config import ConfigError, MarqConfig, build_config, load_config
from .converter import Converter, convert_markup
from .exceptions import (
    AmbiguousStateError,
    InvalidInputError,
    InvalidListItemError,
    InvalidSlideError,
    InvalidTableConfigError,
    InvalidTableRowError,
    MarkdownError,
    ParseError,
    TableShapeError,
    TemplateNotFoundError,
    UnclosedBlockError,
    UnknownPlaceholderError,
)
from .inline import render_inline
from .models import Alignment, ConvertOptions
from .slideshow import build_slide
from .tables import build_table, column_alignment, merge_header_cells
from .templates import (
    DirectoryTemplateProvider,
    MappingTemplateProvider,
    TemplateProvider,
    TemplateRenderer,
    fill_template,
)

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "Converter",
    "convert_markup",
    "render_inline",
    "build_table",
    "build_slide",
    "resolve_attributes",
    # Helpers
    "column_alignment",
    "merge_header_cells",
    "fill_template",
    # Configuration
    "MarqConfig",
    "build_config",
    "load_config",
    # Templates
    "TemplateProvider",
    "DirectoryTemplateProvider",
    "MappingTemplateProvider",
    "TemplateRenderer",
    # Data models
    "Alignment",
    "ConvertOptions",
    # Exceptions
    "ConfigError",
    "ParseError",
    "MarkdownError",
    "InvalidTableRowError",
    "InvalidTableConfigError",
    "TableShapeError",
    "InvalidListItemError",
    "InvalidSlideError",
    "UnclosedBlockError",
    "InvalidInputError",
    "TemplateNotFoundError",
    "UnknownPlaceholderError",
    "AmbiguousStateError",
    # Version
    "__version__",
]
