"""Constants used across the marq package."""

from __future__ import annotations

import re
from pathlib import Path

PACKAGE_DIR = Path(__file__).resolve().parent

# Configuration defaults
SUPPORTED_MODES = ("gfmd", "extended")
DEFAULT_MODE = "extended"
DEFAULT_CSS_PREFIX = "marq-"
DEFAULT_CSS_SUFFIX = ""
DEFAULT_TEMPLATE_DIR = "snippets"
DEFAULT_CSS_DIR = "css"
DEFAULT_JS_DIR = "js"
DEFAULT_PLACEHOLDER = "blank.svg"
DEFAULT_SLIDESHOW_SCRIPT = "slideshow.js"
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
MARKUP_EXTENSIONS = (".md", ".markdown", ".marq", ".txt")

# Block markers
HEADING_PREFIXES = ("# ", "## ", "### ", "#### ", "##### ", "###### ")
SHOUTOUT_PREFIX = ">> "
UNORDERED_ITEM_PREFIX = "* "
VIDEO_PREFIX = "~("
HTML_BLOCK_FENCE = "==="
CENTERED_PREFIX = "="
COMMENT_PREFIX = "?"
BLOCKQUOTE_PREFIX = ">"
TABLE_DELIMITER = "|"
CODE_FENCE = "```"
SLIDESHOW_OPEN = "[[["
SLIDESHOW_CLOSE = "]]]"
HORIZONTAL_RULES = ("---", "___")
SEGMENT_SEPARATOR = " | "
HORIZONTAL_RULE_HTML = "<hr>"
LINE_BREAK_HTML = "<br>"

# Block grammars
ORDERED_ITEM_PATTERN = re.compile(r"^(?P<start>\d+)\.\s*(?P<text>.*)$")
IMAGE_PATTERN = re.compile(r"^!\[(?P<alt>.*?)\]\((?P<src>.*?)\)(?P<rest>.*)$")
TABLE_CONFIG_PATTERN = re.compile(r"^:?-+:?$")
DASH_RUN_PATTERN = re.compile(r"-+")
TABLE_CELL_PATTERN = re.compile(r"(?:[^|`]+|`[^`]*`)+")
SLIDE_PATTERN = re.compile(r"\[(?P<caption>.*?)\]\((?P<target>.+?)\)")

# Inline grammars
CODE_SPAN_PATTERN = re.compile(r"`(.+?)`")
RAW_HTML_SPAN_PATTERN = re.compile(r"===(.+?)===")
LINK_PATTERN = re.compile(r"\[(?P<caption>.+?)\]\((?P<target>.+?)\)")
INTERNAL_TARGET_PATTERN = re.compile(r"\{\{src:.*\}\}|\{\{sys:home\}\}")

# Characters that may not sit directly outside an emphasis marker
EMPHASIS_BOUNDARY = "[^A-Za-z0-9\"'`]"

ESCAPES = (("<", "&lt;"), (">", "&gt;"), ("$", "&#36;"))
CODE_ESCAPES = (("_", "&#95;"), ("*", "&#42;"), ("~", "&#126;"))

# Global attribute tokens
PREFIX_TOKEN = "{{marq-prefix}}"
SUFFIX_TOKEN = "{{marq-suffix}}"
CLASS_TOKEN = "{{marq-class}}"
ID_TOKEN = "{{marq-id}}"
