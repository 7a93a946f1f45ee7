"""Configuration loading and management."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
import tomllib

from .constants import (
    DEFAULT_CSS_DIR,
    DEFAULT_CSS_PREFIX,
    DEFAULT_CSS_SUFFIX,
    DEFAULT_JS_DIR,
    DEFAULT_MODE,
    DEFAULT_PLACEHOLDER,
    DEFAULT_SLIDESHOW_SCRIPT,
    DEFAULT_TEMPLATE_DIR,
    PACKAGE_DIR,
    SUPPORTED_MODES,
)
from .filesystem import ensure_directory

logger = logging.getLogger(__name__)

DIRECTORY_FIELDS = ("template_dir", "css_dir", "js_dir")


@dataclass(frozen=True)
class MarqConfig:
    """Configuration for converting marq documents to HTML.

    Attributes:
        mode: Dialect mode, ``"extended"`` or ``"gfmd"``.
        css_prefix: Prefix substituted for ``{{marq-prefix}}`` and used in
            generated class names.
        css_suffix: Suffix substituted for ``{{marq-suffix}}``.
        template_dir: Directory holding the HTML templates. Relative paths
            resolve against the package directory.
        css_dir: Directory holding the stylesheets.
        js_dir: Directory holding the scripts.
        placeholder: Image path inserted into code blocks; defaults to the
            bundled ``blank.svg``.
        slideshow_script: Script path inserted into slideshows; defaults to
            ``slideshow.js`` inside `js_dir`.

    Examples:
        MarqConfig(css_prefix="doc-", template_dir="/srv/site/snippets")
    """

    mode: str = DEFAULT_MODE
    css_prefix: str = DEFAULT_CSS_PREFIX
    css_suffix: str = DEFAULT_CSS_SUFFIX
    template_dir: str = DEFAULT_TEMPLATE_DIR
    css_dir: str = DEFAULT_CSS_DIR
    js_dir: str = DEFAULT_JS_DIR
    placeholder: str | None = None
    slideshow_script: str | None = None


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`mode` must be one of: gfmd, extended")
    """


def load_config(search_path: Path) -> MarqConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.marq]`` table from `pyproject.toml` and the ``[marq]`` or
    ``[tool.marq]`` table from `.marq.toml` when present. Relative directories
    in a file resolve against the directory holding that file. Returns default
    values when no configuration is found. TOML files that cannot be read or
    decoded are skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        MarqConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If a marq table is present but not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("docs"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "marq")]
        )
        if pyproject_config is not None:
            return pyproject_config

        dotfile_config = _load_from_file(
            current / ".marq.toml",
            table_paths=[("marq",), ("tool", "marq")],
        )
        if dotfile_config is not None:
            return dotfile_config

        parent = current.parent
        if parent == current:
            break
        current = parent

    return MarqConfig()


_MISSING = object()


def _load_from_file(config_file: Path, table_paths: list[tuple[str, ...]]) -> MarqConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError) as error:
        logger.debug("Skipping unreadable config file %s: %s", config_file, error)
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        logger.debug("Loaded configuration from %s", config_file)
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> MarqConfig:
    table_display = ".".join(table_path)

    if raw_config is None:
        return MarqConfig()

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_config:
        return MarqConfig()

    settings = dict(raw_config)
    for key in DIRECTORY_FIELDS:
        value = settings.get(key)
        if isinstance(value, str) and not Path(value).expanduser().is_absolute():
            settings[key] = str(config_file.parent / value)

    try:
        return MarqConfig(**settings)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def normalize_config(config: MarqConfig) -> MarqConfig:
    """Resolve directories to absolute paths and fill asset defaults.

    Args:
        config: Configuration to normalize.

    Returns:
        MarqConfig: Copy of `config` with absolute directories, a placeholder,
        and a slideshow script.

    Raises:
        ConfigError: If a path setting is not a string.
    """
    _ensure_strings({key: getattr(config, key) for key in DIRECTORY_FIELDS})

    directories = {key: _resolve_directory(getattr(config, key)) for key in DIRECTORY_FIELDS}
    placeholder = config.placeholder
    if placeholder is None:
        placeholder = str(PACKAGE_DIR / DEFAULT_PLACEHOLDER)
    slideshow_script = config.slideshow_script
    if slideshow_script is None:
        slideshow_script = str(Path(directories["js_dir"]) / DEFAULT_SLIDESHOW_SCRIPT)

    return replace(config, placeholder=placeholder, slideshow_script=slideshow_script, **directories)


def validate_config(config: MarqConfig) -> None:
    """Validate a `MarqConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If the mode is unsupported, a setting is not a string, or
            one of the template, css, or js directories does not exist.

    Examples:
        validate_config(MarqConfig(mode="gfmd"))
    """
    config = normalize_config(config)

    _ensure_strings({field.name: getattr(config, field.name) for field in fields(config)})

    if config.mode not in SUPPORTED_MODES:
        raise ConfigError(
            f"unsupported mode `{config.mode}`, must be one of: {', '.join(SUPPORTED_MODES)}"
        )

    for key in DIRECTORY_FIELDS:
        try:
            ensure_directory(Path(getattr(config, key)))
        except IOError as error:
            raise ConfigError(f"no such `{key}`: {error}") from error


def apply_overrides(config: MarqConfig, **overrides: object) -> MarqConfig:
    """Apply override values to a `MarqConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        MarqConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `MarqConfig`.

    Examples:
        updated = apply_overrides(config, css_prefix="doc-", mode="gfmd")
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if "js_dir" in changes and "slideshow_script" not in changes:
        changes["slideshow_script"] = None
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> MarqConfig:
    """Load, override, normalize, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        MarqConfig: Validated configuration ready for conversion.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), css_prefix="doc-")
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    config = normalize_config(config)
    validate_config(config)
    return config


def _resolve_directory(value: str) -> str:
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = PACKAGE_DIR / path
    return str(path)


def _ensure_strings(values: dict[str, object]) -> None:
    for key, value in values.items():
        if not isinstance(value, str):
            raise ConfigError(f"`{key}` must be a string")
