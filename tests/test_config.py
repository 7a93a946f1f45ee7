from __future__ import annotations

import textwrap
import pytest
from pathlib import Path

from marq.config import (
    ConfigError,
    MarqConfig,
    apply_overrides,
    build_config,
    load_config,
    normalize_config,
    validate_config,
)
from marq.constants import PACKAGE_DIR
from marq.converter import Converter


def _write_pyproject(base: Path, body: str) -> Path:
    path = base / "pyproject.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def _write_marq_toml(base: Path, body: str) -> Path:
    path = base / ".marq.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def test_loads_config_from_pyproject(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.marq]
        mode = "gfmd"
        css_prefix = "doc-"
        css_suffix = "-x"
        """,
    )

    config = load_config(tmp_path)

    assert config == MarqConfig(mode="gfmd", css_prefix="doc-", css_suffix="-x")


def test_loads_config_from_dotfile(tmp_path: Path):
    _write_marq_toml(
        tmp_path,
        """
        [marq]
        css_prefix = "x-"
        template_dir = "tpl"
        """,
    )

    config = load_config(tmp_path)

    assert config.css_prefix == "x-"
    assert config.template_dir == str(tmp_path.resolve() / "tpl")


def test_dotfile_accepts_tool_table(tmp_path: Path):
    _write_marq_toml(
        tmp_path,
        """
        [tool.marq]
        css_suffix = "-v2"
        """,
    )

    assert load_config(tmp_path).css_suffix == "-v2"


def test_pyproject_takes_precedence_over_dotfile(tmp_path: Path):
    _write_pyproject(tmp_path, '[tool.marq]\ncss_prefix = "py-"\n')
    _write_marq_toml(tmp_path, '[marq]\ncss_prefix = "dot-"\n')

    assert load_config(tmp_path).css_prefix == "py-"


def test_config_found_in_parent_directory(tmp_path: Path):
    _write_pyproject(tmp_path, '[tool.marq]\ncss_prefix = "parent-"\n')
    child = tmp_path / "docs" / "guide"
    child.mkdir(parents=True)

    assert load_config(child).css_prefix == "parent-"


def test_pyproject_without_marq_table_is_ignored(tmp_path: Path):
    _write_pyproject(tmp_path, '[tool.black]\nline-length = 100\n')

    assert load_config(tmp_path) == MarqConfig()


def test_invalid_toml_is_skipped(tmp_path: Path):
    _write_pyproject(tmp_path, "[tool.marq\n")

    assert load_config(tmp_path) == MarqConfig()


def test_unknown_key_is_rejected(tmp_path: Path):
    _write_pyproject(tmp_path, "[tool.marq]\nunknown_key = 1\n")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_non_table_settings_are_rejected(tmp_path: Path):
    _write_pyproject(tmp_path, '[tool]\nmarq = "yes"\n')

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_normalize_config_fills_defaults():
    config = normalize_config(MarqConfig())

    assert config.template_dir == str(PACKAGE_DIR / "snippets")
    assert config.css_dir == str(PACKAGE_DIR / "css")
    assert config.placeholder == str(PACKAGE_DIR / "blank.svg")
    assert config.slideshow_script == str(PACKAGE_DIR / "js" / "slideshow.js")


def test_normalize_config_rejects_non_string_directory():
    with pytest.raises(ConfigError):
        normalize_config(MarqConfig(template_dir=3))


def test_validate_config_accepts_defaults():
    validate_config(MarqConfig())
    validate_config(MarqConfig(mode="gfmd"))


def test_validate_config_rejects_unknown_mode():
    with pytest.raises(ConfigError) as excinfo:
        validate_config(MarqConfig(mode="commonmark"))
    assert "gfmd, extended" in str(excinfo.value)


def test_validate_config_rejects_non_string_setting():
    with pytest.raises(ConfigError):
        validate_config(MarqConfig(css_prefix=3))


def test_validate_config_rejects_missing_directory(tmp_path: Path):
    with pytest.raises(ConfigError) as excinfo:
        validate_config(MarqConfig(template_dir=str(tmp_path / "nope")))
    assert "template_dir" in str(excinfo.value)


def test_apply_overrides_ignores_none():
    config = MarqConfig()
    assert apply_overrides(config, css_prefix=None) is config


def test_js_dir_override_moves_slideshow_script(tmp_path: Path):
    config = normalize_config(MarqConfig())

    updated = normalize_config(apply_overrides(config, js_dir=str(tmp_path)))

    assert updated.slideshow_script == str(tmp_path / "slideshow.js")


def test_build_config_applies_overrides(tmp_path: Path):
    config = build_config(tmp_path, css_prefix="x-", mode=None)

    assert config.css_prefix == "x-"
    assert config.mode == "extended"
    assert Path(config.template_dir).is_absolute()


def test_converter_rejects_invalid_config():
    with pytest.raises(ConfigError):
        Converter(MarqConfig(mode="bad"))
