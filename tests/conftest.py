import pytest
from click.testing import CliRunner

from marq.constants import PACKAGE_DIR
from marq.converter import Converter
from marq.templates import DirectoryTemplateProvider, TemplateRenderer


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provides a reusable Click CLI runner."""
    return CliRunner()


@pytest.fixture()
def converter() -> Converter:
    """Provides a converter using the bundled templates."""
    return Converter()


@pytest.fixture()
def templates() -> TemplateRenderer:
    """Provides a renderer over the bundled templates."""
    return TemplateRenderer(DirectoryTemplateProvider(PACKAGE_DIR / "snippets"))
