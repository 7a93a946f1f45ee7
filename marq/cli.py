"""
Converts a marq document to an HTML fragment.
The HTML is written to stdout, or atomically to the file given with --output.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click
from .config import ConfigError, build_config
from .constants import SUPPORTED_MODES
from .converter import Converter
from .exceptions import ParseError, TemplateNotFoundError
from .filesystem import (
    enforce_file_size,
    get_max_file_size,
    normalize_filepath,
    safe_read,
    write_output,
)

__all__ = ["cli"]

DIRECTORY = click.Path(exists=True, file_okay=False, resolve_path=True)


@click.command()
@click.version_option()
@click.option("--page", help="Page name used in error messages (default: file name)")
@click.option("--class", "classes", multiple=True, help="Extra class for {{marq-class}}")
@click.option("--id", "element_id", help="Element id for {{marq-id}}")
@click.option("--mode", type=click.Choice(SUPPORTED_MODES), help="Dialect mode")
@click.option("--css-prefix", help="Class name prefix")
@click.option("--css-suffix", help="Class name suffix")
@click.option("--template-dir", type=DIRECTORY, help="Directory of HTML templates")
@click.option("--css-dir", type=DIRECTORY, help="Directory of stylesheets")
@click.option("--js-dir", type=DIRECTORY, help="Directory of scripts")
@click.option(
    "-o", "--output", type=click.Path(dir_okay=False, path_type=Path), help="Output HTML file"
)
@click.option("-v", "--verbose", is_flag=True, help="Log conversion details to stderr")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def cli(
    filepath: str,
    page: str | None = None,
    classes: tuple[str, ...] = (),
    element_id: str | None = None,
    mode: str | None = None,
    css_prefix: str | None = None,
    css_suffix: str | None = None,
    template_dir: str | None = None,
    css_dir: str | None = None,
    js_dir: str | None = None,
    output: Path | None = None,
    verbose: bool = False,
):
    """
    Entry point for converting a marq document to HTML.

    Args:
        filepath: Path to the document to convert.
        page: Page name used in diagnostics.
        classes: Extra classes substituted for the class token.
        element_id: Id substituted for the id token.
        mode: Override for the dialect mode.
        css_prefix: Override for the class name prefix.
        css_suffix: Override for the class name suffix.
        template_dir: Override for the template directory.
        css_dir: Override for the stylesheet directory.
        js_dir: Override for the script directory.
        output: Destination file; stdout when omitted.
        verbose: Enable debug logging on stderr.

    Returns:
        None.

    Raises:
        click.BadParameter: If the path is not a readable markup file or the
            configuration is invalid.
        click.ClickException: If the document is malformed, a template is
            missing, or filesystem safety checks fail.

    Examples:
        marq docs/index.md --class wide --id intro -o build/index.html
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        filepath = normalize_filepath(filepath)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error

    try:
        config = build_config(
            filepath.parent,
            mode=mode,
            css_prefix=css_prefix,
            css_suffix=css_suffix,
            template_dir=template_dir,
            css_dir=css_dir,
            js_dir=js_dir,
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        max_file_size = get_max_file_size()
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    try:
        enforce_file_size(filepath, max_file_size)
        with safe_read(filepath) as file:
            content = file.read()
    except UnicodeDecodeError as error:
        raise click.ClickException(f"Invalid UTF-8 sequence in {filepath}: {error}") from error
    except IOError as error:
        raise click.ClickException(str(error)) from error

    try:
        html = Converter(config).convert(
            content,
            page=page or filepath.name,
            classes=list(classes),
            element_id=element_id,
        )
    except (ParseError, TemplateNotFoundError) as error:
        raise click.ClickException(str(error)) from error

    if output is None:
        click.echo(html, nl=False)
        return

    try:
        write_output(output.resolve(), html)
    except IOError as error:
        raise click.ClickException(str(error)) from error


if __name__ == "__main__":
    cli()
