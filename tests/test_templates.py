from __future__ import annotations

import pytest

from marq.constants import PACKAGE_DIR
from marq.exceptions import TemplateNotFoundError, UnknownPlaceholderError
from marq.templates import (
    PLACEHOLDER_PATTERN,
    REPEATED_KEYS,
    TEMPLATE_KEYS,
    DirectoryTemplateProvider,
    MappingTemplateProvider,
    TemplateRenderer,
    fill_template,
)

ATTRIBUTE_KEYS = {"marq-prefix", "marq-suffix", "marq-class", "marq-id"}


def test_fill_template_replaces_first_occurrence_only():
    assert fill_template("p", "{{text}}|{{text}}", {"text": "x"}) == "x|{{text}}"


def test_fill_template_repeated_keys_replace_every_occurrence():
    assert fill_template("youtube", "{{video-id}}/{{video-id}}", {"video-id": "v"}) == "v/v"


def test_fill_template_does_not_rescan_inserted_values():
    text = fill_template("shoutout", "{{title}}:{{text}}", {"title": "{{text}}", "text": "body"})
    assert text == "{{text}}:body"


def test_fill_template_leaves_attribute_tokens():
    text = fill_template("p", '<p class="{{marq-prefix}}p">{{text}}</p>', {"text": "t"})
    assert text == '<p class="{{marq-prefix}}p">t</p>'


def test_fill_template_converts_values_to_text():
    assert fill_template("slideshow/dot", "{{slide-index}}", {"slide-index": 4}) == "4"


def test_fill_template_rejects_unknown_key():
    with pytest.raises(UnknownPlaceholderError) as excinfo:
        fill_template("p", "{{text}}", {"title": "x"})
    assert excinfo.value.key == "title"


def test_fill_template_rejects_unknown_template():
    with pytest.raises(UnknownPlaceholderError):
        fill_template("nope", "", {})


def test_directory_provider_reads_nested_templates(tmp_path):
    (tmp_path / "table").mkdir()
    (tmp_path / "table" / "td.html").write_text("<td>{{data}}</td>", encoding="utf-8")

    provider = DirectoryTemplateProvider(tmp_path)

    assert provider.fetch("table/td") == "<td>{{data}}</td>"


def test_directory_provider_missing_template(tmp_path):
    with pytest.raises(TemplateNotFoundError) as excinfo:
        DirectoryTemplateProvider(tmp_path).fetch("missing")
    assert excinfo.value.name == "missing"
    assert str(excinfo.value) == "No such template: missing"


def test_directory_provider_rejects_paths_outside_directory(tmp_path):
    root = tmp_path / "snippets"
    root.mkdir()
    (tmp_path / "secret.html").write_text("secret", encoding="utf-8")

    with pytest.raises(TemplateNotFoundError):
        DirectoryTemplateProvider(root).fetch("../secret")


def test_directory_provider_reads_changes_between_fetches(tmp_path):
    template = tmp_path / "p.html"
    template.write_text("one", encoding="utf-8")
    provider = DirectoryTemplateProvider(tmp_path)
    assert provider.fetch("p") == "one"

    template.write_text("two", encoding="utf-8")
    assert provider.fetch("p") == "two"


def test_renderer_fetches_and_fills():
    renderer = TemplateRenderer(MappingTemplateProvider({"p": "<p>{{text}}</p>"}))
    assert renderer.render("p", {"text": "hi"}) == "<p>hi</p>"
    with pytest.raises(TemplateNotFoundError):
        renderer.fetch("li")


@pytest.mark.parametrize("name", sorted(TEMPLATE_KEYS))
def test_bundled_templates_use_declared_placeholders(name: str):
    text = DirectoryTemplateProvider(PACKAGE_DIR / "snippets").fetch(name)
    tokens = set(PLACEHOLDER_PATTERN.findall(text))

    assert tokens <= TEMPLATE_KEYS[name] | ATTRIBUTE_KEYS
    for key in tokens - REPEATED_KEYS - ATTRIBUTE_KEYS:
        assert text.count(f"{{{{{key}}}}}") == 1
