"""Resolution of the global attribute tokens in rendered HTML."""

from __future__ import annotations

from collections.abc import Sequence

from .constants import CLASS_TOKEN, ID_TOKEN, PREFIX_TOKEN, SUFFIX_TOKEN


def normalize_classes(classes: str | Sequence[str | None] | None) -> list[str]:
    """Return the non-empty class names from a string or a sequence.

    Examples:
        normalize_classes("wide")  # ["wide"]
        normalize_classes(["a", "", None, "b"])  # ["a", "b"]
    """
    if classes is None:
        return []
    if isinstance(classes, str):
        classes = [classes]
    return [name for name in classes if name]


def resolve_attributes(
    html: str,
    classes: str | Sequence[str | None] | None,
    element_id: str | None,
    css_prefix: str,
    css_suffix: str,
) -> str:
    """Replace every prefix, suffix, class, and id token in `html`.

    The class token becomes a leading space plus the space-joined classes;
    the id token becomes `` id="..."``. Both vanish when there is nothing to
    insert.

    Examples:
        resolve_attributes('<p class="{{marq-prefix}}p{{marq-class}}">', ["x"], None, "m-", "")
        # '<p class="m-p x">'
    """
    names = normalize_classes(classes)
    html = html.replace(PREFIX_TOKEN, css_prefix)
    html = html.replace(SUFFIX_TOKEN, css_suffix)
    html = html.replace(CLASS_TOKEN, f" {' '.join(names)}" if names else "")
    html = html.replace(ID_TOKEN, f' id="{element_id}"' if element_id else "")
    return html
