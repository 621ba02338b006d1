"""Fixed boilerplate files, rendered from Jinja2 templates shipped with the package.

Templates live under ``sitexport/templates``:

- ``common/``  base stylesheet and script shared by both targets
- ``static/``  static site page shell and README
- ``project/`` Spring Boot sources, build and configuration files

Autoescaping is off; templates escape explicitly where they embed text
into markup.  ``StrictUndefined`` turns a missing variable into an error
instead of an empty string.
"""

from __future__ import annotations

import json
from functools import cache
from typing import TYPE_CHECKING

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError

from sitexport._errors import ExportError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from sitexport._types import PropValue


def java_string(value: str) -> str:
    """Java string literal, quotes included."""
    return json.dumps(value, ensure_ascii=False)


def java_comment(value: str) -> str:
    """Text that is safe inside a ``/* */`` comment."""
    return value.replace("*/", "* /")


def java_literal(value: PropValue) -> str:
    """Java literal for a scalar payload value."""
    match value:
        case None:
            return "null"
        case bool():
            return "true" if value else "false"
        case int():
            return f"{value}L"
        case float():
            return repr(value)
        case _:
            return java_string(str(value))


def java_entries(item: Mapping[str, PropValue]) -> str:
    """``"key", value, ...`` argument list for the generated ``item(...)`` helper."""
    return ", ".join(f"{java_string(key)}, {java_literal(value)}" for key, value in item.items())


def java_mapping(paths: Iterable[str]) -> str:
    """``@GetMapping`` argument: one literal, or an array for several paths."""
    paths = list(paths)
    if len(paths) == 1:
        return java_string(paths[0])
    return "{" + ", ".join(java_string(p) for p in paths) + "}"


@cache
def _env() -> Environment:
    env = Environment(
        loader=PackageLoader("sitexport", "templates"),
        autoescape=False,
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters.update(
        java_string=java_string,
        java_comment=java_comment,
        java_entries=java_entries,
        java_mapping=java_mapping,
    )
    return env


def render(name: str, **context: object) -> str:
    """Render template *name* (relative to ``templates/``).

    Raises:
        ExportError: If the template is missing or fails to render.

    """
    try:
        return _env().get_template(name).render(**context)
    except TemplateError as exc:
        msg = f"Failed to render {name}: {exc}"
        raise ExportError(msg) from exc


@cache
def base_css() -> str:
    return render("common/styles.css.j2")


@cache
def base_js() -> str:
    return render("common/main.js.j2")


def css_variables_block(variables: Mapping[str, str]) -> str:
    """``:root { --name: value; }`` for the page's CSS variables, or ``""``."""
    if not variables:
        return ""
    lines = [
        f"  {name if name.startswith('--') else '--' + name}: {value};"
        for name, value in variables.items()
    ]
    return ":root {\n" + "\n".join(lines) + "\n}"


def custom_css(css_variables: Mapping[str, str], authored: str) -> str:
    """Page CSS: the variables block followed by authored custom CSS."""
    return "\n\n".join(part for part in (css_variables_block(css_variables), authored.strip()) if part)
