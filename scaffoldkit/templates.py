"""Template rendering for project scaffolding.

Provides the TemplateRenderer class, which renders two kinds of templates
against a flat template context:

- inline file payloads from a scaffold spec, written in Handlebars
  (``templateEngine: "handlebars"``) and rendered with pybars;
- the packaged Jinja2 ``.j2`` templates under ``scaffoldkit/templates/``
  (README, .gitignore, LICENSE).

Both see the same five text-case helpers::

    {{camelCase projectName}}                  (Handlebars payload)
    {{ projectName | SCREAMING_SNAKE_CASE }}   (packaged .j2)
"""

from __future__ import annotations

import asyncio
import re
from pathlib import Path
from typing import Any, Callable

import jinja2
from jinja2 import Environment, FileSystemLoader, select_autoescape
from pybars import Compiler

from .errors import TemplateError


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# Case helpers
# ---------------------------------------------------------------------------

_WORD_SPLIT = re.compile(r"[\W_]+")


def _words(value: Any) -> list[str]:
    """Split on any run of non-alphanumeric characters, dropping empties."""
    if value is None:
        return []
    return [w for w in _WORD_SPLIT.split(str(value)) if w]


def camel_case(value: Any) -> str:
    """``'Hello World!'`` -> ``'helloWorld'``."""
    words = _words(value)
    if not words:
        return ""
    return words[0].lower() + "".join(w.capitalize() for w in words[1:])


def pascal_case(value: Any) -> str:
    """``'hello-world'`` -> ``'HelloWorld'``."""
    return "".join(w.capitalize() for w in _words(value))


def kebab_case(value: Any) -> str:
    """``'Hello World'`` -> ``'hello-world'``."""
    return "-".join(w.lower() for w in _words(value))


def snake_case(value: Any) -> str:
    """``'Hello World'`` -> ``'hello_world'``."""
    return "_".join(w.lower() for w in _words(value))


def screaming_snake_case(value: Any) -> str:
    """``'hello world'`` -> ``'HELLO_WORLD'``."""
    return "_".join(w.upper() for w in _words(value))


CASE_HELPERS: dict[str, Callable[[Any], str]] = {
    "camelCase": camel_case,
    "PascalCase": pascal_case,
    "kebabCase": kebab_case,
    "snakeCase": snake_case,
    "SCREAMING_SNAKE_CASE": screaming_snake_case,
}


def _handlebars_helper(fn: Callable[[Any], str]) -> Callable[..., str]:
    """Adapt a case helper to pybars' ``helper(this, *args, **kwargs)`` calling convention."""

    def helper(this: Any, value: Any = None, *args: Any, **kwargs: Any) -> str:
        return fn(value)

    helper.__name__ = fn.__name__
    return helper


HANDLEBARS_HELPERS: dict[str, Callable[..., str]] = {
    name: _handlebars_helper(fn) for name, fn in CASE_HELPERS.items()
}


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Handlebars payloads and packaged Jinja2 templates.

    Missing variables render as empty strings in both, so a payload written
    for a richer context still renders against a smaller one.  Syntax errors
    and any failure while rendering are raised as :class:`TemplateError`.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters.update(CASE_HELPERS)
        self.env.globals.update(CASE_HELPERS)
        self.compiler = Compiler()

    # -- Inline payloads ---------------------------------------------------

    def render(self, payload: str, context: dict[str, Any]) -> str:
        """Render an inline Handlebars payload with the provided context.

        Raises:
            TemplateError: If the payload is not valid Handlebars or fails
                while rendering, whatever the underlying exception.
        """
        try:
            template = self.compiler.compile(payload)
        except Exception as exc:
            raise TemplateError(f"Invalid template syntax: {exc}") from exc
        try:
            return str(template(context, helpers=HANDLEBARS_HELPERS))
        except Exception as exc:
            raise TemplateError(f"Template rendering error: {exc}") from exc

    # -- Packaged templates ------------------------------------------------

    def render_file(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a packaged template (path relative to the template directory)."""
        try:
            template = self.env.get_template(template_path)
            return template.render(**context)
        except jinja2.TemplateError as exc:
            raise TemplateError(
                f"Failed to render template {template_path}: {exc}"
            ) from exc

    async def render_to_file(
        self,
        template_path: str,
        output_path: str | Path,
        context: dict[str, Any],
    ) -> Path:
        """Render a packaged template and write the result to *output_path*.

        Parent directories are created automatically.  Returns the output path.
        """
        content = self.render_file(template_path, context)
        out = Path(output_path)
        await asyncio.to_thread(_write_file, out, content)
        return out


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content.encode("utf-8"))
