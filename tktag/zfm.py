"""Markdown with template tags, rendered by mistletoe."""

from __future__ import annotations

import html
import logging
import re
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from mistletoe.block_token import Document
from mistletoe.html_renderer import HTMLRenderer
from mistletoe.span_token import SpanToken
from mistletoe.token import Token

from tktag.registry import RegistryError, TagRegistry, default_registry
from tktag.tag import TagError


class Context:

    """Context passed to tags rendered from Markdown."""

    def __init__(
        self,
        variables: Optional[Mapping[str, Any]] = None,
        path: Optional[Path] = None,
    ):
        self.variables = dict(variables or {})
        self.path = path

    def __getitem__(self, key: str) -> Any:
        return self.variables[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self.variables.get(key, default)


class InlineMacro(SpanToken):

    """Inline tag token.

    Examples:

        The budget is @tk this year.
                      ^^^

        The budget is @tk{ask finance} this year.
                      ^^^^^^^^^^^^^^^^
    """

    pattern = re.compile(r"(?<!\\)@([a-z][a-z0-9_]*)(?:{([^}]*)}|\b)")
    parse_inner = False

    def __init__(self, match):
        super().__init__(match)
        self.name = match.group(1)
        self.arg = match.group(2) or ""


class TagRenderer(HTMLRenderer):

    """Renderer from Markdown to HTML that renders tags from a registry.

    Like all mistletoe renderers, it must be used as a context manager so that
    the InlineMacro token is only active while parsing with it.
    """

    def __init__(self, registry: TagRegistry, ctx: Context):
        super().__init__(InlineMacro)
        self.registry = registry
        self.ctx = ctx

    def error(self, message: str) -> str:
        """Log an error and render it."""
        logging.error("%s: %s", self.ctx.path or "<string>", message)
        return self.render_error(message)

    @staticmethod
    def render_error(message: str) -> str:
        message = html.escape(message)
        return f'<span style="color: red; font-weight: bold">[{message}]</span>'

    def render_inline_macro(self, token: InlineMacro) -> str:
        try:
            tag = self.registry.create(token.name, token.arg)
        except RegistryError as ex:
            return self.error(str(ex))
        try:
            return tag.render(self.ctx)
        except TagError as ex:
            return self.error(f"{token.name}: {ex}")


def render_markdown(
    source: str,
    registry: Optional[TagRegistry] = None,
    variables: Optional[Mapping[str, Any]] = None,
    path: Optional[Path] = None,
) -> str:
    """Render Markdown source to HTML."""
    ctx = Context(variables, path)
    if registry is None:
        registry = default_registry()
    with TagRenderer(registry, ctx) as renderer:
        return renderer.render(Document(source))


def parse_markdown(source: str) -> Document:
    """Parse Markdown with the InlineMacro token active, without rendering."""
    with TagRenderer(TagRegistry(), Context()):
        return Document(source)


def walk(token: Token, f: Callable[[Token], None]):
    """Call f on token and all its descendants, in document order."""
    f(token)
    for child in getattr(token, "children", None) or []:
        walk(child, f)
