"""Jinja2 extension for template tags."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Set, Tuple, Type

from jinja2 import BaseLoader, Environment, nodes
from jinja2.ext import Extension
from jinja2.lexer import Token as JinjaToken
from jinja2.parser import Parser
from jinja2.runtime import Context
from markupsafe import Markup

from tktag.registry import TagRegistry, default_registry
from tktag.tag import Tag


def raw_text(tokens: List[JinjaToken]) -> str:
    """Rebuild argument text from lexer tokens."""
    parts = []
    for token in tokens:
        if token.type == "string":
            parts.append(repr(token.value))
        else:
            parts.append(str(token.value))
    return " ".join(parts)


class TagExtension(Extension):

    """Jinja2 extension that exposes a TagRegistry as statements.

    Each tag in the environment's registry becomes a statement. For example,
    with the default registry:

        Still waiting on {% tk quote from the mayor %}.

    The registry is stored on the environment as `tag_registry`. It is read
    every time a template is parsed, so tags registered after the environment
    is created work for templates loaded afterwards.
    """

    def __init__(self, environment: Environment):
        super().__init__(environment)
        environment.extend(tag_registry=default_registry())
        self._configured: Dict[Tuple[Type[Tag], str, str], Tag] = {}

    @property  # type: ignore
    def tags(self) -> Set[str]:  # type: ignore
        registry: TagRegistry = getattr(self.environment, "tag_registry")
        return set(registry.names())

    def parse(self, parser: Parser) -> nodes.Node:
        token = next(parser.stream)
        name = token.value
        args: List[JinjaToken] = []
        while not parser.stream.current.test_any("block_end", "eof"):
            args.append(next(parser.stream))
        text = raw_text(args)
        tag = self.configure(name, text, args)
        self._configured[(type(tag), name, text)] = tag
        call = self.call_method(
            "_render_tag",
            [nodes.Const(name), nodes.Const(text), nodes.ContextReference()],
            lineno=token.lineno,
        )
        return nodes.Output([call], lineno=token.lineno)

    def configure(self, name: str, text: str, tokens: List[JinjaToken]) -> Tag:
        registry: TagRegistry = getattr(self.environment, "tag_registry")
        tag = registry.create(name, text, tuple((t.type, t.value) for t in tokens))
        logging.debug("configured %r", tag)
        return tag

    def _render_tag(self, name: str, text: str, context: Context) -> Markup:
        # Keyed by class, so a replaced tag also applies to parsed templates.
        registry: TagRegistry = getattr(self.environment, "tag_registry")
        key = (registry.get(name), name, text)
        tag = self._configured.get(key)  # type: ignore
        if tag is None:
            # Also the path for templates loaded from a bytecode cache.
            tag = self.configure(name, text, [])
            self._configured[(type(tag), name, text)] = tag
        return Markup(tag.render(context))


def create_environment(
    registry: Optional[TagRegistry] = None,
    loader: Optional[BaseLoader] = None,
    autoescape: Any = True,
    **options: Any,
) -> Environment:
    """Create a Jinja2 environment that renders tags from registry.

    If registry is None, the environment gets its own default registry.
    """
    env = Environment(
        loader=loader, autoescape=autoescape, extensions=[TagExtension], **options
    )
    if registry is not None:
        setattr(env, "tag_registry", registry)
    return env
