"""Finding placeholder tags left in sources."""

import logging
from pathlib import Path
from typing import Collection, Iterable, Iterator, List, NamedTuple, Tuple

from jinja2 import Environment, TemplateSyntaxError
from mistletoe.span_token import LineBreak
from mistletoe.token import Token

from tktag.registry import TagRegistry
from tktag.zfm import InlineMacro, parse_markdown, walk

MARKDOWN_SUFFIXES = (".md", ".markdown")


class Placeholder(NamedTuple):

    """A placeholder tag found in a source file."""

    line: int
    name: str
    text: str


def source_kind(path: Path) -> str:
    """Return "markdown" or "jinja" depending on the file suffix."""
    return "markdown" if path.suffix.lower() in MARKDOWN_SUFFIXES else "jinja"


def find_placeholders(
    source: str, names: Collection[str], kind: str = "jinja"
) -> List[Placeholder]:
    """Find tags with the given names in source.

    Raises TemplateSyntaxError if a Jinja source cannot be lexed.
    """
    if kind == "markdown":
        return find_in_markdown(source, names)
    if kind == "jinja":
        return find_in_jinja(source, names)
    raise ValueError(f"unknown source kind {kind!r}")


def find_in_markdown(source: str, names: Collection[str]) -> List[Placeholder]:
    # Code spans and code blocks keep "@tk" as text, so parse rather than grep.
    # Block tokens carry their first line; soft breaks advance within a block.
    result = []
    line = 1

    def visit(token: Token):
        nonlocal line
        block_line = getattr(token, "line_number", None)
        if block_line:
            line = block_line
        elif isinstance(token, LineBreak):
            line += 1
        elif isinstance(token, InlineMacro) and token.name in names:
            result.append(Placeholder(line, token.name, token.arg))

    walk(parse_markdown(source), visit)
    return result


def find_in_jinja(source: str, names: Collection[str]) -> List[Placeholder]:
    # The lexer does not need the tags to be registered.
    tokens = [t for t in Environment().lex(source) if t[1] != "whitespace"]
    result = []
    for i, (lineno, kind, _) in enumerate(tokens[:-1]):
        _, next_kind, name = tokens[i + 1]
        if kind != "block_begin" or next_kind != "name" or name not in names:
            continue
        args = []
        for _, arg_kind, value in tokens[i + 2 :]:
            if arg_kind == "block_end":
                break
            args.append(value)
        result.append(Placeholder(lineno, name, " ".join(args)))
    return result


def scan(
    paths: Iterable[Path], registry: TagRegistry
) -> Iterator[Tuple[Path, Placeholder]]:
    """Yield the placeholders of registry found in each file."""
    names = registry.placeholders()
    for path in paths:
        logging.debug("scanning %s", path)
        with open(path) as f:
            source = f.read()
        try:
            placeholders = find_placeholders(source, names, source_kind(path))
        except TemplateSyntaxError as ex:
            logging.error("%s:%s: %s", path, ex.lineno, ex.message)
            continue
        for placeholder in placeholders:
            yield path, placeholder
