"""Template tags."""

from __future__ import annotations

import inspect
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Sequence, Type, Union

# Allowed type signatures for tag functions.
TagFunction = Union[
    Callable[[Any], str], Callable[[Any, str], str],
]

TK_MARKUP = '<span class="yellow bold">TK</span>'


class TagError(Exception):
    """An error that occurs when a tag rejects its input."""


class Tag(ABC):

    """A template tag.

    Tags are created once per occurrence in a source document, when the host
    engine parses it. They receive:

        name: str
            The name the tag was invoked by. A tag class can be registered
            under several names.

        text: str
            The raw argument text following the name. For example, the
            Jinja tag {% tk needs a quote %} has the text "needs a quote".

        tokens: Sequence
            The host engine's tokens for the arguments, if it has any.

    Later, render is called with the host's rendering context (template
    variables and so on) and must return a string of HTML.
    """

    # Placeholder tags mark content that is not finished yet.
    placeholder = False

    def __init__(self, name: str, text: str = "", tokens: Sequence[Any] = ()):
        self.name = name
        self.text = text
        self.tokens = tokens

    def __repr__(self) -> str:
        name = self.__class__.__name__
        return f"{name}(name={self.name!r}, text={self.text!r})"

    @abstractmethod
    def render(self, context: Any) -> str:
        """Render the tag to HTML."""


class TKTag(Tag):

    """The "to come" placeholder.

    It ignores its arguments and the context. Writers sometimes put a note in
    the arguments ({% tk get a quote from the mayor %}); it stays in the
    source only.
    """

    placeholder = True

    def render(self, context: Any) -> str:
        return TK_MARKUP


class FunctionTag(Tag):

    """Tag defined by a function.

    The function takes the following arguments:

        ctx
            Required. The host's rendering context.

        arg: str
            Optional. The raw argument text. Functions without this parameter
            do not accept arguments.

    Use FunctionTag.wrap to make a tag class from a function.
    """

    function: Callable[..., str]
    requires_arg = False

    @classmethod
    def wrap(cls, function: TagFunction, placeholder: bool = False) -> Type[Tag]:
        """Create a tag class from a function."""
        parameters = inspect.signature(function).parameters
        requires_arg = "arg" in parameters
        name = function.__name__
        if requires_arg:
            ann = parameters["arg"].annotation
            if ann is not inspect.Parameter.empty and ann not in (str, "str"):
                logging.error("%s: tag arg should be str, not %s", name, ann)
        return type(
            name,
            (cls,),
            {
                "function": staticmethod(function),
                "requires_arg": requires_arg,
                "placeholder": placeholder,
                "__doc__": function.__doc__,
            },
        )

    def render(self, context: Any) -> str:
        if self.requires_arg:
            return self.function(context, self.text)
        if self.text:
            raise TagError(f"unexpected argument {self.text!r}")
        return self.function(context)
