"""Tag registry."""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Type

from tktag.tag import FunctionTag, Tag, TKTag

NAME_PATTERN = re.compile(r"^[a-z][a-z0-9_]*$")


class RegistryError(Exception):
    """An error that occurs when registering tags."""


class TagRegistry:

    """A mapping from tag names to tag classes.

    Registries are plain objects. Each environment or renderer is given the
    registry it should use, so two of them can have different tags in the
    same process.

    Example usage:

        registry = TagRegistry()
        registry.register("tk", TKTag)

        @registry.tag()
        def shout(ctx, arg: str) -> str:
            return arg.upper()
    """

    def __init__(self):
        self._tags: Dict[str, Type[Tag]] = {}

    def __repr__(self) -> str:
        return f"TagRegistry(names={self.names()!r})"

    def __contains__(self, name: object) -> bool:
        return name in self._tags

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._tags)

    def register(self, name: str, tag_cls: Type[Tag], replace: bool = False):
        """Register a tag class under a name.

        Registering the same class under the same name again does nothing.
        Registering a different class under a taken name is an error unless
        replace is True.
        """
        if not NAME_PATTERN.match(name):
            raise RegistryError(f"invalid tag name {name!r}")
        if not (isinstance(tag_cls, type) and issubclass(tag_cls, Tag)):
            raise RegistryError(f"{name}: expected a Tag subclass, not {tag_cls!r}")
        existing = self._tags.get(name)
        if existing is tag_cls:
            return
        if existing is not None and not replace:
            raise RegistryError(f"{name}: already registered to {existing.__name__}")
        logging.debug("registered tag %s to %s", name, tag_cls.__name__)
        self._tags[name] = tag_cls

    def unregister(self, name: str):
        """Remove a tag."""
        if name not in self._tags:
            raise RegistryError(f"{name}: not registered")
        del self._tags[name]

    def tag(
        self, name: Optional[str] = None, placeholder: bool = False
    ) -> Callable[[Any], Any]:
        """Decorator that registers a function or Tag subclass."""

        def decorator(obj: Any) -> Any:
            if isinstance(obj, type) and issubclass(obj, Tag):
                tag_cls = obj
            else:
                tag_cls = FunctionTag.wrap(obj, placeholder=placeholder)
            self.register(name or obj.__name__, tag_cls)
            return obj

        return decorator

    def get(self, name: str) -> Optional[Type[Tag]]:
        """Get the tag class with the given name."""
        return self._tags.get(name)

    def create(self, name: str, text: str = "", tokens: Sequence[Any] = ()) -> Tag:
        """Create a tag for one occurrence in a document."""
        tag_cls = self._tags.get(name)
        if tag_cls is None:
            raise RegistryError(f"{name}: undefined tag")
        return tag_cls(name, text, tokens)

    def names(self) -> List[str]:
        """Return the sorted names of all tags."""
        return sorted(self._tags)

    def placeholders(self) -> List[str]:
        """Return the sorted names of placeholder tags."""
        return sorted(name for name, cls in self._tags.items() if cls.placeholder)

    def copy(self) -> TagRegistry:
        """Return an independent copy of the registry."""
        registry = TagRegistry()
        registry._tags = dict(self._tags)
        return registry


def default_registry() -> TagRegistry:
    """Return a new registry with the built-in tags."""
    registry = TagRegistry()
    registry.register("tk", TKTag)
    return registry
