"""The tktag.yml file."""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml


class Config:

    """Settings read from a YAML mapping.

    Subclasses list their keys in `required` and `optional`, each with the
    value used when the file leaves it out. Nothing here raises. A file that
    is not a YAML mapping is logged and read as empty, and validate() fills
    in every key, so a site with a broken tktag.yml still renders.
    """

    required: Dict[str, Any] = {}
    optional: Dict[str, Any] = {}

    def __init__(self, path: Path, data: Mapping[str, Any]):
        self.path = path
        self.data = dict(data)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(path={self.path!r}, data={self.data!r})"

    def __getitem__(self, key: str) -> Any:
        return self.data[key]

    def __contains__(self, key: object) -> bool:
        return key in self.data

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Read the file at path."""
        with open(path) as f:
            return cls.loads(path, f.read())

    @classmethod
    def loads(cls, path: Path, content: str) -> "Config":
        """Read content, using path only in log messages."""
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as ex:
            logging.error("cannot parse %s: %s", path, ex)
            return cls(path, {})
        if data is None:
            return cls(path, {})
        if not isinstance(data, dict):
            logging.error("%s: expected a mapping, not %s", path, type(data).__name__)
            return cls(path, {})
        return cls(path, data)

    def validate(self, **overrides: Any) -> "Config":
        """Log missing and unknown keys, then fill in defaults.

        Keyword arguments replace the class defaults but not the file's values.
        For example, a site without a tktag.yml passes source_dir=".".
        """
        for key in self.required:
            if key not in self.data:
                logging.error("%s: missing %r", self.path, key)
        defaults = copy.deepcopy({**self.required, **self.optional})
        for key in self.data:
            if key not in defaults:
                logging.warning("%s: unknown key %r", self.path, key)
        self.data = {**defaults, **overrides, **self.data}
        return self


class SiteConfig(Config):

    required = {
        "site_name": "Unnamed Site",
    }

    optional = {
        "source_dir": "src",
        "autoescape": True,
        "tags_file": "tags.py",
        "aliases": {},
    }
