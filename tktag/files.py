"""File structure for tktag sites."""

import logging
import os.path
from pathlib import Path
from typing import Any, Iterator, Mapping, Optional, Union

from tktag import defaults
from tktag.logs import fatal

CONFIG_NAME = "tktag.yml"


def create_site(root: Path, site_name: str):
    """Create the default site files and directories in root.

    Exits with a fatal log if root already exists.
    """

    def create(root: Path, structure: Mapping[str, Any]):
        for name, val in structure.items():
            path = root / name
            if isinstance(val, dict):
                path.mkdir()
                create(path, val)
            elif isinstance(val, str):
                with open(path, "w") as f:
                    f.write(val)
            else:
                raise TypeError(f"unexpected type: {type(val)}")

    try:
        create(root, defaults.structure(site_name))
    except FileExistsError as ex:
        fatal("%s already exists", ex.filename)


class FileSystem:
    def __init__(self, root: Path):
        self.root = root

    def __repr__(self) -> str:
        return f"FileSystem(root={self.root!r})"

    @staticmethod
    def search(start: Optional[Path] = None) -> Optional["FileSystem"]:
        """Find the site root by searching upwards for a tktag.yml file."""
        cwd = Path.cwd().resolve()
        path = (start or cwd).resolve()
        while True:
            config = path / CONFIG_NAME
            if config.exists() and config.is_file():
                # Relative paths keep log messages short. Path.relative_to
                # does not go up directories, so use os.path.relpath.
                return FileSystem(Path(os.path.relpath(path, cwd)))
            if path == path.parent:
                return None
            path = path.parent

    @staticmethod
    def find() -> "FileSystem":
        """Like search, but exits with a fatal log if there is no site."""
        fs = FileSystem.search()
        if fs is None:
            fatal("not in a tktag site")
        return fs

    def join(self, path: Union[str, Path]) -> Path:
        """Get a path within the site."""
        return self.root / path

    def dir(self, path: Union[str, Path]) -> Optional[Path]:
        """Get a directory in the site that is expected to exist.

        Logs an error and returns None if it does not exist.
        """
        path = self.root / path
        if not path.exists():
            logging.error("directory %s not found", path)
            return None
        if not path.is_dir():
            logging.error("%s is not a directory", path)
            return None
        return path

    def file(self, path: Union[str, Path]) -> Optional[Path]:
        """Get a file in the site that is expected to exist.

        Logs an error and returns None if it does not exist.
        """
        path = self.root / path
        if not path.exists():
            logging.error("file %s not found", path)
            return None
        if not path.is_file():
            logging.error("%s is not a file", path)
            return None
        return path

    def walk(self, path: Union[str, Path]) -> Iterator[Path]:
        """Yield all files under a directory in sorted order."""
        directory = self.dir(path)
        if directory is None:
            return
        for child in sorted(directory.rglob("*")):
            if child.is_file() and not child.name.startswith("."):
                yield child
