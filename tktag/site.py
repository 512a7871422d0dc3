"""A tktag site."""

from __future__ import annotations

import importlib.util
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from tktag.check import source_kind
from tktag.config import SiteConfig
from tktag.ext import create_environment
from tktag.files import CONFIG_NAME, FileSystem
from tktag.logs import fatal
from tktag.registry import RegistryError, TagRegistry, default_registry
from tktag.zfm import render_markdown


class Site:

    """A tktag site.

    A site comprises a configuration file, an optional tags file, and a
    directory of sources (Jinja templates and Markdown files).

    Sites should usually be created via Site.find(). This will:

    * Load the configuration file.
    * Build a registry with the built-in tags.
    * Load the tags file, which can register more tags.
    * Register the configured aliases.
    """

    def __init__(self, fs: FileSystem, cfg: SiteConfig):
        self.fs = fs
        self.cfg = cfg
        self.name = cfg["site_name"]
        self.registry: TagRegistry = default_registry()
        self.load_tags()
        self.register_aliases()
        self.source_dir = fs.join(cfg["source_dir"])
        autoescape = select_autoescape(["html", "xml"]) if cfg["autoescape"] else False
        self.env: Environment = create_environment(
            self.registry,
            loader=FileSystemLoader(str(self.source_dir)),
            autoescape=autoescape,
        )

    def __repr__(self) -> str:
        return f"Site(name={self.name!r}, path={self.fs.root!r})"

    @staticmethod
    def load(fs: FileSystem) -> Site:
        """Load the site rooted at fs."""
        cfg_path = fs.file(CONFIG_NAME)
        if cfg_path is None:
            fatal("%s disappeared", CONFIG_NAME)
        cfg = SiteConfig.load(cfg_path)
        cfg.validate()
        logging.debug("site config: %r", cfg)
        return Site(fs, cfg)

    @staticmethod
    def find() -> Site:
        """Find the site based on the current working directory."""
        fs = FileSystem.find()
        logging.info("found site %s", fs.root.resolve())
        return Site.load(fs)

    @staticmethod
    def search() -> Optional[Site]:
        """Like find, but returns None when not in a site."""
        fs = FileSystem.search()
        return Site.load(fs) if fs else None

    @staticmethod
    def standalone() -> Site:
        """Create a site for rendering loose files in the current directory."""
        cfg = SiteConfig(Path(CONFIG_NAME), {"site_name": "Unnamed Site"})
        cfg.validate(source_dir=".", tags_file=None)
        return Site(FileSystem(Path(".")), cfg)

    def load_tags(self):
        """Load the site's tags file, if it exists.

        The file may define a function register(registry), which is called
        with the site's registry.
        """
        if not self.cfg["tags_file"]:
            return
        f = self.fs.join(self.cfg["tags_file"])
        if not (f.exists() and f.is_file()):
            return
        logging.info("loading tags file %s", f)
        spec = importlib.util.spec_from_file_location("tags", f)
        module = importlib.util.module_from_spec(spec)  # type: ignore
        spec.loader.exec_module(module)  # type: ignore
        register = getattr(module, "register", None)
        if register is None:
            logging.warning("%s: no register function", f)
            return
        try:
            register(self.registry)
        except RegistryError as ex:
            logging.error("%s: %s", f, ex)

    def register_aliases(self):
        """Register the configured aliases, e.g. {todo: tk}."""
        aliases = self.cfg["aliases"] or {}
        if not isinstance(aliases, dict):
            logging.error("%s: aliases should be a mapping", self.cfg.path)
            return
        for alias, target in aliases.items():
            tag_cls = self.registry.get(str(target))
            if tag_cls is None:
                logging.error("alias %s: undefined tag %r", alias, target)
                continue
            try:
                self.registry.register(str(alias), tag_cls)
            except RegistryError as ex:
                logging.error("alias %s: %s", alias, ex)

    def variables(self) -> Dict[str, Any]:
        """Variables available to every source."""
        return {"site_name": self.name}

    def sources(self) -> List[Path]:
        """Return all source files."""
        return list(self.fs.walk(self.cfg["source_dir"]))

    def template_name(self, path: Path) -> Optional[str]:
        """Return the loader name for a file in the source dir, or None."""
        try:
            relative = path.resolve().relative_to(self.source_dir.resolve())
        except ValueError:
            return None
        return relative.as_posix()

    def render(self, path: Path) -> str:
        """Render a source file to HTML."""
        logging.debug("rendering %s", path)
        if source_kind(path) == "markdown":
            with open(path) as f:
                source = f.read()
            return render_markdown(source, self.registry, self.variables(), path)
        name = self.template_name(path)
        if name is None:
            with open(path) as f:
                template = self.env.from_string(f.read())
        else:
            template = self.env.get_template(name)
        return template.render(self.variables())

