"""File watching for placeholder reports."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from tktag.check import Placeholder, scan
from tktag.site import Site

Report = Callable[[Path, List[Placeholder]], None]


class Watcher:

    """Watch the site's sources and report placeholders as files change."""

    def __init__(self, site: Site, report: Report):
        self.site = site
        self.handler = Handler(site, report)
        self.observer = Observer()

    def run(self):
        # Have to pass str, not Path.
        self.observer.schedule(self.handler, str(self.handler.root), recursive=True)
        logging.info("running initial check")
        for path in self.site.sources():
            self.handler.check(path)
        logging.info("watching %s", self.site.source_dir)
        self.observer.start()
        try:
            self.observer.join()
        except KeyboardInterrupt:
            logging.info("quitting")
        finally:
            self.observer.stop()
            self.observer.join()


class Handler(FileSystemEventHandler):

    """Event handler that rechecks a source file when it changes."""

    def __init__(self, site: Site, report: Report):
        super().__init__()
        self.site = site
        self.report = report
        self.root = site.source_dir.resolve()

    def source(self, event: FileSystemEvent) -> Optional[Path]:
        """Return the source file for an event, or None to ignore it."""
        if event.is_directory:
            return None
        path = Path(str(getattr(event, "dest_path", "") or event.src_path)).resolve()
        try:
            relative = path.relative_to(self.root)
        except ValueError:
            return None
        if path.name.startswith(".") or not path.is_file():
            return None
        return self.site.source_dir / relative

    def check(self, path: Path):
        """Scan one file and report its placeholders, even if there are none."""
        self.report(path, [p for _, p in scan([path], self.site.registry)])

    def recheck(self, event: FileSystemEvent):
        path = self.source(event)
        if path is None:
            return
        logging.info("rechecking %s", path)
        self.check(path)

    def on_created(self, event: FileSystemEvent):
        self.recheck(event)

    def on_modified(self, event: FileSystemEvent):
        self.recheck(event)

    def on_moved(self, event: FileSystemEvent):
        self.recheck(event)
