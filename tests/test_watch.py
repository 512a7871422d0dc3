"""Tests for rechecking on file changes."""

from pathlib import Path

from watchdog.events import (
    DirModifiedEvent,
    FileCreatedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from tktag.check import Placeholder
from tktag.site import Site
from tktag.watch import Handler


def make_handler():
    reports = []
    handler = Handler(Site.find(), lambda path, found: reports.append((path, found)))
    return handler, reports


def test_recheck_on_modify(site_dir):
    handler, reports = make_handler()
    source = site_dir / "src" / "news" / "budget.md"
    source.write_text("Done.\n\nStill @tk{photo}.\n")
    handler.on_modified(FileModifiedEvent(str(source)))
    assert [(str(path), found) for path, found in reports] == [
        ("src/news/budget.md", [Placeholder(3, "tk", "photo")])
    ]


def test_reports_cleared_file(site_dir):
    handler, reports = make_handler()
    source = site_dir / "src" / "index.html"
    source.write_text("<p>Finished.</p>\n")
    handler.on_created(FileCreatedEvent(str(source)))
    assert reports == [(Path("src/index.html"), [])]


def test_moved_file_uses_destination(site_dir):
    handler, reports = make_handler()
    old = site_dir / "src" / "draft.html"
    new = site_dir / "src" / "final.html"
    new.write_text("{% tk %}\n")
    handler.on_moved(FileMovedEvent(str(old), str(new)))
    assert [(str(path), found) for path, found in reports] == [
        ("src/final.html", [Placeholder(1, "tk", "")])
    ]


def test_ignores_directories_and_outside_files(site_dir):
    handler, reports = make_handler()
    handler.on_modified(DirModifiedEvent(str(site_dir / "src")))
    handler.on_modified(FileModifiedEvent(str(site_dir / "tktag.yml")))
    handler.on_modified(FileModifiedEvent(str(site_dir / "src" / "missing.html")))
    assert reports == []


def test_syntax_errors_keep_watching(site_dir, caplog):
    handler, reports = make_handler()
    source = site_dir / "src" / "index.html"
    source.write_text("{% tk 'unterminated %}\n")
    handler.on_modified(FileModifiedEvent(str(source)))
    assert reports == [(Path("src/index.html"), [])]
    assert "index.html" in caplog.text
