"""Tests for finding placeholders."""

from pathlib import Path

import pytest

from tktag.check import Placeholder, find_placeholders, scan, source_kind
from tktag.registry import default_registry


def test_source_kind():
    assert source_kind(Path("a.md")) == "markdown"
    assert source_kind(Path("a.Markdown")) == "markdown"
    assert source_kind(Path("a.html")) == "jinja"
    assert source_kind(Path("a.txt")) == "jinja"


def test_find_in_jinja():
    source = "a\n{% tk call back %}\n{{ tk }}\n{%- tk -%}\n{% if x %}{% endif %}"
    assert find_placeholders(source, ["tk"]) == [
        Placeholder(2, "tk", "call back"),
        Placeholder(4, "tk", ""),
    ]


def test_find_in_jinja_skips_comments_and_raw():
    source = "{# {% tk %} #}\n{% raw %}{% tk %}{% endraw %}\n{% tk 'quote' %}"
    assert find_placeholders(source, ["tk"]) == [Placeholder(3, "tk", "'quote'")]


def test_find_in_jinja_only_given_names():
    assert find_placeholders("{% tk %}{% todo %}", ["todo"]) == [
        Placeholder(1, "todo", "")
    ]


def test_find_in_markdown():
    source = "Total @tk{ask finance}.\nmail me@example.com\n\\@tk\n@tk @tk\n"
    assert find_placeholders(source, ["tk"], "markdown") == [
        Placeholder(1, "tk", "ask finance"),
        Placeholder(4, "tk", ""),
        Placeholder(4, "tk", ""),
    ]


def test_find_in_markdown_skips_code():
    source = "Use `@tk` inline.\n\n```\n@tk\n```\n\n    @tk\n\nReal @tk here.\n"
    assert find_placeholders(source, ["tk"], "markdown") == [
        Placeholder(9, "tk", ""),
    ]


def test_unknown_kind():
    with pytest.raises(ValueError):
        find_placeholders("", ["tk"], "rst")


def test_scan(tmp_path, caplog):
    (tmp_path / "a.html").write_text("{% tk %}\n")
    (tmp_path / "b.md").write_text("none\n\n@tk\n")
    (tmp_path / "c.html").write_text("{% tk 'unterminated %}\n")
    (tmp_path / "d.html").write_text("done\n")
    paths = sorted(tmp_path.iterdir())
    found = list(scan(paths, default_registry()))
    assert found == [
        (tmp_path / "a.html", Placeholder(1, "tk", "")),
        (tmp_path / "b.md", Placeholder(3, "tk", "")),
    ]
    assert "c.html" in caplog.text
