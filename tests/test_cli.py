"""Tests for the command-line interface."""

import io
from argparse import Namespace
from pathlib import Path

import pytest

from tktag import cli
from tktag.check import Placeholder
from tktag.site import Site
from tktag.tag import TK_MARKUP


def run(command, **kwargs):
    getattr(cli, f"command_{command}")(Namespace(**kwargs))


def test_parser():
    parser, commands = cli.get_parser()
    assert set(commands) == {"help", "new", "tags", "render", "check"}
    args = parser.parse_args(["check", "-vv", "a.html", "b.md"])
    assert args.verbose == 2
    assert args.files == [Path("a.html"), Path("b.md")]
    args = parser.parse_args(["check", "-w", "-k"])
    assert args.watch and args.keep_going and args.files == []


def test_tags_outside_site(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    run("tags")
    assert capsys.readouterr().out == "* tk\n"


def test_tags_in_site(site_dir, capsys):
    run("tags")
    assert capsys.readouterr().out == "  masthead\n* tk\n* todo\n"


def test_render_stdin(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("sys.stdin", io.StringIO("Story: {% tk %}"))
    run("render", files=[], markdown=False)
    assert capsys.readouterr().out == f"Story: {TK_MARKUP}\n"


def test_render_stdin_markdown(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("sys.stdin", io.StringIO("Story: @tk"))
    run("render", files=[], markdown=True)
    assert TK_MARKUP in capsys.readouterr().out


def test_render_files_outside_site(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "a.html").write_text("{% tk %}")
    run("render", files=[Path("a.html")], markdown=False)
    assert capsys.readouterr().out == f"{TK_MARKUP}\n"


def test_render_files_in_site(site_dir, capsys):
    run("render", files=[Path("src/index.html")], markdown=False)
    assert "GAZETTE" in capsys.readouterr().out


def test_check_site(site_dir, capsys):
    with pytest.raises(SystemExit) as info:
        run("check", files=[], watch=False)
    assert info.value.code == 1
    assert capsys.readouterr().out.splitlines() == [
        "src/index.html:2: tk call the council",
        "src/news/budget.md:3: tk ask finance",
        "src/news/budget.md:5: todo",
    ]


def test_check_clean_files(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "done.html").write_text("<p>Finished.</p>")
    run("check", files=[Path("done.html")], watch=False)
    assert capsys.readouterr().out == ""


def test_new_site_renders(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    run("new", name="paper")
    assert "Creating a new tktag site in paper/" in capsys.readouterr().out
    monkeypatch.chdir(tmp_path / "paper")
    site = Site.find()
    assert site.registry.names() == ["tk", "todo", "year"]
    index = site.render(Path("src/index.html"))
    assert TK_MARKUP in index
    assert "{%" not in index
    notes = site.render(Path("src/notes.md"))
    assert notes.count(TK_MARKUP) == 2


def test_new_existing(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "paper").mkdir()
    with pytest.raises(SystemExit):
        run("new", name="paper")


def test_report_changes(capsys):
    cli.report_changes(Path("a.md"), [])
    cli.report_changes(Path("b.md"), [Placeholder(2, "tk", "quote")])
    assert capsys.readouterr().out == "a.md: no placeholders\nb.md:2: tk quote\n"
