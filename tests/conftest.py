import pytest


@pytest.fixture
def site_dir(tmp_path, monkeypatch):
    """A small site in a temporary directory, which becomes the cwd."""
    root = tmp_path / "gazette"
    (root / "src" / "news").mkdir(parents=True)
    (root / "tktag.yml").write_text(
        "site_name: Gazette\naliases:\n  todo: tk\n"
    )
    (root / "tags.py").write_text(
        "def register(registry):\n"
        "    @registry.tag()\n"
        "    def masthead(ctx) -> str:\n"
        "        return ctx['site_name'].upper()\n"
    )
    (root / "src" / "index.html").write_text(
        "<h1>{% masthead %}</h1>\n<p>Bridge story: {% tk call the council %}</p>\n"
    )
    (root / "src" / "news" / "budget.md").write_text(
        "# Budget\n\nThe total is @tk{ask finance}.\n\nInterview @todo.\n"
    )
    monkeypatch.chdir(root)
    return root
