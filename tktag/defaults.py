"""Default files for a tktag site."""


def structure(name):
    """Default site structure."""
    return {
        name: {
            ".gitignore": gitignore,
            "tktag.yml": tktag_yml(name),
            "tags.py": tags_py,
            "src": {"index.html": index_html, "notes.md": notes_md},
        }
    }


gitignore = """\
__pycache__
*.pyc
.DS_Store
"""


tktag_yml = """\
site_name: {0}
source_dir: src
aliases:
  todo: tk
""".format


tags_py = '''\
"""Site-specific tags."""

import datetime


def register(registry):
    @registry.tag()
    def year(ctx) -> str:
        return str(datetime.date.today().year)
'''


index_html = """\
<!DOCTYPE html>
<html>
<head><title>{{ title | default("Home") }}</title></head>
<body>
<h1>Welcome</h1>
<p>Our story on the new bridge is {% tk waiting on the council %}.</p>
<p>Copyright {% year %}.</p>
</body>
</html>
"""


notes_md = """\
# Notes

The budget figure is @tk{ask finance} and the interview is @todo.
"""
