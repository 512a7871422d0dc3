"""Command-line interface."""

import sys
from argparse import ArgumentParser, Namespace
from pathlib import Path
from typing import List, Mapping, Tuple

from tktag.check import Placeholder, scan
from tktag.ext import create_environment
from tktag.files import create_site
from tktag.logs import setup_logging
from tktag.registry import TagRegistry, default_registry
from tktag.site import Site
from tktag.zfm import render_markdown


def main():
    parser, commands = get_parser()
    args = parser.parse_args()
    if args.command == "help":
        if args.help_target:
            commands[args.help_target].print_help()
        else:
            parser.print_help()
        return

    setup_logging(
        sys.stderr,
        verbose=args.verbose or 0,
        keep_going=args.keep_going or getattr(args, "watch", False),
    )

    command = globals()[f"command_{args.command}"]
    assert command, "unexpected command name"
    command(args)


def get_parser() -> Tuple[ArgumentParser, Mapping[str, ArgumentParser]]:
    parser = ArgumentParser(prog="tk", description="render and check TK tags")
    commands = parser.add_subparsers(metavar="command", dest="command", required=True)

    parser_help = commands.add_parser("help", help="show this help message and exit")
    parser_help.add_argument(
        metavar="command",
        dest="help_target",
        nargs="?",
        help="get help for a specific command",
    )

    parser_new = commands.add_parser("new", help="create a new site")
    parser_new.add_argument("name", help="site name")

    parser_tags = commands.add_parser("tags", help="list registered tags")

    parser_render = commands.add_parser("render", help="render files to stdout")
    parser_render.add_argument(
        "-m",
        "--markdown",
        action="store_true",
        help="treat standard input as Markdown",
    )
    parser_render.add_argument(
        "files", nargs="*", type=Path, help="files to render (default: stdin)"
    )

    parser_check = commands.add_parser("check", help="find placeholder tags")
    parser_check.add_argument(
        "-w", "--watch", action="store_true", help="recheck sources when they change"
    )
    parser_check.add_argument(
        "files", nargs="*", type=Path, help="files to check (default: site sources)"
    )

    for subparser in [parser_new, parser_tags, parser_render, parser_check]:
        subparser.add_argument(
            "-k",
            "--keep-going",
            action="store_true",
            help="keep going if there are errors",
        )
        subparser.add_argument(
            "-v",
            "--verbose",
            action="count",
            help="increase logging (can use multiple times)",
        )

    return parser, commands.choices


def site_registry() -> TagRegistry:
    """Return the current site's registry, or the default one outside a site."""
    site = Site.search()
    return site.registry if site else default_registry()


def command_new(args: Namespace):
    print(f"Creating a new tktag site in {args.name}/")
    create_site(Path.cwd(), args.name)


def command_tags(args: Namespace):
    registry = site_registry()
    placeholders = registry.placeholders()
    for name in registry.names():
        marker = "*" if name in placeholders else " "
        print(f"{marker} {name}")


def command_render(args: Namespace):
    site = Site.search()
    if not args.files:
        source = sys.stdin.read()
        registry = site.registry if site else default_registry()
        if args.markdown:
            print(render_markdown(source, registry))
        else:
            print(create_environment(registry).from_string(source).render())
        return
    if site is None:
        site = Site.standalone()
    for path in args.files:
        print(site.render(path))


def command_check(args: Namespace):
    if args.watch:
        # Imported here so that watchdog is only loaded when watching.
        from tktag.watch import Watcher  # pylint: disable=import-outside-toplevel

        Watcher(Site.find(), report_changes).run()
        return
    paths: List[Path] = args.files
    if paths:
        registry = site_registry()
    else:
        site = Site.find()
        registry = site.registry
        paths = site.sources()
    found = False
    for path, placeholder in scan(paths, registry):
        found = True
        print(format_placeholder(path, placeholder))
    if found:
        sys.exit(1)


def format_placeholder(path: Path, placeholder: Placeholder) -> str:
    text = f" {placeholder.text}" if placeholder.text else ""
    return f"{path}:{placeholder.line}: {placeholder.name}{text}"


def report_changes(path: Path, placeholders: List[Placeholder]):
    """Print the placeholders of a file that changed while watching."""
    if not placeholders:
        print(f"{path}: no placeholders", flush=True)
    for placeholder in placeholders:
        print(format_placeholder(path, placeholder), flush=True)
