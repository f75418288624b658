"""Command-line interface.

Run with: python -m satellitecatalogue list
"""
from __future__ import annotations

import argparse
import logging
import sys

from satellitecatalogue.app.application import create_app, create_settings
from satellitecatalogue.app.editor import Editor
from satellitecatalogue.config import EXPORT_FILENAME
from satellitecatalogue.logging_config import setup_logging
from satellitecatalogue.model.baseline import load_baseline
from satellitecatalogue.model.errors import CatalogueError
from satellitecatalogue.model.io import APP_VERSION

logger = logging.getLogger(__name__)


def _print_modules(editor: Editor) -> None:
    view = editor.view()
    print(" > ".join(crumb.name for crumb in view.breadcrumbs))
    if not view.modules:
        print("  (no components)")
    for i, node in enumerate(view.modules):
        children = f"  [{len(node.modules)} sub-components]" if node.modules else ""
        print(f"  {i}: {node.icon} {node.name} ({node.type or 'Module'}){children}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="satellitecatalogue", description="Browse and edit the satellite catalogue.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("list", help="List all satellites")

    show = sub.add_parser("show", help="Show the components at a location")
    show.add_argument("root", type=int, help="Satellite index")
    show.add_argument("steps", type=int, nargs="*", help="Module indices to drill into")

    export = sub.add_parser("export", help="Export the working catalogue as JSON")
    export.add_argument("path", nargs="?", default=EXPORT_FILENAME)

    imp = sub.add_parser("import", help="Replace the catalogue with a JSON export")
    imp.add_argument("path")

    sub.add_parser("overlay", help="Summarize stored edits")
    sub.add_parser("reset", help="Discard all stored edits")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=logging.DEBUG if args.verbose else logging.WARNING)

    create_app([sys.argv[0]])
    editor = Editor.from_storage(load_baseline(), create_settings())
    if editor.load_error:
        print(f"Warning: {editor.load_error}", file=sys.stderr)

    try:
        if args.command == "list":
            for i, root in enumerate(editor.roots):
                print(f"{i}: {root.icon} {root.name} ({root.type or 'Satellite'})")

        elif args.command == "show":
            editor.enter_root(args.root)
            for step in args.steps:
                editor.drill_into(step)
            _print_modules(editor)

        elif args.command == "export":
            path = editor.export_to_file(args.path)
            print(f"Exported {len(editor.roots)} satellites to {path}")

        elif args.command == "import":
            editor.import_from_file(args.path)
            print(f"Imported {len(editor.roots)} satellites")

        elif args.command == "overlay":
            overlay = editor.session.overlay()
            print(f"modified: {', '.join(n.name for n in overlay.modified) or '-'}")
            print(f"added:    {', '.join(n.name for n in overlay.added) or '-'}")
            print(f"deleted:  {', '.join(overlay.deleted) or '-'}")

        elif args.command == "reset":
            editor.reset_to_baseline()
            print("Stored edits discarded.")

    except CatalogueError as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
