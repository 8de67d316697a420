"""
Command line front end for the family tree.

1) Open the member collection from SQLite (seeding sample data on first run).
2) Apply the requested change or query.
3) Optionally compute the generation layout and plot it.
"""

import argparse
import logging
from pathlib import Path
import sys

from database import SQLiteStorage
from layout import DEFAULT_CANVAS_WIDTH, compute_layout
from models import GENDERS
from plotting import plot_layout
from query import QueryFilter, sort_for_list
from store import GraphStore
from transfer import export_filename, export_members, read_import_file

PROJECT_ROOT = Path(__file__).parent.parent
DEFAULT_DB_PATH = PROJECT_ROOT / "family_tree.db"


def add_filter_arguments(parser: argparse.ArgumentParser):
    parser.add_argument("--search", help="Case-insensitive name substring")
    parser.add_argument("--generation", type=int)
    parser.add_argument("--gender", choices=GENDERS)


def add_member_arguments(parser: argparse.ArgumentParser, required: bool):
    parser.add_argument("--name", required=required)
    parser.add_argument("--gender", choices=GENDERS, required=required)
    parser.add_argument("--birth-date", dest="birth_date")
    parser.add_argument("--death-date", dest="death_date")
    parser.add_argument("--generation")
    parser.add_argument("--father", dest="father_id")
    parser.add_argument("--mother", dest="mother_id")
    parser.add_argument("--spouse", dest="spouse_id", help="Member id, or empty string to unpair")
    parser.add_argument("--description")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Maintain and plot a family tree.")
    parser.add_argument("--db", type=Path, default=DEFAULT_DB_PATH, help="SQLite database path")
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    add_filter_arguments(sub.add_parser("list", help="List members"))

    show = sub.add_parser("show", help="Show a member and their relatives")
    show.add_argument("member_id")

    add_member_arguments(sub.add_parser("add", help="Add a member"), required=True)

    update = sub.add_parser("update", help="Update a member")
    update.add_argument("member_id")
    add_member_arguments(update, required=False)

    delete = sub.add_parser("delete", help="Delete a member")
    delete.add_argument("member_id")

    import_ = sub.add_parser("import", help="Replace all members from a JSON export")
    import_.add_argument("file", type=Path)
    import_.add_argument("--yes", action="store_true", help="Don't ask for confirmation")

    export = sub.add_parser("export", help="Write all members to a JSON file")
    export.add_argument("--output", type=Path)

    plot = sub.add_parser("plot", help="Plot the generation tree")
    plot.add_argument("--output", type=Path, default=PROJECT_ROOT / "family_tree.png")
    plot.add_argument("--width", type=float, default=DEFAULT_CANVAS_WIDTH)
    add_filter_arguments(plot)

    return parser


def member_fields(args: argparse.Namespace) -> dict:
    """Collect the member options that were given on the command line."""
    names = ("name", "gender", "birth_date", "death_date", "generation", "father_id", "mother_id", "spouse_id", "description")
    return {name: getattr(args, name) for name in names if getattr(args, name) is not None}


def filter_from_args(args: argparse.Namespace) -> QueryFilter:
    return QueryFilter(search=args.search, generation=args.generation, gender=args.gender)


def print_member_line(member):
    print(f"  [{member.id}] {member.name} - generation {member.generation}, {member.gender}")


def cmd_list(store: GraphStore, args) -> int:
    members = sort_for_list(store.list_members(filter_from_args(args)))
    if not members:
        print("No members")
        return 0
    print(f"{len(members)} members:")
    for m in members:
        print_member_line(m)
    return 0


def cmd_show(store: GraphStore, args) -> int:
    detail = store.detail(args.member_id)
    if detail is None:
        print(f"Member {args.member_id} not found")
        return 1

    m = detail.member
    print(f"{m.name} ({m.gender}, generation {m.generation})")
    if m.birth_date:
        print(f"  Born: {m.birth_date}")
    if m.death_date:
        print(f"  Died: {m.death_date}")
    for label, relative in (("Father", detail.father), ("Mother", detail.mother), ("Spouse", detail.spouse)):
        if relative is not None:
            print(f"  {label}: {relative.name}")
    if detail.children:
        print(f"  Children: {', '.join(c.name for c in detail.children)}")
    descendants = store.resolver.descendants(m.id)
    if descendants:
        print(f"  Descendants: {len(descendants)}")
    if m.description:
        print(f"  Notes: {m.description}")
    return 0


def cmd_add(store: GraphStore, args) -> int:
    member = store.create(member_fields(args))
    print(f"Added {member.name} with id {member.id}")
    return 0


def cmd_update(store: GraphStore, args) -> int:
    member = store.update(args.member_id, member_fields(args))
    if member is None:
        print(f"Member {args.member_id} not found")
        return 1
    print(f"Updated {member.name}")
    return 0


def cmd_delete(store: GraphStore, args) -> int:
    result = store.delete(args.member_id)
    if not result.success:
        print(result.reason)
        return 1
    print(f"Deleted {args.member_id}")
    return 0


def cmd_import(store: GraphStore, args) -> int:
    def confirm() -> bool:
        if args.yes:
            return True
        answer = input("Importing replaces all existing members. Continue? [y/N] ")
        return answer.strip().lower() in ("y", "yes")

    result = read_import_file(store, args.file, confirm=confirm)
    print(result.message)
    return 0 if result.success else 1


def cmd_export(store: GraphStore, args) -> int:
    output = args.output or Path(export_filename())
    output.write_text(export_members(store.members), encoding="utf-8")
    print(f"Exported {len(store)} members to {output}")
    return 0


def cmd_plot(store: GraphStore, args) -> int:
    layout = compute_layout(store.list_members(filter_from_args(args)), canvas_width=args.width)
    print(f"  Layout has {len(layout.nodes)} nodes and {len(layout.connectors)} connectors")
    plot_layout(layout, args.output)
    return 0


COMMANDS = {
    "list": cmd_list,
    "show": cmd_show,
    "add": cmd_add,
    "update": cmd_update,
    "delete": cmd_delete,
    "import": cmd_import,
    "export": cmd_export,
    "plot": cmd_plot,
}


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    store = GraphStore.open(SQLiteStorage(args.db))
    return COMMANDS[args.command](store, args)


if __name__ == "__main__":
    sys.exit(main())
