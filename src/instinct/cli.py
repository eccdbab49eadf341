"""Command-line interface for the instinct store using argparse."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional, Sequence

from instinct.config import DEFAULT_EXPORT_FILE, Settings
from instinct.exceptions import InstinctError
from instinct.logging_config import setup_logging
from instinct.manager import InstinctManager
from instinct.store.json_file import CORRUPT_POLICIES

logger = logging.getLogger("instinct.cli")


def _get_manager(args: argparse.Namespace) -> InstinctManager:
    settings: Settings = args.settings
    return InstinctManager(
        path=args.store or settings.store_path,
        on_corrupt=args.on_corrupt or settings.on_corrupt,
    )


def cmd_list(args: argparse.Namespace) -> None:
    manager = _get_manager(args)
    instincts = manager.list(
        category=args.category,
        search=args.search,
        min_confidence=args.min_confidence,
    )
    if not instincts:
        print("No instincts found.")
        return
    print()
    print(f"  {'ID':<14} {'Name':<30} {'Category':<16} {'Conf':<6} Uses")
    print(f"  {'─' * 14} {'─' * 30} {'─' * 16} {'─' * 6} {'─' * 5}")
    for i in instincts:
        print(
            f"  {i.id:<14} {i.name:<30} {i.category:<16} "
            f"{i.confidence:<6.2f} {i.use_count}"
        )
    print()


def cmd_add(args: argparse.Namespace) -> None:
    manager = _get_manager(args)
    tags: List[str] = [t.strip() for t in args.tags.split(",") if t.strip()] if args.tags else []
    inst = manager.add(args.name, args.category, args.pattern, tags=tags)
    print(inst.id)


def cmd_remove(args: argparse.Namespace) -> None:
    manager = _get_manager(args)
    removed = manager.remove(args.id)
    print(f'Removed instinct "{removed.name}" ({removed.id})')


def cmd_use(args: argparse.Namespace) -> None:
    manager = _get_manager(args)
    inst = manager.use(args.id)
    print(f"{inst.id} confidence {inst.confidence:.2f} ({inst.use_count} uses)")


def cmd_export(args: argparse.Namespace) -> None:
    manager = _get_manager(args)
    out_path = os.path.abspath(args.file)
    instincts = manager.export_instincts(out_path)
    print(f"Exported {len(instincts)} instincts to {out_path}")


def cmd_import(args: argparse.Namespace) -> None:
    manager = _get_manager(args)
    result = manager.import_instincts(os.path.abspath(args.file))
    print(f"Imported {result.added} instincts ({result.skipped} duplicates skipped).")
    for name, keys in result.defaulted.items():
        print(f"  {name}: defaulted {', '.join(keys)}")


def cmd_evolve(args: argparse.Namespace) -> None:
    manager = _get_manager(args)
    report = manager.evolve()
    print()
    print("Instinct Clusters:")
    print()
    for cluster in report.clusters:
        marker = " ★ READY" if cluster.ready else ""
        print(
            f"  {cluster.category} ({len(cluster.members)} patterns, "
            f"avg confidence: {cluster.average_confidence:.2f}){marker}"
        )
        for m in cluster.members:
            print(f"    - {m.name} ({m.confidence:.2f})")
        print()

    if report.ready_count:
        print(f"{report.ready_count} cluster(s) ready for evolution into formal skills.")
    else:
        print("No clusters ready for evolution yet. Keep using and validating patterns.")


def cmd_status(args: argparse.Namespace) -> None:
    manager = _get_manager(args)
    report = manager.status()
    if report.total == 0:
        print('No instincts stored. Use "add" to create your first instinct.')
        return
    print()
    print("  Instinct Store Status")
    print("  ─────────────────────")
    print(f"  Total instincts:        {report.total}")
    print(f"  Average confidence:     {report.average_confidence:.2f}")
    print(f"  High confidence (≥0.7): {report.high_confidence}")
    print(f"  Low confidence (<0.3):  {report.low_confidence}")
    print()
    print("  By category:")
    for category, count in report.categories.items():
        print(f"    {category}: {count}")
    print()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="instinct",
        description="Manage learned patterns (instincts)",
    )
    parser.add_argument("--store", default=None, help="Path to the instincts JSON file")
    parser.add_argument(
        "--on-corrupt",
        choices=CORRUPT_POLICIES,
        default=None,
        help="What to do when the store file cannot be parsed",
    )

    sub = parser.add_subparsers(dest="command")

    # list
    p = sub.add_parser("list", help="Show stored instincts")
    p.add_argument("--category", default=None)
    p.add_argument("--search", default=None)
    p.add_argument("--min-confidence", type=float, default=None)

    # add
    p = sub.add_parser("add", help="Add a new instinct")
    p.add_argument("name")
    p.add_argument("--category", required=True)
    p.add_argument("--pattern", required=True)
    p.add_argument("--tags", default=None, help="Comma-separated tags")

    # remove
    p = sub.add_parser("remove", help="Remove an instinct by ID")
    p.add_argument("id")

    # use
    p = sub.add_parser("use", help="Record a successful use of an instinct")
    p.add_argument("id")

    # export
    p = sub.add_parser("export", help="Export instincts to a JSON file")
    p.add_argument("--file", default=DEFAULT_EXPORT_FILE, help="Output file path")

    # import
    p = sub.add_parser("import", help="Import instincts from a JSON file")
    p.add_argument("file", help="JSON file to import")

    sub.add_parser("evolve", help="Cluster instincts and suggest skill creation")
    sub.add_parser("status", help="Summary of the instinct store")

    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    settings = Settings.from_env()
    setup_logging(settings)
    args.settings = settings

    handlers = {
        "list": cmd_list,
        "add": cmd_add,
        "remove": cmd_remove,
        "use": cmd_use,
        "export": cmd_export,
        "import": cmd_import,
        "evolve": cmd_evolve,
        "status": cmd_status,
    }
    try:
        handlers[args.command](args)
    except (InstinctError, ValueError, FileNotFoundError) as exc:
        logger.error("%s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
