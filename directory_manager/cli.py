"""Command line interface for directory-manager."""
from __future__ import annotations

import argparse
import json
import sys
import threading
from pathlib import Path
from typing import Iterable

from .comparer import compare
from .config import CompareOptions, OutputOptions, RenameOptions, SearchOptions
from .exceptions import DirectoryManagerError
from .logger import configure_logging, next_log_path
from .models import ChangeEvent, DirectoryEntity
from .renamer import rename_all
from .search import search
from .utils.fs import total_size
from .watcher import ChangeNotifier


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "handler"):
        parser.print_help()
        return 1
    configure_logging(next_log_path(args.command) if args.log else None, level=args.log_level)
    try:
        return args.handler(args)
    except DirectoryManagerError as exc:
        print(f"{args.command} failed: {exc}", file=sys.stderr)
        return 1


def _choices(enum_type) -> list[str]:
    return [member.value for member in enum_type]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dirmanager", description="directory-manager CLI")
    parser.add_argument("--log", action="store_true", help="Write a JSON log under ~/.directory_manager/logs")
    parser.add_argument("--log-level", type=str.upper, default="WARNING")
    subparsers = parser.add_subparsers(dest="command")

    compare_parser = subparsers.add_parser("compare", help="Compare the subdirectories of two roots")
    compare_parser.add_argument("left", type=Path)
    compare_parser.add_argument("right", type=Path)
    compare_parser.add_argument("--output", choices=_choices(OutputOptions), default=OutputOptions.MATCHING.value)
    compare_parser.add_argument("--by", choices=_choices(CompareOptions), default=CompareOptions.NAME.value)
    compare_parser.add_argument("--json", action="store_true")
    compare_parser.set_defaults(handler=_handle_compare)

    search_parser = subparsers.add_parser("search", help="Search the subdirectories of a root")
    search_parser.add_argument("root", type=Path)
    search_parser.add_argument("key", nargs="?", default=None)
    search_parser.add_argument("--mode", choices=_choices(SearchOptions), default=SearchOptions.NAME.value)
    search_parser.add_argument("--json", action="store_true")
    search_parser.set_defaults(handler=_handle_search)

    rename_parser = subparsers.add_parser("rename", help="Rename directories with a batch strategy")
    rename_parser.add_argument("directories", nargs="+", type=Path)
    rename_parser.add_argument("--strategy", choices=_choices(RenameOptions), default=RenameOptions.DEFAULT.value)
    rename_parser.add_argument("--separator", default="-")
    rename_parser.add_argument("--start-from", type=int, default=1)
    rename_parser.add_argument("--pattern", default="")
    rename_parser.add_argument("--replace-with", default="")
    rename_parser.add_argument("--name", dest="new_name", default=None, help="Target name for use_unique_name")
    rename_parser.add_argument("--case-sensitive", action="store_true")
    rename_parser.add_argument("--json", action="store_true")
    rename_parser.set_defaults(handler=_handle_rename)

    size_parser = subparsers.add_parser("size", help="Print the recursive size of a directory in bytes")
    size_parser.add_argument("path", type=Path)
    size_parser.set_defaults(handler=_handle_size)

    watch_parser = subparsers.add_parser("watch", help="Print change events for a directory")
    watch_parser.add_argument("path", type=Path)
    watch_parser.add_argument("--duration", type=float, default=None, help="Stop after N seconds")
    watch_parser.set_defaults(handler=_handle_watch)

    return parser


def _print_entities(entities: Iterable[DirectoryEntity], as_json: bool) -> None:
    paths = [entity.full_path for entity in entities]
    if as_json:
        print(json.dumps(paths, indent=2, ensure_ascii=False))
        return
    for path in paths:
        print(path)


def _handle_compare(args: argparse.Namespace) -> int:
    results = compare(args.left, args.right, args.output, args.by)
    _print_entities(results, args.json)
    return 0


def _handle_search(args: argparse.Namespace) -> int:
    results = search(args.root, args.key, args.mode)
    _print_entities(results, args.json)
    return 0


def _handle_rename(args: argparse.Namespace) -> int:
    entities = [DirectoryEntity(path) for path in args.directories]
    try:
        rename_all(
            entities,
            args.strategy,
            separator=args.separator,
            pattern=args.pattern,
            start_from=args.start_from,
            replace_with=args.replace_with,
            new_name=args.new_name,
            ignore_case=not args.case_sensitive,
        )
    finally:
        # Earlier renames stay committed when a later one fails.
        _print_entities(entities, args.json)
    return 0


def _handle_size(args: argparse.Namespace) -> int:
    print(total_size(args.path))
    return 0


def _print_event(event: ChangeEvent) -> None:
    print(json.dumps(event.to_dict(), ensure_ascii=False), flush=True)


def _handle_watch(args: argparse.Namespace) -> int:
    notifier = ChangeNotifier(args.path)
    notifier.subscribe(_print_event)
    stop = threading.Event()
    notifier.enable()
    try:
        stop.wait(args.duration)
    except KeyboardInterrupt:
        pass
    finally:
        notifier.disable()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
