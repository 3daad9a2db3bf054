"""Command line interface for ziphandle."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Sequence

from ziphandle import config_utils
from ziphandle.archive import ArchiveHandle
from ziphandle.errors import ZipperError

log = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

SETTINGS = ("log_level", "log_file")

# Handlers installed by configure_logging(), replaced on every call.
_installed_handlers: List[logging.Handler] = []


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create ZIP archives, append files to them and list their contents.")
    parser.add_argument(
        "--config",
        default=config_utils.CONFIG_FILE,
        help="JSON settings file. Defaults to ziphandle.json in the current directory.",
    )
    parser.add_argument("--log-level", help="Logging level, e.g. DEBUG or INFO. Overrides the settings file.")
    parser.add_argument("--log-file", help="Also append log records to this file. Overrides the settings file.")

    commands = parser.add_subparsers(dest="command", required=True)

    create = commands.add_parser("create", help="Create an empty archive.")
    create.add_argument("archive", help="Archive to create.")
    create.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Replace the archive with an empty one if it already exists.",
    )

    add = commands.add_parser("add", help="Append files to an existing archive.")
    add.add_argument("archive", help="Archive to append to.")
    add.add_argument("files", nargs="+", help="Files to add, in order.")

    listing = commands.add_parser("list", help="Print the file entries of an archive.")
    listing.add_argument("archive", help="Archive to read.")

    config = commands.add_parser("config", help="Show or change a value in the settings file.")
    config.add_argument("key", choices=SETTINGS, help="Setting to show or change.")
    config.add_argument("value", nargs="?", help="New value. Omit to print the current one.")

    return parser.parse_args(argv)


def configure_logging(level: str | None, log_file: str | None) -> None:
    """Attach console (and optionally file) handlers to the root logger.

    Handlers from a previous call are removed and closed first.
    """

    root = logging.getLogger()
    for handler in _installed_handlers:
        root.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    root.setLevel(getattr(logging, (level or "WARNING").upper(), logging.WARNING))

    formatter = logging.Formatter(LOG_FORMAT)
    _installed_handlers.append(logging.StreamHandler())
    if log_file:
        _installed_handlers.append(logging.FileHandler(log_file, mode="a"))
    for handler in _installed_handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)


def _run_config(args: argparse.Namespace) -> int:
    if args.value is None:
        value = config_utils.load_setting(args.key, path=args.config)
        print("" if value is None else value)
    else:
        config_utils.save_setting(args.key, args.value, path=args.config)
        print(f"Saved {args.key} = {args.value} to {args.config}")
    return 0


def _run(args: argparse.Namespace) -> int:
    if args.command == "config":
        return _run_config(args)

    handle = ArchiveHandle(Path(args.archive))

    if args.command == "create":
        handle.create(force=args.force)
        print(f"Archive ready at: {handle.path}")
    elif args.command == "add":
        with handle:
            for name in args.files:
                handle.add_file(Path(name))
                print(f"Added {name}")
    elif args.command == "list":
        for name in handle.get_file_list():
            print(name)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)

    configure_logging(
        args.log_level or config_utils.load_setting("log_level", path=args.config),
        args.log_file or config_utils.load_setting("log_file", path=args.config),
    )

    try:
        return _run(args)
    except (ZipperError, OSError) as exc:
        log.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
