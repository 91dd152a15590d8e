"""Command-line entrypoint."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import TextIO

from map_cleaner.cleaner import create_cleaner
from map_cleaner.config import LAYOUT_NAMES, CliOverrides
from map_cleaner.errors import LayoutValidationError, MapCleanerError
from map_cleaner.logging import ProgressReporter


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for a cleaning run."""
    parser = argparse.ArgumentParser(
        prog="map-cleaner",
        description=(
            "Delete every asset not referenced from the project's scenes, "
            "then empty all script sources."
        ),
    )
    parser.add_argument("project_root", help="Path to the exported project.")
    parser.add_argument("--layout", choices=LAYOUT_NAMES, required=False, default=None)
    parser.add_argument(
        "--maps-json",
        required=False,
        default=None,
        help="Map-name document used to rename scenes before cleaning.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=None,
        help="Report what would be renamed, deleted and cleared without touching files.",
    )
    parser.add_argument("--audit-log", required=False, default=None)
    parser.add_argument("--workers", type=int, required=False, default=None)
    parser.add_argument("--quiet", action="store_true", default=False)
    return parser


def main(argv: list[str] | None = None, out_stream: TextIO | None = None) -> int:
    """Entrypoint for the map cleaner process."""
    stream = out_stream if out_stream is not None else sys.stdout
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    overrides = CliOverrides(
        layout=args.layout,
        maps_json=Path(args.maps_json) if args.maps_json is not None else None,
        dry_run=args.dry_run,
        audit_log=Path(args.audit_log) if args.audit_log is not None else None,
        workers=args.workers,
    )
    progress = ProgressReporter(stream=stream, quiet=args.quiet)
    try:
        cleaner = create_cleaner(args.project_root, cli_overrides=overrides, progress=progress)
        result = cleaner.run()
    except LayoutValidationError as error:
        _write_errors(stream, error.messages())
        return 1
    except MapCleanerError as error:
        _write_errors(stream, ["Cleaning aborted:", *error.messages()])
        return 1
    except ValueError as error:
        _write_errors(stream, [str(error)])
        return 1
    summary = result.to_summary_dict()
    stream.write(
        f"Done: kept {summary['reachable_files']} referenced assets, "
        f"deleted {summary['deleted_files']} files, "
        f"cleared {summary['scrubbed_scripts']} scripts\n"
    )
    stream.flush()
    return 0


def _write_errors(stream: TextIO, messages: list[str]) -> None:
    for message in messages:
        stream.write(f"{message}\n")
    stream.flush()


if __name__ == "__main__":
    raise SystemExit(main())
