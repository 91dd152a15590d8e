"""Sweep phase: delete unreachable assets and scrub retained scripts."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from map_cleaner.config import DEFAULT_SCRIPT_EXTENSIONS
from map_cleaner.errors import AssetReadError, SweepIOError
from map_cleaner.index.discovery import discover_files
from map_cleaner.logging import JsonlRunLogger, ProgressReporter
from map_cleaner.security import ensure_within_root
from map_cleaner.sweep.policy import RetentionPolicy


@dataclass(slots=True, frozen=True)
class SweepReport:
    """Files examined and affected by one sweep pass."""

    examined: int
    affected: tuple[Path, ...]
    dry_run: bool

    @property
    def affected_count(self) -> int:
        return len(self.affected)


def delete_unreachable(
    asset_root: Path,
    policy: RetentionPolicy,
    *,
    dry_run: bool = False,
    audit: JsonlRunLogger | None = None,
    progress: ProgressReporter | None = None,
) -> SweepReport:
    """Delete every file under asset_root that the policy does not retain."""
    reporter = progress or ProgressReporter.silent()
    reporter.line("Deleting unreferenced files...")
    files = _enumerate(asset_root, suffixes=None, include_symlinks=True)
    deleted: list[Path] = []
    for path in files:
        if not policy.should_delete(path):
            continue
        ensure_within_root(asset_root, path, follow_symlinks=False)
        if not dry_run:
            try:
                path.unlink()
            except OSError as error:
                raise SweepIOError("delete", path, error) from error
        deleted.append(path)
        if audit is not None:
            audit.record(
                "delete",
                path=path.relative_to(asset_root).as_posix(),
                metadata={"dry_run": dry_run},
            )
    verb = "Would delete" if dry_run else "Deleted"
    reporter.line(f"{verb} {len(deleted)} files")
    return SweepReport(examined=len(files), affected=tuple(deleted), dry_run=dry_run)


def scrub_scripts(
    scrub_root: Path,
    *,
    extensions: tuple[str, ...] = DEFAULT_SCRIPT_EXTENSIONS,
    include: Callable[[Path], bool] | None = None,
    dry_run: bool = False,
    audit: JsonlRunLogger | None = None,
    progress: ProgressReporter | None = None,
) -> SweepReport:
    """Truncate script source files under scrub_root to zero bytes.

    Every file with a script extension is scrubbed, narrowed by ``include``
    when given, whether or not any scene references it. Symlinks are skipped
    so a write never lands outside scrub_root.
    """
    reporter = progress or ProgressReporter.silent()
    reporter.line("Clearing all scripts")
    if not scrub_root.is_dir():
        reporter.line("No scripts folder found")
        return SweepReport(examined=0, affected=(), dry_run=dry_run)
    files = _enumerate(scrub_root, suffixes=extensions)
    scrubbed: list[Path] = []
    for path in files:
        if include is not None and not include(path):
            continue
        ensure_within_root(scrub_root, path)
        if not dry_run:
            try:
                path.write_bytes(b"")
            except OSError as error:
                raise SweepIOError("scrub", path, error) from error
        scrubbed.append(path)
        if audit is not None:
            audit.record(
                "scrub",
                path=path.relative_to(scrub_root).as_posix(),
                metadata={"dry_run": dry_run},
            )
    verb = "Would clear" if dry_run else "Cleared"
    reporter.line(f"{verb} {len(scrubbed)} scripts")
    return SweepReport(examined=len(files), affected=tuple(scrubbed), dry_run=dry_run)


def _enumerate(
    root: Path, suffixes: tuple[str, ...] | None, include_symlinks: bool = False
) -> tuple[Path, ...]:
    try:
        return discover_files(root, suffixes=suffixes, include_symlinks=include_symlinks).files
    except OSError as error:
        raise AssetReadError(root, error) from error
