"""Deterministic asset-tree enumeration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True, frozen=True)
class DiscoveryResult:
    """Files found under a root plus deterministic scan counters."""

    files: tuple[Path, ...]
    total_candidates: int
    excluded_by_suffix: int


def has_suffix(path: Path | str, suffixes: tuple[str, ...]) -> bool:
    """Return True when the file name ends with one of the suffixes, ignoring case."""
    name = Path(path).name.lower()
    return any(name.endswith(suffix.lower()) for suffix in suffixes)


def discover_files(
    root: Path,
    suffixes: tuple[str, ...] | None = None,
    *,
    include_symlinks: bool = False,
) -> DiscoveryResult:
    """Walk a tree and return its regular files sorted by relative path parts.

    Symlinks are never followed. With ``include_symlinks`` the links
    themselves are reported alongside regular files. Directory read failures
    propagate as OSError.
    """
    files: list[Path] = []
    total_candidates = 0
    excluded_by_suffix = 0
    stack: list[Path] = [root]
    while stack:
        current = stack.pop()
        with os.scandir(current) as entries:
            ordered_entries = sorted(entries, key=lambda item: item.name)
        directories: list[Path] = []
        for entry in ordered_entries:
            full_path = Path(entry.path)
            if entry.is_dir(follow_symlinks=False):
                directories.append(full_path)
                continue
            if entry.is_symlink():
                if not include_symlinks:
                    continue
            elif not entry.is_file(follow_symlinks=False):
                continue
            total_candidates += 1
            if suffixes is not None and not has_suffix(entry.name, suffixes):
                excluded_by_suffix += 1
                continue
            files.append(full_path)
        stack.extend(directories)
    files.sort(key=lambda item: item.relative_to(root).parts)
    return DiscoveryResult(
        files=tuple(files),
        total_candidates=total_candidates,
        excluded_by_suffix=excluded_by_suffix,
    )


def strip_suffix(path: Path, suffix: str) -> Path:
    """Return the content-file path for a sidecar path, or the path unchanged."""
    name = path.name
    if len(name) > len(suffix) and name.lower().endswith(suffix.lower()):
        return path.with_name(name[: -len(suffix)])
    return path
