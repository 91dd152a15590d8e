"""Retention rules applied by the delete pass."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from map_cleaner.config import DEFAULT_EXCLUDED_KEYWORD, DEFAULT_META_SUFFIX
from map_cleaner.index.discovery import strip_suffix


@dataclass(slots=True, frozen=True)
class RetentionPolicy:
    """Decides which files under the asset root survive the delete pass.

    Exclusion is a case-insensitive substring match against the path below
    the asset root, so any file whose relative path contains the keyword is
    kept, not only files inside a folder of that name.
    """

    reachable: frozenset[Path]
    excluded_keyword: str = DEFAULT_EXCLUDED_KEYWORD
    meta_suffix: str = DEFAULT_META_SUFFIX
    asset_root: Path | None = None

    def is_excluded(self, path: Path) -> bool:
        return _contains_keyword(path, self.excluded_keyword, self.asset_root)

    def content_path(self, path: Path) -> Path:
        """Map a sidecar to its content file; other paths map to themselves."""
        return strip_suffix(path, self.meta_suffix)

    def is_retained(self, path: Path) -> bool:
        return self.content_path(path) in self.reachable

    def should_delete(self, path: Path) -> bool:
        if self.is_excluded(path):
            return False
        return not self.is_retained(path)


def referenced_scripts(
    reachable: Iterable[Path], asset_root: Path, excluded_keyword: str = DEFAULT_EXCLUDED_KEYWORD
) -> list[str]:
    """List reachable assets under the excluded subtree, relative to the asset root."""
    output: list[str] = []
    for path in reachable:
        if not _contains_keyword(path, excluded_keyword, asset_root):
            continue
        if path.is_relative_to(asset_root):
            output.append(path.relative_to(asset_root).as_posix())
        else:
            output.append(path.as_posix())
    return sorted(output)


def _contains_keyword(path: Path, keyword: str, asset_root: Path | None) -> bool:
    candidate = path
    if asset_root is not None and path.is_relative_to(asset_root):
        candidate = path.relative_to(asset_root)
    return keyword.lower() in candidate.as_posix().lower()
