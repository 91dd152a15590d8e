"""GUID -> asset path index built from sidecar metadata files."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from map_cleaner.config import DEFAULT_META_SUFFIX
from map_cleaner.errors import AssetReadError, MetaDecodeError
from map_cleaner.index.discovery import discover_files, strip_suffix
from map_cleaner.index.meta import read_meta_guid
from map_cleaner.logging import ProgressReporter


@dataclass(slots=True, frozen=True)
class GuidIndex(Mapping[str, Path]):
    """Read-only mapping of GUID to the asset path owning it.

    Duplicate GUIDs are last-write-wins in sorted sidecar order; overwritten
    GUIDs are listed in ``duplicates``.
    """

    _entries: dict[str, Path] = field(default_factory=dict)
    duplicates: tuple[str, ...] = ()
    skipped: tuple[MetaDecodeError, ...] = ()
    meta_file_count: int = 0

    def lookup(self, guid: str) -> Path | None:
        """Return the asset path for a GUID, or None for GUIDs outside the project."""
        return self._entries.get(guid)

    def __getitem__(self, guid: str) -> Path:
        return self._entries[guid]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    @classmethod
    def from_pairs(
        cls,
        pairs: list[tuple[str, Path]],
        skipped: tuple[MetaDecodeError, ...] = (),
        meta_file_count: int | None = None,
    ) -> GuidIndex:
        """Build an index from (guid, path) pairs applied in order."""
        entries: dict[str, Path] = {}
        duplicates: list[str] = []
        for guid, path in pairs:
            if guid in entries:
                duplicates.append(guid)
            entries[guid] = path
        return cls(
            _entries=entries,
            duplicates=tuple(sorted(set(duplicates))),
            skipped=skipped,
            meta_file_count=len(pairs) if meta_file_count is None else meta_file_count,
        )


@dataclass(slots=True, frozen=True)
class _DecodeOutcome:
    meta_path: Path
    guid: str | None
    error: MetaDecodeError | None


def build_guid_index(
    asset_root: Path,
    *,
    meta_suffix: str = DEFAULT_META_SUFFIX,
    workers: int = 1,
    skip_decode_errors: bool = False,
    progress: ProgressReporter | None = None,
) -> GuidIndex:
    """Decode every sidecar under asset_root into a GUID index.

    A sidecar that cannot be decoded aborts the build unless
    ``skip_decode_errors`` is set, in which case it is reported and left out.
    """
    reporter = progress or ProgressReporter.silent()
    try:
        meta_files = discover_files(asset_root, suffixes=(meta_suffix,)).files
    except OSError as error:
        raise AssetReadError(asset_root, error) from error
    reporter.line(f"Processing {len(meta_files)} meta files...")

    outcomes: list[_DecodeOutcome] = []
    if workers > 1 and len(meta_files) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            for position, outcome in enumerate(pool.map(_decode_one, meta_files)):
                reporter.tick(position)
                outcomes.append(outcome)
    else:
        for position, meta_path in enumerate(meta_files):
            reporter.tick(position)
            outcomes.append(_decode_one(meta_path))

    pairs: list[tuple[str, Path]] = []
    skipped: list[MetaDecodeError] = []
    for outcome in outcomes:
        if outcome.guid is None:
            error = outcome.error or MetaDecodeError(
                reason="No GUID decoded.", path=outcome.meta_path
            )
            if not skip_decode_errors:
                raise error
            skipped.append(error)
            reporter.line(f"Skipping unreadable metadata: {error}")
            continue
        pairs.append((outcome.guid, strip_suffix(outcome.meta_path, meta_suffix)))

    index = GuidIndex.from_pairs(
        pairs, skipped=tuple(skipped), meta_file_count=len(meta_files)
    )
    reporter.line("Done processing meta files")
    return index


def _decode_one(meta_path: Path) -> _DecodeOutcome:
    try:
        guid = read_meta_guid(meta_path)
    except OSError as error:
        raise AssetReadError(meta_path, error) from error
    except MetaDecodeError as error:
        return _DecodeOutcome(meta_path=meta_path, guid=None, error=error)
    return _DecodeOutcome(meta_path=meta_path, guid=guid, error=None)
