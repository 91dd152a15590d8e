"""Mark phase: transitive reachability over the asset reference graph."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from map_cleaner.config import DEFAULT_SCENE_GLOB
from map_cleaner.errors import AssetReadError
from map_cleaner.graph.references import scan_file
from map_cleaner.logging import ProgressReporter

ReferenceReader = Callable[[Path], frozenset[str]]


class GuidLookup(Protocol):
    """Anything that can resolve a GUID to an asset path."""

    def lookup(self, guid: str) -> Path | None: ...


@dataclass(slots=True, frozen=True)
class ReachabilityResult:
    """Outcome of one traversal; `reachable` is the retention allow-list."""

    reachable: frozenset[Path]
    entry_points: tuple[Path, ...]
    visited_count: int
    unresolved_count: int


@dataclass(slots=True)
class TraversalContext:
    """Mutable traversal state owned by a single traversal."""

    frontier: set[Path] = field(default_factory=set)
    visited: set[Path] = field(default_factory=set)
    reachable: set[Path] = field(default_factory=set)
    unresolved_count: int = 0

    @classmethod
    def seeded(cls, entry_points: Iterable[Path]) -> TraversalContext:
        seeds = set(entry_points)
        return cls(frontier=set(seeds), reachable=set(seeds))

    @property
    def done(self) -> bool:
        return not self.frontier

    def step(self, index: GuidLookup, reader: ReferenceReader) -> Path:
        """Scan one frontier path, queue its unvisited referents, and mark it visited."""
        current = self.frontier.pop()
        try:
            references = reader(current)
        except OSError as error:
            raise AssetReadError(current, error) from error
        for guid in references:
            target = index.lookup(guid)
            if target is None:
                self.unresolved_count += 1
                continue
            if target in self.visited:
                continue
            self.frontier.add(target)
            self.reachable.add(target)
        self.visited.add(current)
        self.frontier.discard(current)
        return current


def seed_entry_points(scenes_dir: Path, scene_glob: str = DEFAULT_SCENE_GLOB) -> tuple[Path, ...]:
    """Return scene files directly inside the scenes folder, sorted."""
    return tuple(sorted(path for path in scenes_dir.glob(scene_glob) if path.is_file()))


def compute_reachable(
    entry_points: Iterable[Path],
    index: GuidLookup,
    *,
    reader: ReferenceReader = scan_file,
    progress: ProgressReporter | None = None,
) -> ReachabilityResult:
    """Drain the frontier from the entry points and return every reachable asset."""
    reporter = progress or ProgressReporter.silent()
    seeds = tuple(entry_points)
    context = TraversalContext.seeded(seeds)
    reporter.line("Processing files...")
    while not context.done:
        context.step(index, reader)
        reporter.tick(len(context.visited))
    reporter.line(f"Processed {len(context.visited)} files")
    return ReachabilityResult(
        reachable=frozenset(context.reachable),
        entry_points=seeds,
        visited_count=len(context.visited),
        unresolved_count=context.unresolved_count,
    )
