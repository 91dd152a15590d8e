"""Run orchestration: validate, index, traverse, sweep."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from map_cleaner.config import CleanerConfig, CliOverrides, load_effective_config
from map_cleaner.errors import LayoutValidationError
from map_cleaner.graph import ReachabilityResult, compute_reachable, seed_entry_points
from map_cleaner.index import GuidIndex, build_guid_index
from map_cleaner.layout import ProjectLayout, resolve_layout, validate_layout
from map_cleaner.logging import JsonlRunLogger, ProgressReporter
from map_cleaner.scenes import SceneRename, load_scene_name_map, rename_scenes
from map_cleaner.sweep import (
    RetentionPolicy,
    SweepReport,
    delete_unreachable,
    referenced_scripts,
    scrub_scripts,
)


@dataclass(slots=True, frozen=True)
class CleanResult:
    """Summary of one completed cleaning run."""

    layout: ProjectLayout
    renamed: tuple[SceneRename, ...]
    index: GuidIndex
    reachability: ReachabilityResult
    deleted: SweepReport
    referenced_scripts: tuple[str, ...]
    scrubbed: SweepReport
    dry_run: bool

    def to_summary_dict(self) -> dict[str, object]:
        """Return a serializable run summary."""
        return {
            "layout": self.layout.name,
            "asset_root": str(self.layout.asset_root),
            "renamed_scenes": len(self.renamed),
            "meta_files": self.index.meta_file_count,
            "indexed_guids": len(self.index),
            "duplicate_guids": len(self.index.duplicates),
            "skipped_meta_files": len(self.index.skipped),
            "entry_points": len(self.reachability.entry_points),
            "reachable_files": len(self.reachability.reachable),
            "visited_files": self.reachability.visited_count,
            "unresolved_references": self.reachability.unresolved_count,
            "deleted_files": self.deleted.affected_count,
            "referenced_scripts": len(self.referenced_scripts),
            "scrubbed_scripts": self.scrubbed.affected_count,
            "dry_run": self.dry_run,
        }


class MapCleaner:
    """Prunes an exported project down to the assets its scenes reference."""

    def __init__(
        self,
        config: CleanerConfig,
        progress: ProgressReporter | None = None,
        audit: JsonlRunLogger | None = None,
    ) -> None:
        self._config = config
        self._layout = resolve_layout(config.project_root, config.layout)
        self._progress = progress or ProgressReporter()
        self._audit = audit
        audit_log = config.audit_log
        if audit_log is not None and audit_log.is_relative_to(self._layout.asset_root):
            raise ValueError("Audit log must live outside the asset root it is sweeping.")
        if self._audit is None and config.audit_log is not None:
            self._audit = JsonlRunLogger(config.audit_log)

    @property
    def config(self) -> CleanerConfig:
        return self._config

    @property
    def layout(self) -> ProjectLayout:
        return self._layout

    def validate(self) -> list[str]:
        """Return human-readable layout errors; empty when the project can be cleaned."""
        return validate_layout(self._layout)

    def run(self) -> CleanResult:
        """Execute every pass in order; any error aborts the remaining passes."""
        errors = self.validate()
        if errors:
            raise LayoutValidationError(errors)

        config = self._config
        layout = self._layout
        dry_run = config.dry_run
        self._record("run_start", metadata={"config": config.to_public_dict()})
        if dry_run:
            self._progress.line("Dry run: no files will be modified")

        renamed = self._rename_scenes()
        index = build_guid_index(
            layout.asset_root,
            meta_suffix=config.index.meta_suffix,
            workers=config.index.workers,
            skip_decode_errors=config.index.on_decode_error == "skip",
            progress=self._progress,
        )
        for skipped in index.skipped:
            self._record(
                "skip_meta",
                path=_relative(layout, skipped.path),
                metadata={"reason": skipped.reason},
            )

        entry_points = seed_entry_points(layout.scenes_dir, config.scan.scene_glob)
        reachability = compute_reachable(entry_points, index, progress=self._progress)

        policy = RetentionPolicy(
            reachable=reachability.reachable,
            excluded_keyword=config.sweep.excluded_keyword,
            meta_suffix=config.index.meta_suffix,
            asset_root=layout.asset_root,
        )
        deleted = delete_unreachable(
            layout.asset_root,
            policy,
            dry_run=dry_run,
            audit=self._audit,
            progress=self._progress,
        )

        scripts = tuple(
            referenced_scripts(
                reachability.reachable, layout.asset_root, config.sweep.excluded_keyword
            )
        )
        self._progress.line("Map used the following scripts:")
        for script in scripts:
            self._progress.line(f"  {script}")

        include = policy.is_excluded if config.sweep.scrub_scope == "scripts" else None
        scrubbed = scrub_scripts(
            layout.asset_root,
            extensions=config.sweep.script_extensions,
            include=include,
            dry_run=dry_run,
            audit=self._audit,
            progress=self._progress,
        )

        result = CleanResult(
            layout=layout,
            renamed=tuple(renamed),
            index=index,
            reachability=reachability,
            deleted=deleted,
            referenced_scripts=scripts,
            scrubbed=scrubbed,
            dry_run=dry_run,
        )
        self._record("summary", metadata=result.to_summary_dict())
        return result

    def _rename_scenes(self) -> list[SceneRename]:
        maps_json = self._config.maps_json
        if maps_json is None:
            return []
        name_map = load_scene_name_map(maps_json)
        renamed = rename_scenes(
            self._layout.scenes_dir,
            name_map,
            meta_suffix=self._config.index.meta_suffix,
            dry_run=self._config.dry_run,
        )
        verb = "Would rename" if self._config.dry_run else "Renamed"
        for item in renamed:
            self._progress.line(f"{verb} scene {item.source.name} -> {item.target.name}")
            self._record(
                "rename",
                path=_relative(self._layout, item.source),
                metadata={"target": item.target.name, "dry_run": self._config.dry_run},
            )
        return renamed

    def _record(
        self, action: str, path: str | None = None, metadata: dict[str, object] | None = None
    ) -> None:
        if self._audit is not None:
            self._audit.record(action, path=path, metadata=metadata)


def create_cleaner(
    project_root: str | Path,
    cli_overrides: CliOverrides | None = None,
    progress: ProgressReporter | None = None,
) -> MapCleaner:
    """Create a configured cleaner for a project root."""
    config = load_effective_config(Path(project_root), overrides=cli_overrides)
    return MapCleaner(config=config, progress=progress)


def _relative(layout: ProjectLayout, path: Path | None) -> str | None:
    if path is None:
        return None
    if path.is_relative_to(layout.asset_root):
        return path.relative_to(layout.asset_root).as_posix()
    return path.as_posix()
