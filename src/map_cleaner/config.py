"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

CONFIG_FILE_NAME = "map_cleaner.toml"
MAX_INDEX_WORKERS_CAP = 64

LAYOUT_NAMES = ("auto", "project", "export")
DECODE_ERROR_POLICIES = ("fail", "skip")
SCRUB_SCOPES = ("scripts", "assets")

DEFAULT_META_SUFFIX = ".meta"
DEFAULT_SCENE_GLOB = "*.unity"
DEFAULT_EXCLUDED_KEYWORD = "scripts"
DEFAULT_SCRIPT_EXTENSIONS = (".cs",)


@dataclass(slots=True, frozen=True)
class LayoutConfig:
    """Which project layout to resolve and where its scenes live."""

    name: str
    scenes_dir: str


@dataclass(slots=True, frozen=True)
class IndexConfig:
    """GUID index build settings."""

    meta_suffix: str
    workers: int
    on_decode_error: str


@dataclass(slots=True, frozen=True)
class ScanConfig:
    """Entry-point selection settings."""

    scene_glob: str


@dataclass(slots=True, frozen=True)
class SweepConfig:
    """Delete and scrub pass settings."""

    excluded_keyword: str
    script_extensions: tuple[str, ...]
    scrub_scope: str


@dataclass(slots=True, frozen=True)
class CleanerConfig:
    """Fully merged cleaner configuration."""

    project_root: Path
    layout: LayoutConfig
    index: IndexConfig
    scan: ScanConfig
    sweep: SweepConfig
    maps_json: Path | None = None
    dry_run: bool = False
    audit_log: Path | None = None

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot for run logs."""
        return {
            "project_root": str(self.project_root),
            "layout": {
                "name": self.layout.name,
                "scenes_dir": self.layout.scenes_dir,
            },
            "index": {
                "meta_suffix": self.index.meta_suffix,
                "workers": self.index.workers,
                "on_decode_error": self.index.on_decode_error,
            },
            "scan": {"scene_glob": self.scan.scene_glob},
            "sweep": {
                "excluded_keyword": self.sweep.excluded_keyword,
                "script_extensions": list(self.sweep.script_extensions),
                "scrub_scope": self.sweep.scrub_scope,
            },
            "maps_json": str(self.maps_json) if self.maps_json is not None else None,
            "dry_run": self.dry_run,
            "audit_log": str(self.audit_log) if self.audit_log is not None else None,
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    layout: str | None = None
    maps_json: Path | None = None
    dry_run: bool | None = None
    audit_log: Path | None = None
    workers: int | None = None


def default_config(project_root: Path) -> CleanerConfig:
    """Build default config for a given project root."""
    return CleanerConfig(
        project_root=project_root.resolve(),
        layout=LayoutConfig(name="auto", scenes_dir="Scenes"),
        index=IndexConfig(meta_suffix=DEFAULT_META_SUFFIX, workers=1, on_decode_error="fail"),
        scan=ScanConfig(scene_glob=DEFAULT_SCENE_GLOB),
        sweep=SweepConfig(
            excluded_keyword=DEFAULT_EXCLUDED_KEYWORD,
            script_extensions=DEFAULT_SCRIPT_EXTENSIONS,
            scrub_scope="assets",
        ),
    )


def load_project_config_file(project_root: Path) -> dict[str, object]:
    """Load optional map_cleaner.toml from the project root."""
    config_path = project_root / CONFIG_FILE_NAME
    if not config_path.is_file():
        return {}
    with config_path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{CONFIG_FILE_NAME} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _tuple_of_strings(value: object, section: str, field: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ValueError(f"Config field '{section}.{field}' must be a list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"Config field '{section}.{field}' must contain only strings.")
        output.append(item)
    return tuple(output)


def _optional_string(value: object, name: str, default: str) -> str:
    if value is None:
        return default
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Config field '{name}' must be a non-empty string.")
    return value


def _optional_choice(value: object, name: str, default: str, choices: tuple[str, ...]) -> str:
    chosen = _optional_string(value, name, default)
    if chosen not in choices:
        raise ValueError(f"Config field '{name}' must be one of: {', '.join(choices)}.")
    return chosen


def _optional_positive_int_with_cap(
    value: object,
    name: str,
    default: int,
    cap: int | None,
) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"Config field '{name}' must be a positive integer.")
    if cap is not None and value > cap:
        raise ValueError(f"Config field '{name}' must be <= {cap}.")
    return value


def merge_config(
    base: CleanerConfig, project_payload: dict[str, object], overrides: CliOverrides
) -> CleanerConfig:
    """Merge defaults, project config, then CLI overrides."""
    layout_payload = _get_table(project_payload, "layout")
    index_payload = _get_table(project_payload, "index")
    scan_payload = _get_table(project_payload, "scan")
    sweep_payload = _get_table(project_payload, "sweep")

    layout = LayoutConfig(
        name=_optional_choice(
            layout_payload.get("name"), "layout.name", base.layout.name, LAYOUT_NAMES
        ),
        scenes_dir=_optional_string(
            layout_payload.get("scenes_dir"), "layout.scenes_dir", base.layout.scenes_dir
        ),
    )

    meta_suffix = _optional_string(
        index_payload.get("meta_suffix"), "index.meta_suffix", base.index.meta_suffix
    )
    if not meta_suffix.startswith("."):
        raise ValueError("Config field 'index.meta_suffix' must start with '.'.")
    index = IndexConfig(
        meta_suffix=meta_suffix,
        workers=_optional_positive_int_with_cap(
            index_payload.get("workers"), "index.workers", base.index.workers, MAX_INDEX_WORKERS_CAP
        ),
        on_decode_error=_optional_choice(
            index_payload.get("on_decode_error"),
            "index.on_decode_error",
            base.index.on_decode_error,
            DECODE_ERROR_POLICIES,
        ),
    )

    scan = ScanConfig(
        scene_glob=_optional_string(
            scan_payload.get("scene_glob"), "scan.scene_glob", base.scan.scene_glob
        )
    )

    script_extensions = base.sweep.script_extensions
    if "script_extensions" in sweep_payload:
        script_extensions = tuple(
            item.lower()
            for item in _tuple_of_strings(
                sweep_payload["script_extensions"], "sweep", "script_extensions"
            )
        )
    sweep = SweepConfig(
        excluded_keyword=_optional_string(
            sweep_payload.get("excluded_keyword"),
            "sweep.excluded_keyword",
            base.sweep.excluded_keyword,
        ),
        script_extensions=script_extensions,
        scrub_scope=_optional_choice(
            sweep_payload.get("scrub_scope"),
            "sweep.scrub_scope",
            base.sweep.scrub_scope,
            SCRUB_SCOPES,
        ),
    )

    merged = CleanerConfig(
        project_root=base.project_root,
        layout=layout,
        index=index,
        scan=scan,
        sweep=sweep,
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: CleanerConfig, overrides: CliOverrides) -> CleanerConfig:
    """Apply startup overrides at highest precedence."""
    layout = config.layout
    if overrides.layout is not None:
        layout = LayoutConfig(
            name=_optional_choice(overrides.layout, "overrides.layout", layout.name, LAYOUT_NAMES),
            scenes_dir=layout.scenes_dir,
        )
    index = IndexConfig(
        meta_suffix=config.index.meta_suffix,
        workers=_optional_positive_int_with_cap(
            overrides.workers, "overrides.workers", config.index.workers, MAX_INDEX_WORKERS_CAP
        ),
        on_decode_error=config.index.on_decode_error,
    )
    maps_json = overrides.maps_json or config.maps_json
    audit_log = overrides.audit_log or config.audit_log
    return CleanerConfig(
        project_root=config.project_root,
        layout=layout,
        index=index,
        scan=config.scan,
        sweep=config.sweep,
        maps_json=maps_json.resolve() if maps_json is not None else None,
        dry_run=overrides.dry_run if overrides.dry_run is not None else config.dry_run,
        audit_log=audit_log.resolve() if audit_log is not None else None,
    )


def load_effective_config(
    project_root: Path, overrides: CliOverrides | None = None
) -> CleanerConfig:
    """Load effective config using merge order defaults -> project config -> overrides."""
    resolved_root = project_root.resolve()
    base = default_config(resolved_root)
    payload = load_project_config_file(resolved_root)
    return merge_config(base, payload, overrides or CliOverrides())
