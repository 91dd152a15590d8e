"""Scene renaming driven by an external map-name document."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from map_cleaner.config import DEFAULT_META_SUFFIX
from map_cleaner.errors import SceneMapError, SweepIOError
from map_cleaner.index.discovery import strip_suffix

SCENE_EXTENSION = ".unity"


@dataclass(slots=True, frozen=True)
class SceneRename:
    """One planned scene or sidecar rename."""

    source: Path
    target: Path


def load_scene_name_map(path: Path) -> dict[str, str]:
    """Parse a maps.json document into {"<level>.unity": "<SceneFile>.unity"}.

    The document maps each map name to an object of level keys whose values
    are scene paths; only the final path segment of each value is used.
    """
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as error:
        raise SceneMapError(f"{path}: invalid JSON ({error.msg} at line {error.lineno})") from error
    except OSError as error:
        raise SceneMapError(f"{path}: {error.strerror or error}") from error
    if not isinstance(payload, dict):
        raise SceneMapError(f"{path}: top-level value must be an object.")

    names: dict[str, str] = {}
    for map_name in sorted(payload):
        levels = payload[map_name]
        if not isinstance(levels, dict):
            raise SceneMapError(f"{path}: entry '{map_name}' must be an object.")
        for level_key in sorted(levels):
            scene_path = levels[level_key]
            if not isinstance(scene_path, str):
                raise SceneMapError(f"{path}: value '{map_name}.{level_key}' must be a string.")
            scene_name = scene_path.rsplit("/", 1)[-1]
            if not scene_name:
                continue
            names[f"{level_key}{SCENE_EXTENSION}"] = scene_name
    return names


def plan_scene_renames(
    scenes_dir: Path, name_map: dict[str, str], meta_suffix: str = DEFAULT_META_SUFFIX
) -> list[SceneRename]:
    """Match files directly inside scenes_dir against the name map."""
    if not name_map or not scenes_dir.is_dir():
        return []
    planned: list[SceneRename] = []
    for path in sorted(scenes_dir.iterdir()):
        if not path.is_file():
            continue
        lookup = strip_suffix(path, meta_suffix).name
        new_name = name_map.get(lookup)
        if new_name is None or new_name == lookup:
            continue
        suffix = path.name[len(lookup) :]
        planned.append(SceneRename(source=path, target=path.with_name(f"{new_name}{suffix}")))
    return planned


def rename_scenes(
    scenes_dir: Path,
    name_map: dict[str, str],
    *,
    meta_suffix: str = DEFAULT_META_SUFFIX,
    dry_run: bool = False,
) -> list[SceneRename]:
    """Rename mapped scenes and their sidecars in place; return what was renamed."""
    planned = plan_scene_renames(scenes_dir, name_map, meta_suffix=meta_suffix)
    claimed: dict[Path, Path] = {}
    for item in planned:
        earlier = claimed.setdefault(item.target, item.source)
        if earlier != item.source:
            raise SceneMapError(
                f"Cannot rename {item.source.name} to {item.target.name}: "
                f"{earlier.name} is renamed to the same name."
            )
        if item.target.exists():
            raise SceneMapError(
                f"Cannot rename {item.source.name} to {item.target.name}: target already exists."
            )
    if dry_run:
        return planned
    for item in planned:
        try:
            item.source.rename(item.target)
        except OSError as error:
            raise SweepIOError("rename", item.source, error) from error
    return planned
