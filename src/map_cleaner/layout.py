"""Supported project layouts and folder validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from map_cleaner.config import LayoutConfig


@dataclass(slots=True, frozen=True)
class LayoutSpec:
    """Describes where a layout keeps its asset tree relative to the project root."""

    name: str
    asset_root_parts: tuple[str, ...]
    required_dirs: tuple[tuple[str, ...], ...]


@dataclass(slots=True, frozen=True)
class ProjectLayout:
    """A layout resolved against a concrete project root."""

    name: str
    project_root: Path
    asset_root: Path
    required_dirs: tuple[Path, ...]
    scenes_dir: Path

    def relative(self, path: Path) -> str:
        """Return a path relative to the asset root in POSIX form."""
        return path.relative_to(self.asset_root).as_posix()


PROJECT_LAYOUT = LayoutSpec(
    name="project",
    asset_root_parts=("Assets",),
    required_dirs=(("Assets",), ("ProjectSettings",)),
)
EXPORT_LAYOUT = LayoutSpec(
    name="export",
    asset_root_parts=("ExportedProject", "Assets"),
    required_dirs=(("ExportedProject", "Assets"), ("ExportedProject", "ProjectSettings")),
)
LAYOUT_SPECS: dict[str, LayoutSpec] = {
    PROJECT_LAYOUT.name: PROJECT_LAYOUT,
    EXPORT_LAYOUT.name: EXPORT_LAYOUT,
}


def detect_layout_name(project_root: Path) -> str:
    """Pick the project layout when assets sit at the root, otherwise the export layout."""
    if project_root.joinpath(*PROJECT_LAYOUT.asset_root_parts).is_dir():
        return PROJECT_LAYOUT.name
    if project_root.joinpath(*EXPORT_LAYOUT.asset_root_parts).is_dir():
        return EXPORT_LAYOUT.name
    return PROJECT_LAYOUT.name


def resolve_layout(project_root: Path, config: LayoutConfig) -> ProjectLayout:
    """Resolve the configured layout against the project root."""
    root = project_root.resolve()
    name = config.name
    if name == "auto":
        name = detect_layout_name(root)
    spec = LAYOUT_SPECS.get(name)
    if spec is None:
        raise ValueError(f"Unknown project layout: {name}")
    asset_root = root.joinpath(*spec.asset_root_parts)
    return ProjectLayout(
        name=spec.name,
        project_root=root,
        asset_root=asset_root,
        required_dirs=tuple(root.joinpath(*parts) for parts in spec.required_dirs),
        scenes_dir=asset_root / config.scenes_dir,
    )


def validate_layout(layout: ProjectLayout) -> list[str]:
    """Return validation errors for the first missing required folder.

    The scenes folder is checked last: without entry points every asset would
    be unreachable.
    """
    for required in (*layout.required_dirs, layout.scenes_dir):
        if required.is_dir():
            continue
        relative = required.relative_to(layout.project_root).as_posix()
        return [f"Invalid project folder, missing `{relative}`"]
    return []
