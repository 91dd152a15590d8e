"""Fatal error kinds raised during a cleaning run."""

from __future__ import annotations

from pathlib import Path


class MapCleanerError(Exception):
    """Base class for errors that abort a run."""

    def messages(self) -> list[str]:
        """Return human-readable messages for console reporting."""
        return [str(self)]


class LayoutValidationError(MapCleanerError):
    """Raised when the project folder is missing required subfolders."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = list(errors)

    def messages(self) -> list[str]:
        return list(self.errors)


class MetaDecodeError(MapCleanerError):
    """Raised when a sidecar metadata document cannot yield a GUID."""

    def __init__(self, reason: str, path: Path | None = None) -> None:
        super().__init__(reason if path is None else f"{path}: {reason}")
        self.reason = reason
        self.path = path

    def with_path(self, path: Path) -> MetaDecodeError:
        """Return a copy of this error bound to the sidecar path."""
        return MetaDecodeError(reason=self.reason, path=path)


class SceneMapError(MapCleanerError):
    """Raised when the scene name-mapping document is malformed."""


class AssetReadError(MapCleanerError):
    """Raised when an asset or sidecar file cannot be read."""

    def __init__(self, path: Path, cause: OSError) -> None:
        super().__init__(f"Failed to read {path}: {cause.strerror or cause}")
        self.path = path


class SweepIOError(MapCleanerError):
    """Raised when a delete or scrub operation fails."""

    def __init__(self, action: str, path: Path, cause: OSError) -> None:
        super().__init__(f"Failed to {action} {path}: {cause.strerror or cause}")
        self.action = action
        self.path = path
