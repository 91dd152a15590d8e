"""Containment checks for paths the sweep is about to mutate."""

from __future__ import annotations

from pathlib import Path

from map_cleaner.errors import MapCleanerError


class PathBlockedError(MapCleanerError):
    """Raised when a mutation target violates the asset-root sandbox."""

    def __init__(self, reason: str, hint: str) -> None:
        super().__init__(reason)
        self.reason = reason
        self.hint = hint

    def messages(self) -> list[str]:
        return [self.reason, self.hint]


def ensure_within_root(root: Path, candidate: Path, *, follow_symlinks: bool = True) -> Path:
    """Return the candidate unchanged when it lies strictly inside root.

    With ``follow_symlinks=False`` a symlink is judged by where the link
    itself lives, not by its target.
    """
    resolved_root = root.resolve()
    if not follow_symlinks and candidate.is_symlink():
        resolved = candidate.parent.resolve() / candidate.name
    else:
        resolved = candidate.resolve(strict=False)
    if resolved == resolved_root:
        raise PathBlockedError(
            reason=f"Refusing to mutate the asset root itself: {candidate}",
            hint="Only files below the asset root can be deleted or scrubbed.",
        )
    if not resolved.is_relative_to(resolved_root):
        raise PathBlockedError(
            reason=f"Path escapes the asset root: {candidate}",
            hint="Check for symlinks pointing outside the exported project.",
        )
    return candidate
