from __future__ import annotations

import os
from pathlib import Path

import pytest

from map_cleaner.security import PathBlockedError, ensure_within_root


def test_path_guard_accepts_paths_inside_root(tmp_path: Path) -> None:
    root = tmp_path / "Assets"
    root.mkdir()
    target = root / "Models" / "a.fbx"

    assert ensure_within_root(root, target) == target


def test_path_guard_blocks_paths_outside_root(tmp_path: Path) -> None:
    root = tmp_path / "Assets"
    root.mkdir()

    with pytest.raises(PathBlockedError, match="escapes the asset root") as excinfo:
        ensure_within_root(root, tmp_path / "elsewhere.txt")

    assert excinfo.value.hint
    assert excinfo.value.messages() == [excinfo.value.reason, excinfo.value.hint]


def test_path_guard_blocks_the_root_itself(tmp_path: Path) -> None:
    root = tmp_path / "Assets"
    root.mkdir()

    with pytest.raises(PathBlockedError, match="asset root itself"):
        ensure_within_root(root, root / "Models" / "..")


@pytest.mark.skipif(os.name == "nt", reason="symlink creation needs privileges on Windows")
def test_path_guard_blocks_symlink_escaping_root(tmp_path: Path) -> None:
    root = tmp_path / "Assets"
    root.mkdir()
    outside = tmp_path / "outside.txt"
    outside.write_text("keep", encoding="utf-8")
    link = root / "link.txt"
    link.symlink_to(outside)

    with pytest.raises(PathBlockedError):
        ensure_within_root(root, link)


@pytest.mark.skipif(os.name == "nt", reason="symlink creation needs privileges on Windows")
def test_path_guard_judges_unfollowed_symlink_by_its_location(tmp_path: Path) -> None:
    root = tmp_path / "Assets"
    root.mkdir()
    outside = tmp_path / "outside.txt"
    outside.write_text("keep", encoding="utf-8")
    link = root / "link.txt"
    link.symlink_to(outside)

    assert ensure_within_root(root, link, follow_symlinks=False) == link
    with pytest.raises(PathBlockedError, match="escapes the asset root"):
        ensure_within_root(root, outside, follow_symlinks=False)
