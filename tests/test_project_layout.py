from __future__ import annotations

from pathlib import Path


def test_required_package_paths_exist() -> None:
    root = Path(__file__).resolve().parents[1]
    required = [
        "src/map_cleaner/cli.py",
        "src/map_cleaner/cleaner.py",
        "src/map_cleaner/index/__init__.py",
        "src/map_cleaner/graph/__init__.py",
        "src/map_cleaner/sweep/__init__.py",
        "src/map_cleaner/security/__init__.py",
        "src/map_cleaner/logging/__init__.py",
    ]
    for rel in required:
        assert (root / rel).exists(), rel
