"""Extraction of embedded GUID references from text assets."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Final

REFERENCE_PATTERN: Final[re.Pattern[str]] = re.compile(r"guid: ([a-f0-9]+)")


def extract_references(text: str) -> frozenset[str]:
    """Return the distinct GUIDs referenced by `guid: <hex>` markers in text."""
    return frozenset(match.group(1) for match in REFERENCE_PATTERN.finditer(text))


def scan_file(path: Path) -> frozenset[str]:
    """Read one asset and extract its references.

    Undecodable bytes are replaced, so binary assets simply yield no markers.
    Directories (assets owned by folder sidecars) have no content to scan.
    """
    if path.is_dir():
        return frozenset()
    text = path.read_bytes().decode("utf-8", errors="replace")
    return extract_references(text)
