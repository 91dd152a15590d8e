"""Sidecar metadata decoding."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Final

import yaml

from map_cleaner.errors import MetaDecodeError

GUID_FIELD: Final[str] = "guid"
GUID_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[A-Fa-f0-9]+$")


def decode_meta_guid(text: str) -> str:
    """Extract the GUID from one sidecar document.

    The document is loaded with ``yaml.BaseLoader`` so scalars are never
    type-coerced; a GUID made of digits only stays a string. Fields other
    than ``guid`` are ignored. Uppercase GUIDs are kept as written; references
    are lowercase, so such an entry is indexed but never matched.
    """
    try:
        payload = yaml.load(text, Loader=yaml.BaseLoader)
    except yaml.YAMLError as error:
        reason = f"Malformed metadata document: {_first_line(error)}"
        raise MetaDecodeError(reason=reason) from error
    if not isinstance(payload, dict):
        raise MetaDecodeError(reason="Metadata document must be a mapping.")
    if GUID_FIELD not in payload:
        raise MetaDecodeError(reason=f"Metadata document has no '{GUID_FIELD}' field.")
    value = payload[GUID_FIELD]
    if not isinstance(value, str) or not value.strip():
        raise MetaDecodeError(reason=f"Metadata field '{GUID_FIELD}' must be a non-empty string.")
    guid = value.strip()
    if GUID_PATTERN.match(guid) is None:
        raise MetaDecodeError(
            reason=f"Metadata field '{GUID_FIELD}' must be hexadecimal, got {guid!r}."
        )
    return guid


def read_meta_guid(path: Path) -> str:
    """Read one sidecar file and decode its GUID, tagging errors with the path."""
    text = path.read_bytes().decode("utf-8", errors="replace")
    try:
        return decode_meta_guid(text)
    except MetaDecodeError as error:
        raise error.with_path(path) from error


def _first_line(error: yaml.YAMLError) -> str:
    message = str(error).strip()
    return message.splitlines()[0] if message else type(error).__name__
