"""Sidecar decoding, asset discovery, and GUID indexing."""

from .discovery import DiscoveryResult, discover_files, has_suffix, strip_suffix
from .guid_index import GuidIndex, build_guid_index
from .meta import GUID_FIELD, decode_meta_guid, read_meta_guid

__all__ = [
    "DiscoveryResult",
    "GUID_FIELD",
    "GuidIndex",
    "build_guid_index",
    "decode_meta_guid",
    "discover_files",
    "has_suffix",
    "read_meta_guid",
    "strip_suffix",
]
