"""Reference scanning and reachability traversal."""

from .reachability import (
    GuidLookup,
    ReachabilityResult,
    ReferenceReader,
    TraversalContext,
    compute_reachable,
    seed_entry_points,
)
from .references import REFERENCE_PATTERN, extract_references, scan_file

__all__ = [
    "GuidLookup",
    "REFERENCE_PATTERN",
    "ReachabilityResult",
    "ReferenceReader",
    "TraversalContext",
    "compute_reachable",
    "extract_references",
    "scan_file",
    "seed_entry_points",
]
