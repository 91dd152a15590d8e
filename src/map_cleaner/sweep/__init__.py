"""Retention policy and the delete/scrub sweep."""

from .engine import SweepReport, delete_unreachable, scrub_scripts
from .policy import RetentionPolicy, referenced_scripts

__all__ = [
    "RetentionPolicy",
    "SweepReport",
    "delete_unreachable",
    "referenced_scripts",
    "scrub_scripts",
]
