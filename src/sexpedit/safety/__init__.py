"""
Delimiter safety: unmatched-delimiter scan, balance repair and
balance-preserving delete/copy/paste.
"""

from .scanner import find_unmatched_delimiters, partition_safe_regions, scan_region
from .balance import balance
from .actions import safe_copy, safe_delete, safe_paste

__all__ = [
    "find_unmatched_delimiters",
    "partition_safe_regions",
    "scan_region",
    "balance",
    "safe_copy",
    "safe_delete",
    "safe_paste",
]
