"""
Layout normalization: pretty, indent-only, one-line and multi-line.
"""

from .layout import IndentLayout, PrettyLayout, flat, items_of
from .normalizer import MODES, Normalizer, normalize

__all__ = [
    "IndentLayout",
    "PrettyLayout",
    "flat",
    "items_of",
    "MODES",
    "Normalizer",
    "normalize",
]
