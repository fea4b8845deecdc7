"""
sexpedit - Structural editing for Lisp text

Lossless reader, layout normalizer, safe-region scanner and the
structural transforms built on them.
"""

__version__ = "0.3.0"

# Core exports
from sexpedit.config import EngineConfig, get_engine_config
from sexpedit.dialects import CLOJURE, COMMON_LISP, EMACS_LISP, SCHEME, DialectConfig, get_dialect
from sexpedit.exceptions import ReadError, SexpeditError, TransformRefused
from sexpedit.reader import print_tree, read
from sexpedit.normalize import Normalizer, normalize
from sexpedit.safety import balance, find_unmatched_delimiters, partition_safe_regions
from sexpedit.schemas import ScanReport, Span, TransformResult
from sexpedit.transform import StructuralEditor

__all__ = [
    "__version__",
    "EngineConfig",
    "get_engine_config",
    "DialectConfig",
    "EMACS_LISP",
    "CLOJURE",
    "SCHEME",
    "COMMON_LISP",
    "get_dialect",
    "SexpeditError",
    "ReadError",
    "TransformRefused",
    "read",
    "print_tree",
    "Normalizer",
    "normalize",
    "balance",
    "find_unmatched_delimiters",
    "partition_safe_regions",
    "ScanReport",
    "Span",
    "TransformResult",
    "StructuralEditor",
]
