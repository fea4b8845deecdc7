"""
Balance-preserving delete, copy and paste.

With safe_actions disabled these degrade to plain string slicing.
"""

from typing import Optional, Tuple

from sexpedit.config import EngineConfig, get_engine_config
from sexpedit.dialects import EMACS_LISP, DialectConfig
from sexpedit.logging_config import logger
from .balance import balance
from .scanner import partition_safe_regions


def safe_delete(text: str, span: Tuple[int, int], dialect: DialectConfig = EMACS_LISP,
                config: Optional[EngineConfig] = None) -> Tuple[str, int]:
    """Delete span except its unmatched delimiters; return (new text, new point)."""
    config = config or get_engine_config()
    start, end = sorted(span)
    if not config.safe_actions:
        return text[:start] + text[end:], start

    regions = partition_safe_regions(text, (start, end), dialect, config)
    for region in regions:
        text = text[:region.start] + text[region.end:]
    kept = (end - start) - sum(len(r) for r in regions)
    if kept:
        logger.debug(f"Safe delete kept {kept} chars of stranded delimiters in [{start}, {end})")
    return text, start


def safe_copy(text: str, span: Tuple[int, int], dialect: DialectConfig = EMACS_LISP,
              config: Optional[EngineConfig] = None) -> str:
    """The text of span without its unmatched delimiters."""
    config = config or get_engine_config()
    start, end = sorted(span)
    if not config.safe_actions:
        return text[start:end]
    regions = partition_safe_regions(text, (start, end), dialect, config)
    return "".join(text[r.start:r.end] for r in reversed(regions))


def safe_paste(text: str, point: int, pasted: str, dialect: DialectConfig = EMACS_LISP,
               config: Optional[EngineConfig] = None,
               region: Optional[Tuple[int, int]] = None) -> Tuple[str, int]:
    """
    Insert balanced pasted text at point, replacing region if one is given.

    Returns (new text, point after the inserted text).
    """
    config = config or get_engine_config()
    if region is not None:
        text, point = safe_delete(text, region, dialect, config)
    if config.safe_actions:
        repaired = balance(pasted, dialect)
        if repaired != pasted:
            logger.debug(f"Balanced pasted text: {pasted!r} -> {repaired!r}")
        pasted = repaired
    return text[:point] + pasted + text[point:], point + len(pasted)
