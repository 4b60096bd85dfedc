"""
Size literal conversion ("4.7 GB", "512MiB", ...) to GiB
"""
import math
from typing import Optional, Tuple

from app.core.errors import ConversionWarning
from app.utils.diagnostics import DiagnosticLog
from app.utils.logger import setup_logger

logger = setup_logger(__name__)

GB_TO_GIB = 0.931323

# Longest suffix first: "GIB" ends with "B" like "GB", so order matters
UNIT_MULTIPLIERS: Tuple[Tuple[str, float], ...] = (
    ("GIB", 1.0),
    ("GB", GB_TO_GIB),
    ("MIB", 1.0 / 1024.0),
    ("MB", (1.0 / 1024.0) * GB_TO_GIB),
)


def _split_size_literal(size_str: str) -> Tuple[float, float]:
    """
    Split a normalized size literal into its numeric value and GiB multiplier

    Raises:
        ConversionWarning: Unknown unit, unparsable number, non-finite or negative value
    """
    for suffix, multiplier in UNIT_MULTIPLIERS:
        if size_str.endswith(suffix):
            value_str = size_str[:-len(suffix)].strip()
            break
    else:
        raise ConversionWarning(f"Unknown size unit in '{size_str}'")

    try:
        value = float(value_str)
    except ValueError as e:
        raise ConversionWarning(
            f"Could not parse size value from '{size_str}' (extracted value: '{value_str}'): {e}"
        ) from e

    if not math.isfinite(value):
        raise ConversionWarning(f"Non-finite size value in '{size_str}'")
    if value < 0:
        raise ConversionWarning(f"Negative size value in '{size_str}'")

    return value, multiplier


def convert_size_to_gib(size_literal: str, diagnostics: Optional[DiagnosticLog] = None) -> float:
    """
    Convert a size literal with unit suffix to GiB

    Decimal units (GB, MB) are converted to their binary equivalents.
    Anything that cannot be converted counts as 0.0 so a single odd row
    never breaks the total.

    Args:
        size_literal: Size as printed by 'ollama ps', e.g. "4.7 GB"
        diagnostics: Optional collector for conversion warnings

    Returns:
        Size in GiB, or 0.0 when the literal is not convertible
    """
    size_str = size_literal.strip().upper()

    try:
        value, multiplier = _split_size_literal(size_str)
    except ConversionWarning as e:
        logger.warning(str(e))
        if diagnostics is not None:
            diagnostics.add("conversion", str(e))
        return 0.0

    return value * multiplier
