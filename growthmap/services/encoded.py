"""
Pull the `_year` growth rate out of an encoded table cell.

Cells look like a Python dict literal, e.g. ``{'_year': 0.0421, '_5year': 0.31}``,
but are not guaranteed to be valid Python, JSON or anything else, so this is a
pattern match rather than a parse.
"""
import logging
import math
import re
from typing import Callable, Optional

from .errors import MalformedRecordError

logger = logging.getLogger(__name__)

# first `_year` key (quoted or bare), colon, numeric literal, then `,` or `}`
YEAR_PATTERN = re.compile(
    r"""(?<![\w])['"]?_year['"]?\s*:\s*"""
    r"""([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)\s*[,}]"""
)

PercentageExtractor = Callable[[Optional[str]], Optional[str]]


def parse_growth(cell: str) -> float:
    m = YEAR_PATTERN.search(cell or "")
    if not m:
        raise MalformedRecordError(f"no _year value in {cell!r}")
    val = float(m.group(1))
    if not math.isfinite(val):
        raise MalformedRecordError(f"non-finite _year value {m.group(1)!r}")
    return val


def format_percentage(value: float) -> str:
    return f"{value * 100:.2f}%"


def extract_percentage(cell: Optional[str]) -> Optional[str]:
    """Return the yearly growth as e.g. '4.21%', or None if the cell has none."""
    if not cell:
        return None
    try:
        val = parse_growth(cell)
    except MalformedRecordError as e:
        # upstream cells are often malformed; keep the raw content for diagnosis
        logger.warning("Could not parse growth cell: %s", e)
        return None
    return format_percentage(val)
