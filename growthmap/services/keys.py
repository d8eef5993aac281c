import re
from typing import Optional

_BOM = "\ufeff"
_QUOTES = re.compile(r"['\"]")
_WS = re.compile(r"\s+")


def normalize_key(raw: Optional[str]) -> str:
    """Canonical lookup key for a suburb or table key, e.g. ' North  Ryde ' -> 'north_ryde'."""
    s = _QUOTES.sub("", raw or "")
    # BOMs and whitespace can hide each other at the front
    while True:
        t = s.strip().lstrip(_BOM)
        if t == s:
            break
        s = t
    s = _WS.sub("_", s)
    return s.lower()


def stats_key(suburb: Optional[str], category: str) -> str:
    return f"{normalize_key(suburb)}_{category}"
