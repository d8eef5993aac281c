import logging
import os
from typing import List, Optional

import httpx

from ... import config
from ..errors import FetchError
from ..models import TableRow

logger = logging.getLogger(__name__)


def split_csv_line(line: str) -> TableRow:
    """Split one line on commas, honouring double-quoted fields and "" escapes."""
    out = []
    cur = []
    in_quotes = False
    i = 0
    n = len(line)
    while i < n:
        ch = line[i]
        if ch == '"':
            if in_quotes and i + 1 < n and line[i + 1] == '"':
                cur.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif ch == "," and not in_quotes:
            out.append("".join(cur))
            cur = []
        else:
            cur.append(ch)
        i += 1
    out.append("".join(cur))
    return [v.rstrip("\r") for v in out]


def parse_table(text: str) -> List[TableRow]:
    lines = [l for l in text.split("\n") if l.strip()]
    return [split_csv_line(l) for l in lines]


def _is_url(source: str) -> bool:
    return source.startswith("http://") or source.startswith("https://")


def _read_local(path: str) -> str:
    if not os.path.exists(path):
        raise FetchError(f"Growth table not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise FetchError(f"Failed to read growth table {path}: {e}") from e


def _fetch(url: str, client: Optional[httpx.Client], timeout: float) -> str:
    logger.debug("Fetching growth table: %s", url)
    try:
        if client is not None:
            r = client.get(url)
        else:
            with httpx.Client(timeout=timeout) as c:
                r = c.get(url)
    except httpx.HTTPError as e:
        raise FetchError(f"Failed to load growth table: {e}") from e
    logger.debug("Fetch status: %s", r.status_code)
    if not r.is_success:
        raise FetchError(f"Failed to load growth table: {r.status_code}")
    return r.text


def load_table(source: str = config.GROWTH_CSV, client: Optional[httpx.Client] = None,
               timeout: float = config.TIMEOUT) -> List[TableRow]:
    """Load the growth summary table from a URL or a local path."""
    text = _fetch(source, client, timeout) if _is_url(source) else _read_local(source)
    logger.debug("Growth table sample: %r", text[:200])
    return parse_table(text)
