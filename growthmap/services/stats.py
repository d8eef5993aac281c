import logging
from typing import Callable, Dict, List, Optional

from .. import config
from .connectors.growth_csv import load_table
from .encoded import PercentageExtractor, extract_percentage
from .errors import DuplicateKeyError, GrowthMapError, IncompleteRowError
from .keys import normalize_key
from .models import CATEGORIES, SuburbStats, TableRow

logger = logging.getLogger(__name__)

KEY_FIELD = 0
VALUE_FIELD = 3
MIN_FIELDS = VALUE_FIELD + 1

DUPLICATE_POLICIES = ("last", "first", "error")

TableLoader = Callable[[str], List[TableRow]]


def _row_fields(row: TableRow):
    if len(row) < MIN_FIELDS:
        raise IncompleteRowError(f"row has {len(row)} fields, need {MIN_FIELDS}")
    return row[KEY_FIELD], row[VALUE_FIELD]


class StatsResolver:
    """
    Looks up a suburb's yearly house/land/unit growth in the summary table.

    Rows are keyed `<suburb>_<category>`. When the table repeats a key the
    duplicate policy decides: "last" keeps the last row in file order, "first"
    keeps the first, "error" raises DuplicateKeyError.
    """

    def __init__(self, source: str = config.GROWTH_CSV, loader: TableLoader = load_table,
                 extractor: PercentageExtractor = extract_percentage,
                 duplicate_policy: str = config.DUPLICATE_POLICY):
        if duplicate_policy not in DUPLICATE_POLICIES:
            raise ValueError(f"duplicate_policy must be one of {DUPLICATE_POLICIES}, got {duplicate_policy!r}")
        self.source = source
        self.loader = loader
        self.extractor = extractor
        self.duplicate_policy = duplicate_policy

    def resolve(self, suburb: Optional[str]) -> SuburbStats:
        base = normalize_key(suburb)
        logger.info("Looking up stats for %r -> %r", suburb, base)
        rows = self.loader(self.source)
        return self.match(base, rows)

    def match(self, base: str, rows: List[TableRow]) -> SuburbStats:
        wanted: Dict[str, str] = {f"{base}_{c}": c for c in CATEGORIES}
        stats = SuburbStats()
        seen = set()
        for i, row in enumerate(rows):
            try:
                raw_key, cell = _row_fields(row)
            except IncompleteRowError as e:
                logger.debug("Skipping row %d: %s", i, e)
                continue
            category = wanted.get(normalize_key(raw_key))
            if category is None:
                continue
            if category in seen:
                if self.duplicate_policy == "first":
                    continue
                if self.duplicate_policy == "error":
                    raise DuplicateKeyError(f"duplicate key {base}_{category} at row {i}")
            seen.add(category)
            logger.debug("Matched %s row %d: %r", category.upper(), i, row)
            setattr(stats, category, self.extractor(cell))
        logger.info("Stats for %r: %s", base, stats.as_dict())
        return stats

    def resolve_or_unavailable(self, suburb: Optional[str]) -> SuburbStats:
        try:
            return self.resolve(suburb)
        except GrowthMapError as e:
            logger.warning("Stats lookup failed for %r: %s", suburb, e)
            return SuburbStats.unavailable()


def resolve_stats(suburb: Optional[str], source: str = config.GROWTH_CSV, **kwargs) -> SuburbStats:
    return StatsResolver(source, **kwargs).resolve(suburb)
