import logging
import re
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import httpx

from ... import config
from ..errors import EmptyResultError, NetworkError
from ..models import UNAVAILABLE, UNKNOWN, Candidate, ResolvedLocation

logger = logging.getLogger(__name__)

SUBURB_FIELDS = ("suburb", "city_district", "city", "town", "village")
PLACE_TYPES = re.compile(r"suburb|locality|neighbourhood|city|town|village", re.IGNORECASE)


def location_from_address(addr: Dict[str, Any]) -> ResolvedLocation:
    """Build suburb and one-line address from a Nominatim `address` block."""
    suburb = next((addr[k] for k in SUBURB_FIELDS if addr.get(k)), "Unknown")
    parts = [addr.get("house_number") or "", addr.get("road") or "", suburb]
    return ResolvedLocation(suburb=suburb, address=" ".join(p for p in parts if p))


def pick_candidate(items, mode: str) -> Optional[Candidate]:
    if not items:
        return None
    if mode == "suburb":
        for item in items:
            if PLACE_TYPES.search(item.get("type") or ""):
                return Candidate.from_nominatim(item)
    return Candidate.from_nominatim(items[0])


@dataclass
class HoverCache:
    last_lookup: Optional[float] = None
    location: ResolvedLocation = UNKNOWN


class GeocodeGateway:
    """
    Reverse geocoding and place search against a Nominatim server.

    Hover lookups are throttled to one network call per `hover_cooldown`
    seconds; inside the window the previous result is returned even if the
    pointer has moved.
    """

    def __init__(self, settings: Optional[config.Settings] = None, client: Optional[httpx.Client] = None,
                 clock: Callable[[], float] = time.monotonic, cache: Optional[HoverCache] = None):
        self.settings = settings or config.Settings()
        self.client = client or httpx.Client(
            timeout=self.settings.timeout,
            headers={"User-Agent": self.settings.user_agent},
        )
        self.clock = clock
        self.cache = cache or HoverCache()
        self._lock = threading.Lock()

    def close(self) -> None:
        self.client.close()

    def _get_json(self, path: str, params: Dict[str, Any]):
        url = self.settings.nominatim_url.rstrip("/") + path
        attempts = self.settings.retries + 1
        for attempt in range(1, attempts + 1):
            try:
                r = self.client.get(url, params=params)
                if r.status_code >= 500 and attempt < attempts:
                    logger.info("Retrying %s after status %s", path, r.status_code)
                    continue
                r.raise_for_status()
                return r.json()
            except httpx.TransportError as e:
                if attempt < attempts:
                    logger.info("Retrying %s after %s", path, e)
                    continue
                raise NetworkError(f"{path} failed: {e}") from e
            except httpx.HTTPStatusError as e:
                raise NetworkError(f"{path} failed: {e.response.status_code}") from e
            except ValueError as e:
                raise NetworkError(f"{path} returned invalid JSON") from e

    def reverse_geocode(self, lat, lng) -> ResolvedLocation:
        params = {
            "format": "json",
            "lat": lat,
            "lon": lng,
            "zoom": config.REVERSE_ZOOM,
            "addressdetails": 1,
        }
        try:
            data = self._get_json("/reverse", params)
            if not isinstance(data, dict):
                raise EmptyResultError(f"unexpected reverse response for {lat},{lng}")
            return location_from_address(data.get("address") or {})
        except Exception as e:
            logger.warning("Reverse geocode error: %s", e)
            return UNAVAILABLE

    def forward_search(self, query: str, mode: str = "address", type_filter: Optional[str] = None) -> Optional[Candidate]:
        """Best candidate for `query` in Australia, or None. Raises NetworkError."""
        if not query:
            return None
        params = {
            "format": "json",
            "q": query,
            "countrycodes": config.COUNTRY_CODES,
            "addressdetails": 1,
            "limit": config.SEARCH_LIMIT,
        }
        if type_filter:
            params["type"] = type_filter
        items = self._get_json("/search", params)
        if not isinstance(items, list):
            raise NetworkError("/search returned a non-list body")
        logger.info("Search %r (%s) returned %d results", query, mode, len(items))
        return pick_candidate(items, mode)

    def throttled_hover(self, lat, lng) -> ResolvedLocation:
        with self._lock:
            now = self.clock()
            last = self.cache.last_lookup
            if last is not None and now - last < self.settings.hover_cooldown:
                return self.cache.location
            self.cache.last_lookup = now
        location = self.reverse_geocode(lat, lng)
        self.cache.location = location
        return location
