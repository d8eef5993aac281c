import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .. import config
from .connectors.nominatim import GeocodeGateway
from .models import GeoPoint
from .presentation import PresentationAssembler, mode_for_zoom

logger = logging.getLogger(__name__)

MSG_EMPTY_QUERY = "Please enter a search query."
MSG_SEARCH_FAILED = "Search failed. Please try again in a moment."


def no_results_message(mode: str) -> str:
    return f"No {'suburb' if mode == 'suburb' else 'address'} results found."


class ViewRecorder:
    """Camera stand-in that remembers the last move so it can be sent to the map."""

    def __init__(self):
        self.last: Optional[Dict[str, Any]] = None

    def fit_bounds(self, south: float, west: float, north: float, east: float) -> None:
        self.last = {"action": "fit_bounds", "bounds": [[south, west], [north, east]]}

    def set_view(self, lat: float, lng: float, zoom: int) -> None:
        self.last = {"action": "set_view", "center": [lat, lng], "zoom": zoom}


@dataclass
class SearchOutcome:
    message: Optional[str] = None
    content: Optional[Dict[str, Any]] = None
    view: Optional[Dict[str, Any]] = None

    @property
    def ok(self) -> bool:
        return self.content is not None

    def panel(self) -> Dict[str, Any]:
        return self.content if self.content is not None else {"message": self.message}


class SearchOrchestrator:
    def __init__(self, gateway: GeocodeGateway, assembler: PresentationAssembler, camera=None):
        self.gateway = gateway
        self.assembler = assembler
        self.camera = camera if camera is not None else ViewRecorder()

    def _move_camera(self, candidate, mode: str):
        if candidate.bounding_box:
            south, north, west, east = candidate.bounding_box
            self.camera.fit_bounds(south, west, north, east)
        else:
            zoom = config.SUBURB_VIEW_ZOOM if mode == "suburb" else config.ADDRESS_VIEW_ZOOM
            self.camera.set_view(candidate.lat, candidate.lon, zoom)
        return getattr(self.camera, "last", None)

    def perform_search(self, query: Optional[str], mode: str = "address", type_filter: Optional[str] = None) -> SearchOutcome:
        query = (query or "").strip()
        if not query:
            return SearchOutcome(message=MSG_EMPTY_QUERY)
        try:
            candidate = self.gateway.forward_search(query, mode, type_filter)
            if candidate is None:
                return SearchOutcome(message=no_results_message(mode))
            view = self._move_camera(candidate, mode)
            point = GeoPoint.of(candidate.lat, candidate.lon)
            location = self.gateway.reverse_geocode(point.lat, point.lng)
            if mode == "address":
                content = self.assembler.build_content(point, location.address, location.suburb, "address")
            else:
                content = self.assembler.build_content(point, None, location.suburb, "suburb")
            return SearchOutcome(content=content, view=view)
        except Exception:
            logger.exception("Search error for %r", query)
            return SearchOutcome(message=MSG_SEARCH_FAILED)

    def click(self, lat, lng, zoom: Optional[float]) -> Dict[str, Any]:
        point = GeoPoint.of(lat, lng)
        location = self.gateway.reverse_geocode(point.lat, point.lng)
        mode = mode_for_zoom(zoom, self.assembler.settings.address_zoom)
        address = location.address if mode == "address" else None
        return self.assembler.build_content(point, address, location.suburb, mode)

    def hover(self, lat, lng, zoom: Optional[float]) -> Dict[str, Any]:
        point = GeoPoint.of(lat, lng)
        location = self.gateway.throttled_hover(point.lat, point.lng)
        return self.assembler.build_hover_content(point, location, zoom)
