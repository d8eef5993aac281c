import html
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

from .. import config
from .models import CATEGORIES, GeoPoint, ResolvedLocation, SuburbStats
from .stats import StatsResolver

logger = logging.getLogger(__name__)

HEADER = "Key Stats"
PLACEHOLDER = "—"


def url_escape(value: Optional[str]) -> str:
    # same reserved set as JS encodeURIComponent
    return quote(str(value if value is not None else ""), safe="-_.!~*'()")


def mode_for_zoom(zoom: Optional[float], address_zoom: int = config.ADDRESS_ZOOM) -> str:
    return "address" if zoom is not None and zoom >= address_zoom else "suburb"


class PresentationAssembler:
    def __init__(self, resolver: StatsResolver, settings: Optional[config.Settings] = None):
        self.resolver = resolver
        self.settings = settings or config.Settings()

    def _links(self, address: Optional[str], suburb: Optional[str], mode: str):
        links = []
        if mode == "address":
            links.append({
                "label": "More on this address",
                "href": f"{self.settings.address_info_url}?address={url_escape(address)}",
            })
        links.append({
            "label": "More on this suburb",
            "href": f"{self.settings.suburb_info_url}?suburb={url_escape(suburb)}",
        })
        return links

    def build_content(self, point: GeoPoint, address: Optional[str] = None, suburb: Optional[str] = None,
                      mode: str = "suburb") -> Dict[str, Any]:
        stats = self.resolver.resolve_or_unavailable(suburb) if suburb else SuburbStats.unavailable()
        out: Dict[str, Any] = {
            "header": HEADER,
            "mode": mode,
            "point": point.as_dict(),
            "suburb": suburb,
        }
        if mode == "address":
            out["address"] = address
        out["annual_price_increase"] = {c: stats.get(c) or PLACEHOLDER for c in CATEGORIES}
        out["links"] = self._links(address, suburb, mode)
        return out

    def build_hover_content(self, point: GeoPoint, location: ResolvedLocation, zoom: Optional[float]) -> Dict[str, Any]:
        out: Dict[str, Any] = {"header": HEADER, "point": point.as_dict()}
        if mode_for_zoom(zoom, self.settings.address_zoom) == "address":
            out["address"] = location.address
        out["suburb"] = location.suburb
        return out


def esc(v) -> str:
    return html.escape(str(v if v is not None else ""))


def render_html(content: Dict[str, Any]) -> str:
    """HTML fragment for a panel: a content block or a bare {"message": ...}."""
    if "message" in content and "header" not in content:
        return f"<p>{esc(content['message'])}</p>"

    parts = [f"<h4>{esc(content['header'])}</h4>"]
    if "address" in content:
        parts.append(f"<strong>Address:</strong> {esc(content['address'])}<br>")
    parts.append(f"<strong>Suburb:</strong> {esc(content.get('suburb'))}<br>")
    growth = content.get("annual_price_increase")
    if growth is not None:
        parts.append("<strong>Annual Price Increase:</strong><br>")
        for c in CATEGORIES:
            parts.append(f"{c.capitalize()}: {esc(growth[c])}<br>")
        parts.append("<br>")
        parts.append("<br>".join(
            f'<a href="{esc(l["href"])}" target="_blank">{esc(l["label"])}</a>'
            for l in content.get("links", [])
        ))
    else:
        p = content["point"]
        parts.append(f"Lat: {esc(p['lat'])}, Lng: {esc(p['lng'])}")
    return "\n".join(parts)
