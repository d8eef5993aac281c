from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional, Tuple

CATEGORIES = ("house", "land", "unit")

TableRow = List[str]


@dataclass(frozen=True)
class GeoPoint:
    lat: str           # 6 dp, e.g. "-33.868800"
    lng: str

    @classmethod
    def of(cls, lat, lng) -> "GeoPoint":
        return cls(f"{float(lat):.6f}", f"{float(lng):.6f}")

    def as_floats(self) -> Tuple[float, float]:
        return float(self.lat), float(self.lng)

    def as_dict(self) -> Dict[str, str]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class ResolvedLocation:
    suburb: str
    address: str

    def as_dict(self) -> Dict[str, str]:
        return asdict(self)


UNAVAILABLE = ResolvedLocation("Unavailable", "Unavailable")
UNKNOWN = ResolvedLocation("Unknown", "Unknown")


@dataclass
class SuburbStats:
    house: Optional[str] = None    # e.g. "4.21%"
    land: Optional[str] = None
    unit: Optional[str] = None

    @classmethod
    def unavailable(cls) -> "SuburbStats":
        return cls()

    def get(self, category: str) -> Optional[str]:
        return getattr(self, category)

    def as_dict(self) -> Dict[str, Optional[str]]:
        return asdict(self)


@dataclass
class Candidate:
    lat: float
    lon: float
    type: str = ""
    bounding_box: Optional[Tuple[float, float, float, float]] = None  # south, north, west, east
    display_name: str = ""
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_nominatim(cls, item: Dict[str, Any]) -> "Candidate":
        bbox = item.get("boundingbox")
        box = None
        if bbox and len(bbox) == 4:
            box = tuple(float(v) for v in bbox)
        return cls(
            lat=float(item["lat"]),
            lon=float(item["lon"]),
            type=item.get("type") or "",
            bounding_box=box,
            display_name=item.get("display_name") or "",
            raw=item,
        )
