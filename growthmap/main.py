from __future__ import annotations

import logging
import threading
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, Query
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from . import config
from .services.connectors.nominatim import GeocodeGateway
from .services.errors import GrowthMapError
from .services.presentation import PresentationAssembler, render_html
from .services.search import SearchOrchestrator
from .services.sequencing import LatestWinsGate
from .services.stats import StatsResolver

logger = logging.getLogger(__name__)

SURFACES = ("left", "right", "hover")


@dataclass
class Services:
    gateway: GeocodeGateway
    resolver: StatsResolver
    search: SearchOrchestrator
    gate: LatestWinsGate

    @classmethod
    def build(cls, settings: Optional[config.Settings] = None) -> "Services":
        settings = settings or config.Settings.from_env()
        gateway = GeocodeGateway(settings)
        resolver = StatsResolver(settings.growth_csv, duplicate_policy=settings.duplicate_policy)
        assembler = PresentationAssembler(resolver, settings)
        return cls(gateway, resolver, SearchOrchestrator(gateway, assembler), LatestWinsGate())


_services: Optional[Services] = None
_services_lock = threading.Lock()


def get_services() -> Services:
    global _services
    with _services_lock:
        if _services is None:
            _services = Services.build()
        return _services


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    if _services is not None:
        _services.gateway.close()


app = FastAPI(title="GrowthMap AU API", version="0.1.0", lifespan=lifespan)

# Allow the static map page to call us from anywhere
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _panel(svc: Services, surface: str, request_id: int, content: Dict[str, Any], **extra) -> JSONResponse:
    payload = {"content": content, "html": render_html(content), **extra}
    applied = svc.gate.apply(surface, request_id, payload)
    return JSONResponse(content=jsonable_encoder({"request_id": request_id, "applied": applied, **payload}))


@app.get("/")
def root():
    return {
        "status": "ok",
        "endpoints": ["/health", "/stats/{suburb}", "/hover", "/click", "/search", "/panels/{surface}", "/docs"],
    }


@app.head("/health")
def head_health():
    return Response(status_code=200)


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/stats/{suburb}")
def suburb_stats(suburb: str, svc: Services = Depends(get_services)):
    try:
        stats = svc.resolver.resolve(suburb)
    except GrowthMapError as e:
        logger.warning("Stats lookup failed for %r: %s", suburb, e)
        return JSONResponse(
            status_code=502,
            content={
                "code": "stats_failed",
                "message": "Failed to load growth statistics.",
                "detail": str(e),
            },
        )
    return {"suburb": suburb, **stats.as_dict()}


@app.get("/hover")
def hover(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    zoom: float = Query(12),
    svc: Services = Depends(get_services),
):
    rid = svc.gate.issue("hover")
    return _panel(svc, "hover", rid, svc.search.hover(lat, lng, zoom))


@app.get("/click")
def click(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    zoom: float = Query(12),
    svc: Services = Depends(get_services),
):
    rid = svc.gate.issue("right")
    return _panel(svc, "right", rid, svc.search.click(lat, lng, zoom))


@app.get("/search")
def search(
    q: str = Query(""),
    mode: str = Query("address", pattern="^(address|suburb)$"),
    type: Optional[str] = Query(None),
    svc: Services = Depends(get_services),
):
    rid = svc.gate.issue("left")
    outcome = svc.search.perform_search(q, mode, type or None)
    return _panel(svc, "left", rid, outcome.panel(), ok=outcome.ok, view=outcome.view)


@app.get("/panels/{surface}")
def panel(surface: str, svc: Services = Depends(get_services)):
    if surface not in SURFACES:
        return JSONResponse(status_code=404, content={"error": "unknown surface"})
    current = svc.gate.current(surface)
    if current is None:
        return JSONResponse(status_code=404, content={"error": "nothing shown yet"})
    return JSONResponse(content=jsonable_encoder(current))
