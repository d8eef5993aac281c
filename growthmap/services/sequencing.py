import threading
from typing import Any, Dict, Optional


class LatestWinsGate:
    """
    Drops results that arrive after a newer request for the same surface.

    Each UI surface (left panel, right panel, hover tooltip) gets its own
    increasing request ids; a result is kept only if its id is still the
    latest one issued for that surface.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._issued: Dict[str, int] = {}
        self._applied: Dict[str, Any] = {}

    def issue(self, surface: str) -> int:
        with self._lock:
            rid = self._issued.get(surface, 0) + 1
            self._issued[surface] = rid
            return rid

    def apply(self, surface: str, request_id: int, value: Any) -> bool:
        with self._lock:
            if self._issued.get(surface) != request_id:
                return False
            self._applied[surface] = value
            return True

    def current(self, surface: str) -> Optional[Any]:
        with self._lock:
            return self._applied.get(surface)
