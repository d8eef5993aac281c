import httpx
import pytest

from growthmap.services.connectors.nominatim import location_from_address, pick_candidate
from growthmap.services.errors import NetworkError
from growthmap.services.models import UNAVAILABLE, UNKNOWN, ResolvedLocation

from conftest import reverse_reply

SEARCH_ITEMS = [
    {"lat": "-33.72", "lon": "151.12", "type": "house", "display_name": "1 Warrawee Ave"},
    {"lat": "-33.73", "lon": "151.13", "type": "suburb", "display_name": "Warrawee",
     "boundingbox": ["-33.74", "-33.71", "151.11", "151.14"]},
]


def search_reply(items):
    return lambda request: httpx.Response(200, json=items)


def test_reverse_geocode_builds_location(make_gateway):
    gw, rec = make_gateway(reverse_reply)
    loc = gw.reverse_geocode("-33.722000", "151.126000")
    assert loc == ResolvedLocation(suburb="Warrawee", address="12 Pacific Highway Warrawee")
    params = rec.requests[0].url.params
    assert rec.requests[0].url.path == "/reverse"
    assert params["format"] == "json"
    assert params["lat"] == "-33.722000"
    assert params["lon"] == "151.126000"
    assert params["zoom"] == "18"
    assert params["addressdetails"] == "1"


def test_suburb_fallback_order():
    assert location_from_address({"city_district": "Ku-ring-gai", "city": "Sydney"}).suburb == "Ku-ring-gai"
    assert location_from_address({"town": "Katoomba", "village": "X"}).suburb == "Katoomba"
    assert location_from_address({"road": "Main Rd"}) == ResolvedLocation("Unknown", "Main Rd Unknown")


def test_reverse_geocode_non_success_degrades(make_gateway):
    gw, rec = make_gateway(lambda r: httpx.Response(404))
    assert gw.reverse_geocode("1", "2") == UNAVAILABLE
    assert len(rec.requests) == 1


def test_reverse_geocode_retries_server_errors(make_gateway):
    replies = iter([httpx.Response(503), httpx.Response(200, json={"address": {"suburb": "Pymble"}})])
    gw, rec = make_gateway(lambda r: next(replies))
    assert gw.reverse_geocode("1", "2").suburb == "Pymble"
    assert len(rec.requests) == 2


def test_reverse_geocode_gives_up_after_retry(make_gateway):
    def boom(request):
        raise httpx.ConnectTimeout("slow", request=request)

    gw, rec = make_gateway(boom)
    assert gw.reverse_geocode("1", "2") == UNAVAILABLE
    assert len(rec.requests) == 2


def test_reverse_geocode_bad_json(make_gateway):
    gw, _ = make_gateway(lambda r: httpx.Response(200, text="<html>"))
    assert gw.reverse_geocode("1", "2") == UNAVAILABLE


def test_forward_search_empty_query_skips_network(make_gateway):
    gw, rec = make_gateway(search_reply(SEARCH_ITEMS))
    assert gw.forward_search("", "suburb") is None
    assert rec.requests == []


def test_forward_search_prefers_place_in_suburb_mode(make_gateway):
    gw, rec = make_gateway(search_reply(SEARCH_ITEMS))
    cand = gw.forward_search("Warrawee", "suburb")
    assert cand.type == "suburb"
    assert cand.bounding_box == (-33.74, -33.71, 151.11, 151.14)
    params = rec.requests[0].url.params
    assert rec.requests[0].url.path == "/search"
    assert params["q"] == "Warrawee"
    assert params["countrycodes"] == "au"
    assert params["limit"] == "5"
    assert "type" not in params


def test_forward_search_address_mode_takes_first(make_gateway):
    gw, _ = make_gateway(search_reply(SEARCH_ITEMS))
    cand = gw.forward_search("Warrawee", "address")
    assert cand.type == "house"
    assert cand.bounding_box is None


def test_forward_search_type_filter(make_gateway):
    gw, rec = make_gateway(search_reply(SEARCH_ITEMS))
    gw.forward_search("Warrawee", "suburb", "suburb")
    assert rec.requests[0].url.params["type"] == "suburb"


def test_forward_search_no_results(make_gateway):
    gw, _ = make_gateway(search_reply([]))
    assert gw.forward_search("Atlantis", "address") is None


def test_forward_search_failure_raises(make_gateway):
    gw, _ = make_gateway(lambda r: httpx.Response(500))
    with pytest.raises(NetworkError):
        gw.forward_search("Warrawee", "address")


def test_pick_candidate_falls_back_to_first():
    items = [{"lat": "1", "lon": "2", "type": "house"}, {"lat": "3", "lon": "4", "type": "road"}]
    assert pick_candidate(items, "suburb").lat == 1.0


def test_throttled_hover_reuses_result_inside_window(make_gateway, clock):
    gw, rec = make_gateway(reverse_reply)
    first = gw.throttled_hover("-33.700000", "151.100000")
    clock.advance(2.9)
    second = gw.throttled_hover("-33.800000", "151.200000")
    assert second is first
    assert len(rec.requests) == 1

    clock.now = 3.0
    gw.throttled_hover("-33.800000", "151.200000")
    assert len(rec.requests) == 2


def test_throttled_hover_first_call_always_looks_up(make_gateway, clock):
    gw, rec = make_gateway(reverse_reply)
    assert gw.cache.location == UNKNOWN
    assert gw.throttled_hover("1", "2").suburb == "Warrawee"
    assert len(rec.requests) == 1
