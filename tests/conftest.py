import httpx
import pytest

from growthmap import config
from growthmap.services.connectors.nominatim import GeocodeGateway

GROWTH_CSV_TEXT = (
    "\ufeffkey,suburb,category,increments\r\n"
    "warrawee_house,Warrawee,house,\"{'_year': 0.0421, '_5year': 0.31}\"\r\n"
    "warrawee_land,Warrawee,land,\"{'_year': -0.0105, '_5year': 0.12}\"\r\n"
    "warrawee_unit,Warrawee,unit,\"{'_year': 0.0333, '_5year': 0.2}\"\r\n"
    "north_ryde_house,North Ryde,house,\"{'_year': 0.05, '_5year': 0.2}\"\r\n"
    "short,row\r\n"
    "\r\n"
    "north_ryde_unit,North Ryde,unit,garbage\r\n"
)


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class Recorder:
    """MockTransport handler that counts requests and replies from a callable."""

    def __init__(self, reply):
        self.reply = reply
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.reply(request)


def reverse_reply(request):
    return httpx.Response(200, json={
        "address": {"house_number": "12", "road": "Pacific Highway", "suburb": "Warrawee"},
    })


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    return config.Settings(nominatim_url="https://nominatim.test", retries=1, hover_cooldown=3.0)


@pytest.fixture
def make_gateway(settings, clock):
    def _make(reply):
        rec = Recorder(reply)
        client = httpx.Client(transport=httpx.MockTransport(rec))
        return GeocodeGateway(settings, client=client, clock=clock), rec
    return _make


@pytest.fixture
def table_rows():
    from growthmap.services.connectors.growth_csv import parse_table
    return parse_table(GROWTH_CSV_TEXT)


@pytest.fixture
def table_loader(table_rows):
    calls = []

    def _load(source):
        calls.append(source)
        return table_rows
    _load.calls = calls
    return _load
