"""
Pytest fixtures shared by the alliancelogos tests.

HTTP is faked with a tiny requests.Session stand-in so no test touches
the network.
"""

from threading import Lock

import pytest
import requests

from alliancelogos.config import Settings
from alliancelogos.services.esi import EsiClient
from alliancelogos.storage.store import AllianceStore

ESI_URL = "https://esi.test/latest"
IMAGE_URL = "https://images.test"


class FakeResponse:
    def __init__(self, status_code=200, json_data=None, headers=None, text=""):
        self.status_code = status_code
        self._json = json_data
        self.headers = headers or {}
        self.text = text

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        return self._json

    def raise_for_status(self):
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    """Routes GET/HEAD by exact URL. Unknown URLs answer 404."""

    def __init__(self):
        self.headers = {}
        self.get_routes = {}
        self.head_routes = {}
        self.calls = []
        self.closed = False
        self._lock = Lock()

    def _dispatch(self, method, routes, url):
        with self._lock:
            self.calls.append((method, url))
        result = routes.get(url, FakeResponse(404))
        if isinstance(result, Exception):
            raise result
        return result

    def get(self, url, timeout=None):
        return self._dispatch("GET", self.get_routes, url)

    def head(self, url, timeout=None, allow_redirects=False):
        return self._dispatch("HEAD", self.head_routes, url)

    def urls(self, method):
        return [url for m, url in self.calls if m == method]

    def close(self):
        self.closed = True


def ids_url():
    return f"{ESI_URL}/alliances/?datasource=tranquility"


def detail_url(alliance_id):
    return f"{ESI_URL}/alliances/{alliance_id}/?datasource=tranquility"


def image_url(alliance_id):
    return f"{IMAGE_URL}/Alliance/{alliance_id}_128.png"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        db_path=str(tmp_path / "alliances.db"),
        output_dir=str(tmp_path / "docs"),
        esi_base_url=ESI_URL,
        image_base_url=IMAGE_URL,
        pacing_ms=0,
    )


@pytest.fixture
def store(settings):
    with AllianceStore(settings.db_path) as s:
        yield s


@pytest.fixture
def make_client(settings):
    """Build an EsiClient over a FakeSession.

    ids: list returned by the id endpoint, or an Exception to raise.
    details: {id: dict | list (JSON body) | int status | Exception}
    sizes: {id: int | None (no header) | str | Exception}
    """

    def _make(ids=None, details=None, sizes=None):
        session = FakeSession()
        if ids is not None:
            if isinstance(ids, Exception):
                session.get_routes[ids_url()] = ids
            else:
                session.get_routes[ids_url()] = FakeResponse(200, list(ids))
        for alliance_id, value in (details or {}).items():
            if isinstance(value, (dict, list)):
                value = FakeResponse(200, value)
            elif isinstance(value, int):
                value = FakeResponse(value)
            session.get_routes[detail_url(alliance_id)] = value
        for alliance_id, value in (sizes or {}).items():
            if isinstance(value, Exception):
                session.head_routes[image_url(alliance_id)] = value
            elif value is None:
                session.head_routes[image_url(alliance_id)] = FakeResponse(200, headers={})
            else:
                session.head_routes[image_url(alliance_id)] = FakeResponse(
                    200, headers={"content-length": str(value)}
                )
        return EsiClient(settings, session=session)

    return _make


class SleepRecorder:
    def __init__(self):
        self.pauses = []

    def __call__(self, seconds):
        self.pauses.append(seconds)


@pytest.fixture
def sleeper():
    """Records pacing pauses instead of sleeping."""
    return SleepRecorder()
