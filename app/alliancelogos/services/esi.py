"""Fetch alliance ids, alliance details and logo sizes from ESI and the image server."""
import logging
from typing import List, Optional

import requests

from ..config import Settings
from ..version import __version__

log = logging.getLogger("alliancelogos.esi")

USER_AGENT = f"alliancelogos/{__version__}"
PROBE_SIZE = 128


class LogoProbeError(RuntimeError):
    """The image server answered without a usable content-length."""


def logo_url(image_base_url: str, alliance_id: int, size: int = PROBE_SIZE) -> str:
    return f"{image_base_url}/Alliance/{alliance_id}_{size}.png"


def parse_content_length(value: Optional[str]) -> int:
    if value is None:
        raise LogoProbeError("missing content-length header")
    try:
        size = int(str(value).strip())
    except ValueError:
        raise LogoProbeError(f"non-numeric content-length header: {value!r}") from None
    if size < 0:
        raise LogoProbeError(f"negative content-length header: {value!r}")
    return size


class EsiClient:
    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = USER_AGENT

    def _url(self, path: str) -> str:
        return f"{self.settings.esi_base_url}{path}?datasource={self.settings.datasource}"

    def fetch_alliance_ids(self) -> List[int]:
        url = self._url("/alliances/")
        log.info("Fetching %s", url)
        resp = self.session.get(url, timeout=self.settings.request_timeout)
        resp.raise_for_status()
        return [int(alliance_id) for alliance_id in resp.json()]

    def fetch_alliance(self, alliance_id: int) -> Optional[dict]:
        """Alliance detail payload, or None when ESI answers with an error status."""
        url = self._url(f"/alliances/{alliance_id}/")
        resp = self.session.get(url, timeout=self.settings.request_timeout)
        if not resp.ok:
            log.warning("HTTP %s for alliance %s; skipping this run", resp.status_code, alliance_id)
            return None
        return resp.json()

    def logo_url(self, alliance_id: int, size: int = PROBE_SIZE) -> str:
        return logo_url(self.settings.image_base_url, alliance_id, size)

    def probe_logo_size(self, alliance_id: int) -> int:
        """Declared byte size of the alliance's logo, fetched with a HEAD request."""
        resp = self.session.head(
            self.logo_url(alliance_id),
            timeout=self.settings.request_timeout,
            allow_redirects=True,
        )
        return parse_content_length(resp.headers.get("content-length"))

    def close(self) -> None:
        self.session.close()
