
"""Custom logo detection.

An alliance without a logo is served a placeholder image of a known
byte size, so any other size means a custom logo exists. A negative
result is never persisted: the alliance stays eligible for probing on
every run until a logo shows up.
"""
import logging
from typing import Iterable, List, Optional

from ..config import DEFAULT_CONCURRENCY, DEFAULT_PACING_MS, DEFAULT_PLACEHOLDER_SIZE
from ..models.alliance import AllianceRecord
from ..models.events import NewLogo
from ..storage.store import AllianceStore
from ..utils import utc_today
from .batching import run_in_batches
from .esi import EsiClient

log = logging.getLogger("alliancelogos.detection")


def has_custom_logo(size: int, placeholder_size: int = DEFAULT_PLACEHOLDER_SIZE) -> bool:
    return size != placeholder_size


def probe_alliance(
    store: AllianceStore,
    client: EsiClient,
    record: AllianceRecord,
    *,
    today: str,
    placeholder_size: int = DEFAULT_PLACEHOLDER_SIZE,
) -> Optional[NewLogo]:
    """Probe one alliance; persist and return the transition if a logo was found."""
    try:
        size = client.probe_logo_size(record.id)
    except Exception as exc:
        log.warning("Logo check error for %s: %s", record.id, exc)
        return None

    if not has_custom_logo(size, placeholder_size):
        return None

    try:
        updated = store.mark_custom_logo(record.id, size, today)
    except Exception:
        log.exception("Failed to store logo state for %s", record.id)
        return None
    if not updated:
        return None

    log.info("new logo %s", client.logo_url(record.id))
    return NewLogo(alliance_id=record.id, ticker=record.ticker, logo_since=today, size=size)


def probe_logos(
    store: AllianceStore,
    client: EsiClient,
    records: Iterable[AllianceRecord],
    *,
    concurrency: int = DEFAULT_CONCURRENCY,
    pacing_ms: int = DEFAULT_PACING_MS,
    placeholder_size: int = DEFAULT_PLACEHOLDER_SIZE,
    today: Optional[str] = None,
    sleep=None,
) -> List[NewLogo]:
    """Probe every record not yet flagged and return the newly detected logos."""
    today = today or utc_today()
    candidates = [r for r in records if not r.has_custom_logo]
    log.info("Checking %s alliances for custom logos...", len(candidates))

    def _probe(record: AllianceRecord) -> Optional[NewLogo]:
        return probe_alliance(
            store,
            client,
            record,
            today=today,
            placeholder_size=placeholder_size,
        )

    kwargs = {} if sleep is None else {"sleep": sleep}
    results = run_in_batches(candidates, _probe, concurrency, pacing_ms / 1000.0, **kwargs)
    detected = [r for r in results if r is not None]

    log.info("Alliance logos updated (%s new).", len(detected))
    return detected
