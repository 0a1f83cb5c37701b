
"""Reconcile the ESI alliance id list against the local store.

Only ids the store has never seen are fetched; existing records are
never touched here.
"""
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Set

from ..models.alliance import AllianceRecord
from ..storage.store import AllianceStore
from .esi import EsiClient

log = logging.getLogger("alliancelogos.sync")


@dataclass
class SyncResult:
    known_ids: Set[int] = field(default_factory=set)
    inserted: List[int] = field(default_factory=list)
    failed: List[int] = field(default_factory=list)


def missing_ids(remote_ids: Iterable[int], persisted_ids: Set[int]) -> List[int]:
    """Remote ids absent from the store, ascending and de-duplicated."""
    return sorted(set(remote_ids) - set(persisted_ids))


def reconcile_alliances(
    store: AllianceStore,
    client: EsiClient,
    remote_ids: Iterable[int],
) -> SyncResult:
    """Insert a record for every remote id the store does not know yet.

    A failed detail fetch leaves the id missing so the next run retries it.
    """
    remote_ids = list(remote_ids)
    persisted = store.known_ids()
    result = SyncResult(known_ids=set(persisted))

    todo = missing_ids(remote_ids, persisted)
    log.info("%s remote alliances, %s new", len(set(remote_ids)), len(todo))

    for alliance_id in todo:
        try:
            data = client.fetch_alliance(alliance_id)
            if data is None:
                result.failed.append(alliance_id)
                continue
            record = AllianceRecord.from_esi(alliance_id, data)
            inserted = store.insert(record)
        except Exception as exc:
            log.error("Metadata error for %s: %s", alliance_id, exc)
            result.failed.append(alliance_id)
            continue

        if inserted:
            log.info("Fetched data for %s", data.get("name") or alliance_id)
            result.inserted.append(alliance_id)
        result.known_ids.add(alliance_id)

    log.info("Alliances updated (%s inserted, %s failed).", len(result.inserted), len(result.failed))
    return result
