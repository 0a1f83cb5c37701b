"""SQLite-backed alliance record store.

The column names match the alliances.db files written by earlier
releases, so an existing database can be reused as-is.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from threading import Lock
from typing import Iterable, List, Optional, Set

from ..models.alliance import AllianceRecord, to_bool

log = logging.getLogger("alliancelogos.storage")

SCHEMA = """
CREATE TABLE IF NOT EXISTS alliances (
  id INTEGER PRIMARY KEY,
  ticker TEXT,
  startDate TEXT,
  size INTEGER,
  has_custom_logo BOOLEAN,
  logoSince TEXT,
  last_checked TEXT
)
"""

COLUMNS = "id, ticker, startDate, size, has_custom_logo, logoSince, last_checked"


class StoreError(RuntimeError):
    """Raised when the store cannot be opened or initialized."""


def _row_to_record(row) -> AllianceRecord:
    return AllianceRecord(
        row["id"],
        ticker=row["ticker"],
        start_date=row["startDate"],
        size=row["size"],
        has_custom_logo=to_bool(row["has_custom_logo"]),
        logo_since=row["logoSince"],
        last_checked=row["last_checked"],
    )


class AllianceStore:
    """Keyed table of alliance records.

    One connection is shared by the run; a lock serializes access so
    probe workers running in threads can write their own rows.
    """

    def __init__(self, path):
        self.path = path
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = Lock()

    def open(self) -> "AllianceStore":
        if self._conn is not None:
            return self
        try:
            if str(self.path) != ":memory:":
                Path(self.path).parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self.path), check_same_thread=False)
            conn.row_factory = sqlite3.Row
            conn.execute(SCHEMA)
            conn.commit()
        except (sqlite3.Error, OSError) as exc:
            raise StoreError(f"Failed to open alliance store at {self.path}: {exc}") from exc
        self._conn = conn
        log.debug("Opened alliance store %s", self.path)
        return self

    def close(self) -> None:
        if self._conn is None:
            return
        with self._lock:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "AllianceStore":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StoreError("Alliance store is not open")
        return self._conn

    def known_ids(self) -> Set[int]:
        with self._lock:
            rows = self.conn.execute("SELECT id FROM alliances").fetchall()
        return {row["id"] for row in rows}

    def exists(self, alliance_id: int) -> bool:
        with self._lock:
            row = self.conn.execute(
                "SELECT 1 FROM alliances WHERE id = ?", (alliance_id,)
            ).fetchone()
        return row is not None

    def get(self, alliance_id: int) -> Optional[AllianceRecord]:
        with self._lock:
            row = self.conn.execute(
                f"SELECT {COLUMNS} FROM alliances WHERE id = ?", (alliance_id,)
            ).fetchone()
        return _row_to_record(row) if row else None

    def insert(self, record: AllianceRecord) -> bool:
        """Insert a new record. Existing ids are left untouched (first write wins)."""
        with self._lock:
            cur = self.conn.execute(
                """
                INSERT OR IGNORE INTO alliances (id, ticker, startDate)
                VALUES (?, ?, ?)
                """,
                (record.id, record.ticker, record.start_date),
            )
            self.conn.commit()
        return cur.rowcount == 1

    def mark_custom_logo(self, alliance_id: int, size: int, logo_since: str) -> bool:
        """Record the first custom-logo sighting.

        Rows that already carry a logoSince are never rewritten.
        """
        with self._lock:
            cur = self.conn.execute(
                """
                UPDATE alliances
                SET size = ?, has_custom_logo = 1, logoSince = ?
                WHERE id = ? AND logoSince IS NULL
                """,
                (size, logo_since, alliance_id),
            )
            self.conn.commit()
        return cur.rowcount == 1

    def records_without_logo(self, ids: Optional[Iterable[int]] = None) -> List[AllianceRecord]:
        """Records not yet confirmed as having a custom logo, by ascending id.

        When ids is given, only those records are returned.
        """
        with self._lock:
            rows = self.conn.execute(
                f"""
                SELECT {COLUMNS} FROM alliances
                WHERE has_custom_logo IS NULL OR has_custom_logo = 0
                ORDER BY id
                """
            ).fetchall()
        records = [_row_to_record(row) for row in rows]
        if ids is None:
            return records
        wanted = set(ids)
        return [r for r in records if r.id in wanted]

    def eligible_records(self) -> List[AllianceRecord]:
        with self._lock:
            rows = self.conn.execute(
                f"""
                SELECT {COLUMNS} FROM alliances
                WHERE has_custom_logo = 1 AND logoSince IS NOT NULL AND startDate IS NOT NULL
                ORDER BY logoSince DESC, startDate ASC, ticker ASC
                """
            ).fetchall()
        return [_row_to_record(row) for row in rows]
