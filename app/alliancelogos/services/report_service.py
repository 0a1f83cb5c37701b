"""
Build the alliance logo report from stored records.

The report has two cohorts:

- newest: every alliance whose logo was first seen on the most recent
  logoSince date, oldest alliance first.
- groups: all eligible alliances grouped by creation month (YYYY-MM),
  most recent month first; inside a month by logoSince descending, then
  startDate ascending, then ticker ascending.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from ..models.alliance import AllianceRecord
from ..utils import save_json

log = logging.getLogger("alliancelogos.report")

JSON_FILENAME = "alliances_with_logos.json"

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


@dataclass
class MonthGroup:
    key: str
    records: List[AllianceRecord] = field(default_factory=list)

    @property
    def label(self) -> str:
        return month_label(self.key)


@dataclass
class ReportModel:
    newest: List[AllianceRecord] = field(default_factory=list)
    groups: List[MonthGroup] = field(default_factory=list)
    latest_logo_since: Optional[str] = None

    @property
    def grouped_by_month(self) -> Dict[str, List[AllianceRecord]]:
        return {group.key: group.records for group in self.groups}


def month_key(start_date: str) -> str:
    """Zero-padded YYYY-MM key; sorts in calendar order as a string."""
    return start_date[:7]


def month_label(key: str) -> str:
    """'2024-06' -> '2024 June'. Unparseable keys are returned unchanged."""
    try:
        year, month = (int(part) for part in key.split("-", 1))
    except ValueError:
        return key
    if not 1 <= month <= 12:
        return key
    return f"{year} {MONTH_NAMES[month - 1]}"


def sort_for_report(records: Iterable[AllianceRecord]) -> List[AllianceRecord]:
    """logoSince descending, then startDate ascending, then ticker ascending."""
    ordered = sorted(records, key=lambda r: (r.start_date, r.ticker or ""))
    return sorted(ordered, key=lambda r: r.logo_since, reverse=True)


def build_report(records: Iterable[AllianceRecord]) -> ReportModel:
    eligible = sort_for_report(r for r in records if r.is_eligible)
    if not eligible:
        return ReportModel()

    latest = max(r.logo_since for r in eligible)
    newest = sorted(
        (r for r in eligible if r.logo_since == latest),
        key=lambda r: r.start_date,
    )

    by_month: Dict[str, List[AllianceRecord]] = {}
    for record in eligible:
        by_month.setdefault(month_key(record.start_date), []).append(record)

    groups = [
        MonthGroup(key=key, records=by_month[key])
        for key in sorted(by_month, reverse=True)
    ]

    return ReportModel(newest=newest, groups=groups, latest_logo_since=latest)


def _entry(record: AllianceRecord) -> dict:
    return {
        "id": record.id,
        "ticker": record.ticker,
        "logoSince": record.logo_since,
        "startDate": record.start_date,
    }


def report_to_json(report: ReportModel) -> dict:
    return {
        "newest": [_entry(r) for r in report.newest],
        "hasLogos": {
            group.key: [_entry(r) for r in group.records]
            for group in report.groups
        },
    }


def write_report_json(report: ReportModel, output_dir) -> Path:
    path = save_json(Path(output_dir) / JSON_FILENAME, report_to_json(report))
    log.info("Wrote %s", path)
    return path
