"""Sync alliances from ESI, detect new logos, notify, and write the report pages."""
import argparse
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .config import Settings, get_settings, load_config
from .log import configure_logging
from .models.events import NewLogo
from .services.detection import probe_logos
from .services.esi import EsiClient
from .services.notify import notify_new_logos
from .services.render import write_index_html
from .services.report_service import build_report, write_report_json
from .services.sync import reconcile_alliances
from .storage.store import AllianceStore, StoreError
from .utils import utc_today

log = logging.getLogger("alliancelogos.update")


@dataclass
class RunSummary:
    inserted: List[int] = field(default_factory=list)
    failed_ids: List[int] = field(default_factory=list)
    checked: int = 0
    new_logos: List[NewLogo] = field(default_factory=list)
    notified: bool = False
    json_path: Optional[Path] = None
    html_path: Optional[Path] = None


def run(
    settings: Settings,
    store: AllianceStore,
    client: EsiClient,
    *,
    today: Optional[str] = None,
    notify: bool = True,
    sleep=None,
) -> RunSummary:
    """One full pass: reconcile, probe, notify, report."""
    summary = RunSummary()
    today = today or utc_today()

    try:
        remote_ids = client.fetch_alliance_ids()
    except Exception:
        log.exception("Failed to fetch alliance id list; continuing with stored alliances")
        remote_ids = None

    if remote_ids is not None:
        sync = reconcile_alliances(store, client, remote_ids)
        summary.inserted = sync.inserted
        summary.failed_ids = sync.failed
        known_ids = sync.known_ids
    else:
        known_ids = store.known_ids()

    candidates = store.records_without_logo(known_ids)
    summary.checked = len(candidates)
    summary.new_logos = probe_logos(
        store,
        client,
        candidates,
        concurrency=settings.concurrency,
        pacing_ms=settings.pacing_ms,
        placeholder_size=settings.placeholder_size,
        today=today,
        sleep=sleep,
    )

    if notify:
        summary.notified = notify_new_logos(
            summary.new_logos,
            settings.webhook_url,
            site_url=settings.site_url,
        )
    else:
        log.info("Notifications disabled for this run.")

    report = build_report(store.eligible_records())
    summary.json_path = write_report_json(report, settings.output_dir)
    summary.html_path = write_index_html(report, settings.output_dir, image_base_url=settings.image_base_url)
    return summary


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Update the alliance logo store and regenerate the report pages.",
    )
    parser.add_argument("--config", help="Path to the JSON config file.")
    parser.add_argument("--db", help="SQLite database path.")
    parser.add_argument("--output-dir", help="Directory for index.html and the JSON report.")
    parser.add_argument("--concurrency", type=int, help="Logo probes per batch.")
    parser.add_argument("--pacing-ms", type=int, help="Pause between probe batches in milliseconds.")
    parser.add_argument(
        "--no-notify",
        action="store_true",
        help="Do not post the new-logo summary to the webhook.",
    )
    return parser.parse_args(argv)


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    if args.db:
        settings.db_path = args.db
    if args.output_dir:
        settings.output_dir = args.output_dir
    if args.concurrency is not None:
        if args.concurrency < 1:
            log.warning("Ignoring --concurrency %s (must be >= 1)", args.concurrency)
        else:
            settings.concurrency = args.concurrency
    if args.pacing_ms is not None:
        if args.pacing_ms < 0:
            log.warning("Ignoring --pacing-ms %s (must be >= 0)", args.pacing_ms)
        else:
            settings.pacing_ms = args.pacing_ms
    return settings


def main(argv=None) -> int:
    args = _parse_args(argv)
    settings = _apply_overrides(get_settings(load_config(args.config)), args)
    configure_logging(settings)

    store = AllianceStore(settings.db_path)
    try:
        store.open()
    except StoreError:
        log.critical("FATAL: could not initialize alliance store %s", settings.db_path, exc_info=True)
        return 1

    client = EsiClient(settings)
    try:
        summary = run(settings, store, client, notify=not args.no_notify)
    finally:
        client.close()
        store.close()

    log.info(
        "Run complete: %s inserted, %s failed, %s checked, %s new logos.",
        len(summary.inserted),
        len(summary.failed_ids),
        summary.checked,
        len(summary.new_logos),
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
