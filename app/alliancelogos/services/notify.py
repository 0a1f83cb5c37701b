"""Send the per-run summary of newly detected logos to the webhook."""
import logging
from typing import Optional, Sequence

from ..models.events import NewLogo
from ..utils import iso_now
from ..webhook.messages import build_new_logos_embed
from ..webhook.sender import post_webhook_message

log = logging.getLogger("alliancelogos.notify")


def notify_new_logos(
    new_logos: Sequence[NewLogo],
    webhook_url: Optional[str],
    *,
    site_url: Optional[str] = None,
    timestamp: Optional[str] = None,
) -> bool:
    """Post one summary message when logos were detected this run.

    Returns True only if a message was delivered.
    """
    if not new_logos:
        log.info("No new logos this run; nothing to announce.")
        return False
    if not webhook_url:
        log.info("No webhook configured; skipping notification for %s new logos.", len(new_logos))
        return False

    payload = build_new_logos_embed(new_logos, timestamp or iso_now(), site_url=site_url)
    return post_webhook_message(payload, url=webhook_url)
