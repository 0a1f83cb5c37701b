import logging
import requests

log = logging.getLogger("alliancelogos.webhook")

DEFAULT_TIMEOUT = 10


def post_webhook_message(payload: dict, url: str) -> bool:
    """
    Post a JSON payload to the webhook at url.

    This is the ONLY supported webhook send path.
    Returns True when the webhook accepted the message. Never raises.
    """
    if not url:
        log.info("[webhook] No webhook URL configured; skipping message")
        return False

    try:
        log.info("[webhook] Sending message (%d embeds)", len(payload.get("embeds", [])))
        resp = requests.post(url, json=payload, timeout=DEFAULT_TIMEOUT)

        if resp.status_code >= 400:
            log.error(
                "[webhook] HTTP %s from webhook: %s",
                resp.status_code,
                resp.text,
            )
            return False

        log.info("[webhook] Message delivered successfully")
        return True

    except requests.RequestException:
        log.exception("[webhook] Request to webhook failed")
    except Exception:
        log.exception("[webhook] Unexpected error while sending webhook")
    return False
