"""
Webhook embed builders.

RULES:
- No network calls
- No logging
- No environment access
- Never raise on bad input
"""

from typing import Dict, List, Sequence

from ..config import DEFAULT_SITE_URL
from ..models.events import NewLogo

EMBED_TITLE = "New Alliance Logos"
EMBED_COLOR = 0x3498DB
FOOTER_TEXT = "Alliance Logos"
FOOTER_ICON_URL = "https://images.evetech.net/Alliance/1_32.png"
MAX_LISTED = 20


def _ticker(logo: NewLogo) -> str:
    return str(logo.ticker) if logo.ticker not in (None, "") else str(logo.alliance_id)


def build_description(new_logos: Sequence[NewLogo]) -> str:
    count = len(new_logos)
    noun = "logo" if count == 1 else "logos"
    lines = [f"{count} new alliance {noun} detected."]
    listed = [f"[{_ticker(logo)}]" for logo in new_logos[:MAX_LISTED]]
    if listed:
        lines.append(" ".join(listed))
    if count > MAX_LISTED:
        lines.append(f"and {count - MAX_LISTED} more")
    return "\n".join(lines)


def build_new_logos_embed(
    new_logos: Sequence[NewLogo],
    timestamp: str,
    site_url: str = DEFAULT_SITE_URL,
    icon_url: str = FOOTER_ICON_URL,
) -> Dict[str, List[dict]]:
    embed = {
        "title": EMBED_TITLE,
        "description": build_description(list(new_logos)),
        "color": EMBED_COLOR,
        "footer": {
            "text": FOOTER_TEXT,
            "icon_url": icon_url,
        },
        "timestamp": timestamp,
        "url": site_url or DEFAULT_SITE_URL,
    }
    return {"embeds": [embed]}
