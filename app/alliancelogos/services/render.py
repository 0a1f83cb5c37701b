"""Render the report as the static index.html page.

The render_* functions are pure; write_index_html is the only one that touches disk.
"""

import html
import logging
from pathlib import Path
from typing import Iterable

from ..models.alliance import AllianceRecord
from ..utils import save_text
from .report_service import ReportModel

log = logging.getLogger("alliancelogos.render")

HTML_FILENAME = "index.html"
SITE_TITLE = "Alliance Logos"
IMAGE_BASE_URL = "https://images.evetech.net"
ZKILLBOARD_URL = "https://zkillboard.com/alliance/{id}/"

LOGO_BLOCK = """
  <div class="pull-left"
    style="text-align: center; width: 64px; height: 100px !important; max-height: 90px; margin-right: 1em; overflow: hidden; text-overflow: ellipsis;">
    <a target="_blank" href="{link}"><img
      class="eveimage img-rounded"
      src="{image}"
      style="width: 64px; height: 64px;" rel="tooltip"
      title="{ticker}"></a><small>&lt;{ticker}&gt;</small>
  </div>"""

MONTH_BLOCK = """
  <div class="well pull-left" style="margin-right: 1em; padding-left: 1em;">
    <h4>{label}</h4>
    {logos}
  </div>"""

PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta http-equiv="X-UA-Compatible" content="IE=edge,chrome=1">
  <meta name="description" content="Alliance Logos is for showing the newest alliance logos within the MMO Eve Online">
  <meta name="title" content="{title}">
  <meta name="keywords" content="eve-online, eve, ccp, ccp games, massively, multiplayer, online, role, playing, game, mmorpg">
  <meta name="robots" content="index,follow">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title}</title>
  <link href="css/bootstrap-combined.min.2.2.2.css" rel="stylesheet">
  <link href="css/main.css" rel="stylesheet">
  <script src="js/jquery.min.1.8.3.js"></script>
  <script src="js/bootstrap.min.2.2.2.js"></script>
</head>
<body>
  <div class="container">
    <div class="navbar container">
      <div class="navbar-inner">
        <li class="brand" href="/"><img class="eveimage img-rounded" src="{brand_image}"
          style="padding: 0; margin: 0; background-color: #111; height: 25px; width: 25px;">&nbsp;
          {title}</li>
      </div>
    </div>
{subtitle}
    <h5>Latest Alliance Logos <small>(sorted by alliance age)</small></h5>
    <div class="row"><div class="span12">
      <div class="well pull-left" id="newest" style="margin-right: 1em; padding-left: 1em;">
        {newest}
      </div>
    </div></div>

    <h5>Alliances with Logos <small>(sorted by alliance creation date)</small></h5>
    <div class="row"><div class="span12" id="by-month">
      {grouped}
    </div></div>

    <div class="footer">
      <hr>
      <div class="pull-left">Brought to you by a bored <a target="_blank"
        href="http://evewho.com/pilot/Squizz+Caphinator">Squizz Caphinator</a></div>
    </div>
  </div>
</body>
</html>
"""


def render_logo_block(record: AllianceRecord, image_base_url: str = IMAGE_BASE_URL) -> str:
    ticker = html.escape(str(record.ticker or ""), quote=True)
    return LOGO_BLOCK.format(
        link=ZKILLBOARD_URL.format(id=record.id),
        image=f"{image_base_url}/Alliance/{record.id}_64.png",
        ticker=ticker,
    )


def _render_logos(records: Iterable[AllianceRecord], image_base_url: str) -> str:
    return "\n".join(render_logo_block(r, image_base_url) for r in records)


def render_index_html(
    report: ReportModel,
    site_title: str = SITE_TITLE,
    image_base_url: str = IMAGE_BASE_URL,
) -> str:
    grouped = "\n".join(
        MONTH_BLOCK.format(
            label=html.escape(group.label),
            logos=_render_logos(group.records, image_base_url),
        )
        for group in report.groups
    )

    subtitle = ""
    if report.latest_logo_since:
        subtitle = (
            f'    <p class="muted" id="updated">Newest logos first seen '
            f"{html.escape(report.latest_logo_since)}</p>\n"
        )

    return PAGE_TEMPLATE.format(
        title=html.escape(site_title),
        brand_image=f"{image_base_url}/Alliance/1_32.png",
        subtitle=subtitle,
        newest=_render_logos(report.newest, image_base_url),
        grouped=grouped,
    )


def write_index_html(report: ReportModel, output_dir, image_base_url: str = IMAGE_BASE_URL) -> Path:
    path = save_text(
        Path(output_dir) / HTML_FILENAME,
        render_index_html(report, image_base_url=image_base_url),
    )
    log.info("Wrote %s", path)
    return path
