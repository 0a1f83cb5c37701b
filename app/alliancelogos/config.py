import json
import logging
import os
from dataclasses import dataclass
from typing import Optional

log = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "alliancelogos.config.json"

DEFAULT_CONCURRENCY = 10
DEFAULT_PACING_MS = 200
# Byte size of the placeholder image served for alliances without a logo.
DEFAULT_PLACEHOLDER_SIZE = 9353
DEFAULT_SITE_URL = "https://logos.zzeve.com/"


def config_path() -> str:
    return os.getenv("ALLIANCELOGOS_CONFIG", DEFAULT_CONFIG_PATH)


def load_config(path: Optional[str] = None) -> dict:
    """
    Load the Alliance Logos configuration from disk.

    This is the single source of truth for config loading.
    """
    path = path or config_path()
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        log.warning("Config file not found: %s (using defaults)", path)
        return {}
    except Exception:
        log.exception("Failed to load config")
        return {}


@dataclass
class Settings:
    webhook_url: Optional[str] = None
    concurrency: int = DEFAULT_CONCURRENCY
    pacing_ms: int = DEFAULT_PACING_MS
    placeholder_size: int = DEFAULT_PLACEHOLDER_SIZE
    db_path: str = "alliances.db"
    output_dir: str = "docs"
    esi_base_url: str = "https://esi.evetech.net/latest"
    datasource: str = "tranquility"
    image_base_url: str = "https://images.evetech.net"
    site_url: str = DEFAULT_SITE_URL
    request_timeout: float = 30
    log_level: str = "INFO"


def _lookup(cfg: dict, env_name: Optional[str], key: str, default):
    if env_name:
        env_value = os.getenv(env_name)
        if env_value not in (None, ""):
            return env_value
    value = cfg.get(key)
    return default if value in (None, "") else value


def _int_setting(cfg: dict, env_name: Optional[str], key: str, default: int, minimum: int) -> int:
    raw = _lookup(cfg, env_name, key, default)
    try:
        value = int(raw)
    except (TypeError, ValueError):
        log.warning("Invalid %s=%r; using default %s", key, raw, default)
        return default
    if value < minimum:
        log.warning("Out of range %s=%r; using default %s", key, raw, default)
        return default
    return value


def get_settings(cfg: Optional[dict] = None) -> Settings:
    """Resolve settings with precedence env > config file > default."""
    if cfg is None:
        cfg = load_config()

    try:
        timeout = float(_lookup(cfg, None, "request_timeout", Settings.request_timeout))
    except (TypeError, ValueError):
        log.warning("Invalid request_timeout; using default %s", Settings.request_timeout)
        timeout = Settings.request_timeout

    logging_cfg = cfg.get("logging")
    log_level = _lookup(
        logging_cfg if isinstance(logging_cfg, dict) else {}, "ALLIANCELOGOS_LOG_LEVEL", "level", Settings.log_level
    )

    return Settings(
        webhook_url=_lookup(cfg, "ALLIANCELOGOS_WEBHOOK_URL", "webhook_url", None),
        concurrency=_int_setting(cfg, "ALLIANCELOGOS_CONCURRENCY", "concurrency", DEFAULT_CONCURRENCY, 1),
        pacing_ms=_int_setting(cfg, "ALLIANCELOGOS_PACING_MS", "pacing_ms", DEFAULT_PACING_MS, 0),
        placeholder_size=_int_setting(
            cfg, "ALLIANCELOGOS_PLACEHOLDER_SIZE", "placeholder_size", DEFAULT_PLACEHOLDER_SIZE, 0
        ),
        db_path=str(_lookup(cfg, "ALLIANCELOGOS_DB", "db_path", Settings.db_path)),
        output_dir=str(_lookup(cfg, "ALLIANCELOGOS_OUTPUT_DIR", "output_dir", Settings.output_dir)),
        esi_base_url=str(_lookup(cfg, "ALLIANCELOGOS_ESI_URL", "esi_base_url", Settings.esi_base_url)).rstrip("/"),
        datasource=str(_lookup(cfg, None, "datasource", Settings.datasource)),
        image_base_url=str(
            _lookup(cfg, "ALLIANCELOGOS_IMAGE_URL", "image_base_url", Settings.image_base_url)
        ).rstrip("/"),
        site_url=str(_lookup(cfg, "ALLIANCELOGOS_SITE_URL", "site_url", DEFAULT_SITE_URL)),
        request_timeout=timeout,
        log_level=str(log_level).upper(),
    )
