"""
Application Settings

Loads configuration from environment variables (and a local .env file).
"""

import os
import logging
from dataclasses import dataclass
from pathlib import Path
import pytz
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = PROJECT_ROOT / "data"


TRUTHY = ("1", "true", "yes", "on")


def parse_bool(value, default=False):
    """Interpret a form/env flag such as "true", "0" or an actual bool."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text == "":
        return default
    return text in TRUTHY


def _env_int(name, default):
    """Read an integer env var, falling back to the default on bad input."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Invalid integer for {name}: {raw!r}, using {default}")
        return default


def _env_bool(name, default):
    return parse_bool(os.getenv(name), default)


def _env_seconds(name, legacy_ms_name, default):
    """
    Interval in seconds from NAME, or from the older millisecond variable
    LEGACY_MS_NAME when only that one is set.
    """
    if os.getenv(name, "").strip():
        return _env_int(name, default)

    legacy_ms = _env_int(legacy_ms_name, None)
    if legacy_ms is None:
        return default

    seconds = max(1, round(legacy_ms / 1000))
    logger.warning(f"{legacy_ms_name} is in milliseconds ({legacy_ms}ms -> {seconds}s); "
                   f"set {name} instead")
    return seconds


def _env_timezone(name, default):
    """Read a pytz timezone name, falling back to the default if it is unknown."""
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        pytz.timezone(raw)
    except pytz.UnknownTimeZoneError:
        logger.warning(f"Unknown timezone for {name}: {raw!r}, using {default}")
        return default
    return raw


@dataclass(frozen=True)
class Settings:
    port: int = 3000
    menu_url: str = "https://merchant.wolt.com"
    login_url: str = "https://merchant.wolt.com"
    login_email: str = ""
    apps_script_url: str = ""
    green_api_instance: str = ""
    green_api_token: str = ""
    whatsapp_chat_id: str = ""
    scrape_interval: int = 20
    sheet_send_interval: int = 300
    startup_delay: int = 5
    cookie_path: str = str(DATA_DIR / "cookies.json")
    database_url: str = f"sqlite:///{DATA_DIR / 'monitor.db'}"
    ui_password: str = "wolt2024"
    headless: bool = True
    materialize_every: int = 5
    error_threshold: int = 5
    cache_clear_every: int = 50
    max_scroll_steps: int = 50
    reload_timeout: int = 30
    navigation_timeout: int = 60
    display_timezone: str = "UTC"
    log_file: str = "monitoring_daemon.log"

    @property
    def sheet_configured(self):
        return bool(self.apps_script_url)

    @property
    def alerts_configured(self):
        return bool(self.green_api_instance and self.green_api_token)

    @classmethod
    def from_env(cls):
        """Build settings from the current environment."""
        defaults = cls()
        return cls(
            port=_env_int("PORT", defaults.port),
            menu_url=os.getenv("MENU_URL", defaults.menu_url),
            login_url=os.getenv("LOGIN_URL", defaults.login_url),
            login_email=os.getenv("LOGIN_EMAIL", defaults.login_email),
            apps_script_url=os.getenv("APPS_SCRIPT_URL", defaults.apps_script_url),
            green_api_instance=os.getenv("GREEN_API_INSTANCE", defaults.green_api_instance),
            green_api_token=os.getenv("GREEN_API_TOKEN", defaults.green_api_token),
            whatsapp_chat_id=os.getenv("WHATSAPP_CHAT_ID", defaults.whatsapp_chat_id),
            scrape_interval=_env_seconds("SCRAPE_INTERVAL_SECONDS", "SCRAPE_INTERVAL", defaults.scrape_interval),
            sheet_send_interval=_env_seconds(
                "SHEET_SEND_INTERVAL_SECONDS", "SHEET_SEND_INTERVAL", defaults.sheet_send_interval
            ),
            startup_delay=_env_int("STARTUP_DELAY", defaults.startup_delay),
            cookie_path=os.getenv("COOKIE_PATH", defaults.cookie_path),
            database_url=os.getenv("DATABASE_URL", defaults.database_url),
            ui_password=os.getenv("UI_PASSWORD", defaults.ui_password),
            headless=_env_bool("HEADLESS", defaults.headless),
            materialize_every=_env_int("MATERIALIZE_EVERY", defaults.materialize_every),
            error_threshold=_env_int("ERROR_THRESHOLD", defaults.error_threshold),
            cache_clear_every=_env_int("CACHE_CLEAR_EVERY", defaults.cache_clear_every),
            max_scroll_steps=_env_int("MAX_SCROLL_STEPS", defaults.max_scroll_steps),
            reload_timeout=_env_int("RELOAD_TIMEOUT", defaults.reload_timeout),
            navigation_timeout=_env_int("NAVIGATION_TIMEOUT", defaults.navigation_timeout),
            display_timezone=_env_timezone("DISPLAY_TIMEZONE", defaults.display_timezone),
            log_file=os.getenv("LOG_FILE", defaults.log_file),
        )
