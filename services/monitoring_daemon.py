"""
Monitoring Daemon

Background service that keeps the menu page open, scrapes the disabled
items on a fixed interval and serves the status dashboard.
"""

import sys
import time
import logging
import signal
import threading
from pathlib import Path
from werkzeug.serving import make_server

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from config.settings import Settings
from config.database import configure_database, init_database
from monitoring.browser import ControlledBrowser
from monitoring.notifier import AlertNotifier, Dispatcher, SheetSink
from monitoring.scrape_loop import ScrapeLoop
from monitoring.session_store import SessionStore
from webapp.app import create_app

logger = logging.getLogger(__name__)

# Global flag for graceful shutdown
running = True


def signal_handler(signum, frame):
    """Handle shutdown signals gracefully."""
    global running
    logger.info("Received shutdown signal. Stopping gracefully...")
    running = False


def configure_logging(log_file, level=logging.INFO):
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.FileHandler(log_file), logging.StreamHandler()],
    )


def build_loop(settings, dispatcher):
    """Wire the browser, stores and sinks into a scrape loop."""
    return ScrapeLoop(
        settings=settings,
        browser=ControlledBrowser(headless=settings.headless),
        session_store=SessionStore(settings.cookie_path),
        sheet_sink=SheetSink(settings.apps_script_url, dispatcher),
        alert_notifier=AlertNotifier(settings.green_api_instance, settings.green_api_token, dispatcher),
    )


def log_banner(settings):
    logger.info("=" * 60)
    logger.info("  Disabled Items Monitor")
    logger.info("=" * 60)
    logger.info(f"  Menu URL: {settings.menu_url}")
    logger.info(f"  Scrape interval: {settings.scrape_interval}s")
    logger.info(f"  Apps Script: {'configured' if settings.sheet_configured else 'NOT SET'}")
    logger.info(f"  WhatsApp: {'configured' if settings.alerts_configured else 'NOT SET'}")
    logger.info("=" * 60)


def main(host="0.0.0.0", port=None, settings=None, debug=False):
    """
    Main daemon loop.
    Starts the scrape loop and the web server, then waits for a signal.
    """
    global running

    settings = settings or Settings.from_env()
    configure_logging(settings.log_file, logging.DEBUG if debug else logging.INFO)

    # Register signal handlers
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    log_banner(settings)

    configure_database(settings.database_url)
    init_database(default_chat_id=settings.whatsapp_chat_id)

    dispatcher = Dispatcher()
    loop = build_loop(settings, dispatcher)

    server = make_server(host, port or settings.port, create_app(loop, settings), threaded=True)
    server_thread = threading.Thread(target=server.serve_forever, name="web", daemon=True)
    server_thread.start()
    logger.info(f"[Server] Web UI running on port {server.server_port}")

    try:
        loop.start()
    except Exception as e:
        logger.critical(f"[Fatal] Could not start browser: {e}", exc_info=True)
        server.shutdown()
        dispatcher.shutdown(wait=False)
        sys.exit(1)

    try:
        while running:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    finally:
        logger.info("[Shutdown] Cleaning up...")
        server.shutdown()
        loop.shutdown()
        dispatcher.shutdown(wait=True)
        logger.info("Monitoring Daemon stopped")


if __name__ == "__main__":
    main()
