"""
Scrape Loop

Periodic tick that checks the session, reads the disabled items from the
menu page and pushes them to the sheet. Failures are counted; after too many
in a row the page is reloaded, and if that fails the whole browser is
restarted with the saved cookies.

All browser access goes through the tick lock, so the loop, the login flow
and manual refreshes never touch the browser at the same time.
"""

import time
import logging
import threading
from contextlib import contextmanager
from datetime import datetime, timezone

from selenium.common.exceptions import WebDriverException

from monitoring.auth import open_magic_link, request_login_email
from monitoring.extractor import extract
from monitoring.materializer import materialize_list
from monitoring.models import (
    LoginState,
    LoopPhase,
    LoopStats,
    RecordKind,
    ReconciliationState,
    ScrapeSnapshot,
)
from monitoring.reconciler import reconcile
from monitoring.scheduler import PeriodicTimer
from monitoring.session_monitor import check_login

logger = logging.getLogger(__name__)

SESSION_EXPIRED_MESSAGE = "🔑 Menu Monitor: Session expired! Please log in from the dashboard."
NEEDS_LOGIN_MESSAGE = "🔑 Menu Monitor started but needs login. Open the dashboard to authenticate."
LOGGED_IN_MESSAGE = "✅ Menu Monitor: Successfully logged in! Monitoring resumed."


class ScrapeLoop:
    def __init__(self, settings, browser, session_store, sheet_sink, alert_notifier,
                 clock=time.time, sleep=time.sleep, timer_factory=PeriodicTimer,
                 login_check=check_login, materialize=materialize_list, extractor=extract):
        self.settings = settings
        self.browser = browser
        self.session_store = session_store
        self.sheet_sink = sheet_sink
        self.alert_notifier = alert_notifier
        self.clock = clock
        self.sleep = sleep
        self.login_check = login_check
        self.materialize = materialize
        self.extractor = extractor

        self.timer = timer_factory(settings.scrape_interval, self.tick)
        self._lock = threading.Lock()
        self._stopping = False

        self.phase = LoopPhase.IDLE
        self.login_state = LoginState.UNKNOWN
        self.login_alert_sent = False
        self.snapshot = None
        self.stats = LoopStats()
        self.reconciliation = ReconciliationState(min_resend_interval=settings.sheet_send_interval)

    @property
    def is_logged_in(self):
        return self.login_state is LoginState.AUTHENTICATED

    @contextmanager
    def exclusive(self):
        """Hold the browser for the duration of the block."""
        with self._lock:
            yield self.browser

    # ------------------------------------------------------------------
    # Setup / teardown
    # ------------------------------------------------------------------

    def start(self):
        """
        Launch the browser, restore the session and arm the timer.
        Browser launch errors propagate; the daemon cannot run without one.
        """
        with self.exclusive():
            self._setup_browser()
            self.login_state = self.login_check(self.browser)

        logger.info(f"[Init] Login status: {'LOGGED IN' if self.is_logged_in else 'NOT LOGGED IN'}")
        if not self.is_logged_in:
            self._alert_login_needed(NEEDS_LOGIN_MESSAGE)

        logger.info(f"[Scrape] Starting loop every {self.settings.scrape_interval}s")
        self.timer.start(initial_delay=self.settings.startup_delay)

    def shutdown(self):
        """Stop the timer, wait for a running tick, release the browser."""
        logger.info("[Shutdown] Stopping scrape loop...")
        self._stopping = True
        self.timer.stop()
        with self.exclusive():
            self.browser.close()

    def _setup_browser(self):
        self.browser.launch()
        cookies = self.session_store.load()
        if cookies:
            self.browser.set_cookies(cookies)
        self._navigate_to_menu()

    def _navigate_to_menu(self):
        try:
            self.browser.navigate(self.settings.menu_url, timeout=self.settings.navigation_timeout)
        except WebDriverException as e:
            logger.error(f"[Nav] Failed to open {self.settings.menu_url}: {e}")

    def _persist_cookies(self):
        self.session_store.save(self.browser.get_cookies())

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def tick(self):
        """One pass of the loop. Never raises."""
        if self._stopping:
            return
        if not self._lock.acquire(blocking=False):
            logger.warning("[Scrape] Browser busy, skipping this tick")
            return

        try:
            self._run_tick()
        finally:
            self.phase = LoopPhase.IDLE
            self._lock.release()

    def _run_tick(self):
        self.stats.total_scrapes += 1

        if not self.browser.is_running:
            logger.warning("[Scrape] Browser is not running, relaunching...")
            self.hard_restart()
            return

        try:
            self._housekeeping()

            self.phase = LoopPhase.CHECKING
            if self.login_check(self.browser) is not LoginState.AUTHENTICATED:
                self._on_session_expired()
                return
            self._on_session_valid()

            self.phase = LoopPhase.SCRAPING
            self._scrape()
            self.stats.scrape_errors = 0

        except Exception as e:
            self.stats.scrape_errors += 1
            logger.error(f"[Scrape] Error ({self.stats.scrape_errors}): {e}", exc_info=True)
            if self.stats.scrape_errors >= self.settings.error_threshold:
                self._escalate()

    def _housekeeping(self):
        every = self.settings.cache_clear_every
        if every and self.stats.total_scrapes % every == 0:
            self.browser.clear_cache()

    def _on_session_expired(self):
        self.login_state = LoginState.EXPIRED
        logger.warning("[Scrape] Not logged in! Session may have expired.")
        self._alert_login_needed(SESSION_EXPIRED_MESSAGE)

    def _on_session_valid(self):
        self.login_state = LoginState.AUTHENTICATED
        self.login_alert_sent = False

    def _alert_login_needed(self, message):
        if self.login_alert_sent:
            return
        self.alert_notifier.send(message)
        self.login_alert_sent = True

    def _should_materialize(self):
        every = max(1, self.settings.materialize_every)
        return (self.stats.scrape_passes - 1) % every == 0

    def _scrape(self):
        self.stats.scrape_passes += 1

        if self._should_materialize():
            self.materialize(
                self.browser,
                max_steps=self.settings.max_scroll_steps,
                sleep=self.sleep,
            )

        records = self.extractor(self.browser)
        now = self.clock()
        snapshot = ScrapeSnapshot(
            records=tuple(records),
            taken_at=datetime.fromtimestamp(now, timezone.utc),
            scrape_number=self.stats.total_scrapes,
        )
        self.snapshot = snapshot
        self.stats.last_scrape_time = snapshot.taken_at.isoformat()
        logger.info(f"[Scrape] Found {snapshot.item_count} items + {snapshot.option_count} options disabled")

        previous = self.reconciliation
        self.reconciliation = reconcile(snapshot, previous, self.sheet_sink.send, now)
        if self.reconciliation is not previous:
            self.stats.last_send_time = snapshot.taken_at.isoformat()

        self._persist_cookies()

    # ------------------------------------------------------------------
    # Recovery
    # ------------------------------------------------------------------

    def _escalate(self):
        logger.warning("[Scrape] Too many errors, refreshing page...")
        self.phase = LoopPhase.RELOADING
        self.stats.reloads += 1
        try:
            self.browser.reload(timeout=self.settings.reload_timeout)
            logger.info("[Scrape] Page reloaded")
        except Exception as e:
            logger.error(f"[Scrape] Reload failed: {e}")
            self.hard_restart()
        finally:
            self.stats.scrape_errors = 0

    def hard_restart(self):
        """
        Tear down and relaunch the browser with the saved cookies. The timer
        is suspended for the duration and always re-armed afterwards.
        Must be called with the tick lock held.
        """
        logger.warning("[Browser] Restarting...")
        self.phase = LoopPhase.RESTARTING
        self.stats.restarts += 1
        self.timer.stop()
        try:
            self.browser.close()
            self._setup_browser()
        except Exception as e:
            logger.error(f"[Browser] Restart failed: {e}", exc_info=True)
        finally:
            if not self._stopping:
                self.timer.start(initial_delay=self.settings.startup_delay)

    # ------------------------------------------------------------------
    # Operator actions (web UI)
    # ------------------------------------------------------------------

    def refresh(self):
        """Manual soft reload."""
        with self.exclusive() as browser:
            browser.reload(timeout=self.settings.reload_timeout)

    def request_login(self):
        with self.exclusive() as browser:
            request_login_email(
                browser,
                self.settings.login_url,
                self.settings.login_email,
                timeout=self.settings.reload_timeout,
            )

    def reauthenticate(self, magic_link):
        """
        Open a magic link, land on the menu and re-check the session.

        Returns:
            LoginState: The state after the attempt
        """
        with self.exclusive() as browser:
            open_magic_link(browser, magic_link, timeout=self.settings.navigation_timeout)
            self._persist_cookies()

            logger.info("[Auth] Magic link processed, navigating to menu...")
            self._navigate_to_menu()

            self.login_state = self.login_check(browser)
            if self.is_logged_in:
                self.login_alert_sent = False
            self._persist_cookies()

        logger.info(f"[Auth] Login status: {'SUCCESS' if self.is_logged_in else 'FAILED'}")
        if self.is_logged_in:
            self.alert_notifier.send(LOGGED_IN_MESSAGE)
        return self.login_state

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def status(self):
        records = self.snapshot.records if self.snapshot else ()
        return {
            "isLoggedIn": self.is_logged_in,
            "loginState": self.login_state.value,
            "phase": self.phase.value,
            "lastScrapeTime": self.stats.last_scrape_time,
            "lastSendTime": self.stats.last_send_time,
            "totalScrapes": self.stats.total_scrapes,
            "scrapeErrors": self.stats.scrape_errors,
            "reloads": self.stats.reloads,
            "restarts": self.stats.restarts,
            "disabledItems": sum(1 for r in records if r.kind is RecordKind.ITEM),
            "disabledOptions": sum(1 for r in records if r.kind is RecordKind.OPTION),
            "items": [r.to_dict() for r in records],
        }
