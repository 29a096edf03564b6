"""
Controlled Browser

Wraps a single Selenium Chrome session: navigation, script evaluation,
page source and screenshots, cookie transfer and cache housekeeping.
"""

import logging
import time

from selenium import webdriver
from selenium.webdriver.chrome.service import Service
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.common.by import By
from selenium.webdriver.support.ui import WebDriverWait
from selenium.webdriver.support import expected_conditions as EC
from selenium.common.exceptions import WebDriverException
from webdriver_manager.chrome import ChromeDriverManager

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
)

# Resource types we never need for reading the menu
BLOCKED_URL_PATTERNS = [
    "*.png", "*.jpg", "*.jpeg", "*.gif", "*.webp", "*.svg",
    "*.woff", "*.woff2", "*.ttf", "*.otf",
    "*.mp4", "*.webm", "*.mp3",
]

# Keys accepted by CDP Network.setCookies
CDP_COOKIE_KEYS = (
    "name", "value", "domain", "path", "secure", "httpOnly",
    "sameSite", "expires", "url", "priority",
)


class BrowserNotStartedError(RuntimeError):
    """Raised when the browser is used before launch() or after close()."""


def build_chrome_options(headless=True, window_size=(1280, 800)):
    """
    Chrome options for running inside a container.
    """
    chrome_options = Options()

    if headless:
        chrome_options.add_argument("--headless=new")

    chrome_options.add_argument("--no-sandbox")
    chrome_options.add_argument("--disable-setuid-sandbox")
    chrome_options.add_argument("--disable-dev-shm-usage")
    chrome_options.add_argument("--disable-gpu")
    chrome_options.add_argument("--disable-extensions")
    chrome_options.add_argument("--disable-background-networking")
    chrome_options.add_argument("--disable-default-apps")
    chrome_options.add_argument("--disable-sync")
    chrome_options.add_argument("--disable-translate")
    chrome_options.add_argument("--no-first-run")
    chrome_options.add_argument("--js-flags=--max-old-space-size=256")
    chrome_options.add_argument(f"--window-size={window_size[0]},{window_size[1]}")
    chrome_options.add_argument(f"--user-agent={USER_AGENT}")
    chrome_options.add_argument("--disable-blink-features=AutomationControlled")
    chrome_options.add_experimental_option("excludeSwitches", ["enable-automation"])
    chrome_options.add_experimental_option("useAutomationExtension", False)

    return chrome_options


def to_cdp_cookie(cookie):
    """Drop keys Network.setCookies rejects (size, session, ...)."""
    return {k: v for k, v in cookie.items() if k in CDP_COOKIE_KEYS and v is not None}


class ControlledBrowser:
    """
    One authenticated Chrome context.

    All methods must be called from a single thread at a time; the scrape
    loop serializes access with its tick lock.
    """

    def __init__(self, headless=True, driver_factory=None, script_timeout=30):
        self.headless = headless
        self.script_timeout = script_timeout
        self._driver_factory = driver_factory or self._create_driver
        self.driver = None

    def _create_driver(self):
        return webdriver.Chrome(
            service=Service(ChromeDriverManager().install()),
            options=build_chrome_options(headless=self.headless),
        )

    @property
    def is_running(self):
        return self.driver is not None

    def _require_driver(self):
        if self.driver is None:
            raise BrowserNotStartedError("Browser has not been launched")
        return self.driver

    def launch(self):
        """Start Chrome. Errors propagate to the caller."""
        logger.info("Launching browser...")
        driver = self._driver_factory()

        driver.set_script_timeout(self.script_timeout)
        driver.execute_cdp_cmd("Network.enable", {})
        driver.execute_cdp_cmd("Network.setUserAgentOverride", {"userAgent": USER_AGENT})
        driver.execute_cdp_cmd("Network.setBlockedURLs", {"urls": BLOCKED_URL_PATTERNS})
        driver.execute_cdp_cmd(
            "Page.addScriptToEvaluateOnNewDocument",
            {"source": "Object.defineProperty(navigator, 'webdriver', {get: () => undefined})"},
        )

        self.driver = driver
        logger.info("Browser launched successfully")

    def close(self):
        """Quit Chrome. Safe to call when already closed."""
        driver, self.driver = self.driver, None
        if driver is None:
            return
        try:
            driver.quit()
            logger.info("Browser closed")
        except WebDriverException as e:
            logger.warning(f"Error while closing browser: {e}")

    def navigate(self, url, timeout=60, settle_seconds=3.0):
        """
        Open a URL and wait for the page to load, then give the client-side
        app a moment to render.
        """
        driver = self._require_driver()
        logger.info(f"Navigating to {url}")
        driver.set_page_load_timeout(timeout)
        driver.get(url)
        if settle_seconds:
            time.sleep(settle_seconds)
        logger.info(f"Page loaded: {driver.current_url}")

    def reload(self, timeout=30):
        """Soft reload of the current page with a bounded page-load timeout."""
        driver = self._require_driver()
        driver.set_page_load_timeout(timeout)
        driver.refresh()

    def current_url(self):
        return self._require_driver().current_url

    def page_source(self):
        return self._require_driver().page_source

    def evaluate(self, script, *args):
        """Run a script in the page and return its result."""
        return self._require_driver().execute_script(script, *args)

    def screenshot(self, path):
        return self._require_driver().save_screenshot(str(path))

    def get_cookies(self):
        """All cookies of the browser context (not just the current domain)."""
        result = self._require_driver().execute_cdp_cmd("Network.getAllCookies", {})
        return result.get("cookies", [])

    def set_cookies(self, cookies):
        cookies = [to_cdp_cookie(c) for c in cookies]
        self._require_driver().execute_cdp_cmd("Network.setCookies", {"cookies": cookies})
        logger.info(f"Restored {len(cookies)} saved cookies")

    def clear_cache(self):
        self._require_driver().execute_cdp_cmd("Network.clearBrowserCache", {})
        logger.info("Cleared browser cache")

    def type_into(self, selector, text, timeout=10):
        """Wait for an input and type into it."""
        element = WebDriverWait(self._require_driver(), timeout).until(
            EC.presence_of_element_located((By.CSS_SELECTOR, selector))
        )
        element.clear()
        element.send_keys(text)

    def click_button_with_text(self, keywords):
        """
        Click the first button whose lower-cased text contains any keyword.

        Returns:
            bool: True if a button was clicked
        """
        buttons = self._require_driver().find_elements(By.CSS_SELECTOR, 'button[type="submit"], button')
        for button in buttons:
            text = (button.text or "").lower()
            if any(keyword in text for keyword in keywords):
                button.click()
                return True
        return False
