"""
Login Flow

The merchant site signs in with magic links: we submit the account email,
the site mails a one-time link, and the operator pastes that link back into
the dashboard. Opening the link in the controlled browser sets the session
cookies.
"""

import time
import logging

logger = logging.getLogger(__name__)

EMAIL_INPUT_SELECTOR = 'input[type="email"], input[name="email"]'
SUBMIT_KEYWORDS = ("next", "continue", "sign", "log", "send")


class LoginFlowError(RuntimeError):
    """Raised when the login page does not behave as expected."""


def request_login_email(browser, login_url, email, timeout=30, settle_seconds=2.0):
    """
    Fill in the email on the login page and submit it so the site mails a
    magic link.
    """
    if not email:
        raise LoginFlowError("LOGIN_EMAIL is not configured")

    logger.info("[Auth] Requesting login email...")
    browser.navigate(login_url, timeout=timeout)
    browser.type_into(EMAIL_INPUT_SELECTOR, email)

    if not browser.click_button_with_text(SUBMIT_KEYWORDS):
        raise LoginFlowError("Could not find a submit button on the login page")

    time.sleep(settle_seconds)
    logger.info(f"[Auth] Login email requested for: {email}")


def open_magic_link(browser, magic_link, timeout=60):
    """Open the emailed link so the site can set its session cookies."""
    magic_link = (magic_link or "").strip()
    if not magic_link.startswith(("http://", "https://")):
        raise LoginFlowError("Magic link must be an http(s) URL")

    logger.info("[Auth] Navigating to magic link...")
    browser.navigate(magic_link, timeout=timeout)
