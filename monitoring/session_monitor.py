"""
Session Monitor

Decides whether the browser is still looking at the authenticated menu or
has been bounced to a login prompt.
"""

import logging
from bs4 import BeautifulSoup

from monitoring.models import LoginState
from monitoring.selectors import LOGIN_MARKERS

logger = logging.getLogger(__name__)


def find_login_markers(url, html_content, markers=LOGIN_MARKERS):
    """
    List the login-page indicators present in a URL and page source.
    """
    found = []

    for fragment in markers.url_fragments:
        if fragment in (url or ""):
            found.append(f"URL contains '{fragment}'")

    soup = BeautifulSoup(html_content or "", "html.parser")

    for selector in markers.selectors:
        if soup.select_one(selector) is not None:
            found.append(f"Page has element '{selector}'")

    body = soup.body or soup
    page_text = body.get_text()
    for text in markers.texts:
        if text in page_text:
            found.append(f"Page text contains '{text}'")

    return found


def check_login(browser, markers=LOGIN_MARKERS):
    """
    Inspect the current page for login markers.

    Any error while inspecting counts as not authenticated.

    Returns:
        LoginState: AUTHENTICATED or EXPIRED
    """
    try:
        found = find_login_markers(browser.current_url(), browser.page_source(), markers)
    except Exception as e:
        logger.warning(f"Login check failed, treating session as expired: {e}")
        return LoginState.EXPIRED

    if found:
        logger.info(f"Login page detected: {'; '.join(found)}")
        return LoginState.EXPIRED

    return LoginState.AUTHENTICATED
