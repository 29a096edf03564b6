#!/usr/bin/env python3
"""
Capture the menu page for selector maintenance.

Opens the menu with the saved session cookies, scrolls the list fully,
saves the rendered HTML and a screenshot, and prints what the extractor
finds. Run it when the site changes its markup.

Usage: python scripts/capture_page.py [output_dir]
"""

import os
import sys
import logging
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

from config.settings import Settings
from monitoring.browser import ControlledBrowser
from monitoring.extractor import extract_from_html
from monitoring.materializer import materialize_list
from monitoring.session_monitor import check_login
from monitoring.session_store import SessionStore

def main():
    output_dir = sys.argv[1] if len(sys.argv) > 1 else "html_examples"
    os.makedirs(output_dir, exist_ok=True)

    settings = Settings.from_env()
    browser = ControlledBrowser(headless=settings.headless)

    try:
        browser.launch()
        cookies = SessionStore(settings.cookie_path).load()
        if cookies:
            browser.set_cookies(cookies)
        browser.navigate(settings.menu_url, timeout=settings.navigation_timeout)

        print(f"Login state: {check_login(browser).value}")

        steps = materialize_list(browser, max_steps=settings.max_scroll_steps)
        print(f"Scrolled {steps} steps")

        html = browser.page_source()
        html_path = os.path.join(output_dir, "menu.html")
        with open(html_path, "w", encoding="utf-8") as f:
            f.write(html)
        print(f"Saved HTML to {html_path}")

        screenshot_path = os.path.join(output_dir, "menu.png")
        browser.screenshot(screenshot_path)
        print(f"Saved screenshot to {screenshot_path}")

        records = extract_from_html(html)
        print(f"\n{'=' * 60}")
        print(f"Extracted {len(records)} disabled entries")
        print(f"{'=' * 60}")
        for record in records:
            if record.option_group:
                print(f"  ↳ [{record.option_group}] {record.name} ({record.price})")
            else:
                print(f"  {record.name} - {record.price} ({record.category})")

    except KeyboardInterrupt:
        print("\n\nCapture interrupted by user")
    finally:
        browser.close()

if __name__ == "__main__":
    main()
