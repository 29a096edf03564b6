"""
List Materializer

The menu is a virtualized list: rows only exist in the DOM once they have
been scrolled into view. Scrolling to the end in steps forces every row to
render at least once.
"""

import time
import logging

from monitoring.selectors import SCROLL_SELECTORS

logger = logging.getLogger(__name__)

STABLE_STEPS_TO_STOP = 3

READ_OFFSET_JS = """
const container = document.querySelector(arguments[0]);
if (!container) { return window.scrollY || document.documentElement.scrollTop || 0; }
return container.scrollTop;
"""

SCROLL_STEP_JS = """
const container = document.querySelector(arguments[0]);
if (!container) { window.scrollBy(0, arguments[1]); return; }
container.scrollTop += arguments[1];
"""

MEASURE_HEIGHT_JS = """
const container = document.querySelector(arguments[0]);
if (!container) { return document.documentElement.scrollHeight; }
return container.scrollHeight;
"""

RESTORE_OFFSET_JS = """
const container = document.querySelector(arguments[0]);
if (!container) { window.scrollTo(0, arguments[1]); return; }
container.scrollTop = arguments[1];
"""


def materialize_list(browser, max_steps=50, step_px=800, settle_seconds=0.3,
                     sleep=time.sleep, container_selector=SCROLL_SELECTORS.container):
    """
    Scroll the list container to its end so every row gets rendered.

    Stops after max_steps, or earlier once the content height has not changed
    for three consecutive steps. The starting scroll offset is always restored.

    Args:
        browser: Controlled browser handle
        max_steps (int): Upper bound on scroll steps
        step_px (int): Pixels to advance per step
        settle_seconds (float): Wait after each step for new rows to render
        sleep (callable): Sleep function, injectable for tests
        container_selector (str): CSS selector of the scrollable list

    Returns:
        int: Number of scroll steps taken
    """
    origin = browser.evaluate(READ_OFFSET_JS, container_selector) or 0
    steps = 0
    last_height = None
    stable_count = 0

    try:
        while steps < max_steps:
            browser.evaluate(SCROLL_STEP_JS, container_selector, step_px)
            steps += 1
            sleep(settle_seconds)
            height = browser.evaluate(MEASURE_HEIGHT_JS, container_selector)

            if height == last_height:
                stable_count += 1
                if stable_count >= STABLE_STEPS_TO_STOP:
                    logger.debug(f"List height stable at {height}px after {steps} steps")
                    break
            else:
                stable_count = 0
            last_height = height
        else:
            logger.info(f"List materialization hit the {max_steps}-step cap")
    finally:
        browser.evaluate(RESTORE_OFFSET_JS, container_selector, origin)

    return steps
