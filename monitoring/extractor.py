"""
Disabled Items Extractor

Parses the rendered menu page into DisabledRecord entries.

The page lists category header rows followed by the item rows that belong to
them, so the category of an item is whatever header came last. Rows are
therefore processed as a fold: each step receives the running category and
returns the (possibly updated) category plus the records the row produced.
"""

import re
import logging
from functools import partial
from bs4 import BeautifulSoup

from monitoring.models import (
    DisabledRecord,
    RecordKind,
    UNCATEGORIZED,
    UNKNOWN_OPTION_GROUP,
)
from monitoring.selectors import MENU_SELECTORS

logger = logging.getLogger(__name__)

DISABLED_TAG = "DISABLED"
DISABLED_CHOICE_TAG = re.compile(r"^DISABLED CHOICE\s*\(\d+\)$", re.IGNORECASE)


def _text(element):
    """Trimmed text content, empty string for a missing element."""
    if element is None:
        return ""
    return element.get_text().strip()


def _currency_token(currency):
    """Pattern for the currency code as a standalone token, not inside a word."""
    return r"(?<![^\W\d_])" + re.escape(currency) + r"(?![^\W\d_])"


def normalize_price(text, currency=MENU_SELECTORS.currency):
    """
    Strip the currency marker and turn non-breaking spaces into plain spaces.

    >>> normalize_price("ALL\\u00a01\\u00a0200")
    '1 200'
    """
    if not text:
        return ""
    text = re.sub(_currency_token(currency) + r"\s*", "", text, count=1, flags=re.IGNORECASE)
    return text.replace("\u00a0", " ").strip()


def clean_option_name(full_text, price, currency=MENU_SELECTORS.currency):
    """
    Option spans read like "Extra cheese (ALL 100)" - keep only the name.
    """
    full_text = full_text.strip()
    marker = _currency_token(currency)
    name = re.sub(r"\s*\([^)]*" + marker + r"[^)]*\)\s*$", "", full_text).strip()

    if name == full_text and price:
        name = full_text.replace(price, "", 1)
        name = re.sub(marker, "", name, flags=re.IGNORECASE)
        name = re.sub(r"[()]", "", name)
        name = name.replace("\u00a0", " ").strip()

    return re.sub(r",\s*$", "", name).strip()


# Choice strategies: given an option-group row, return the spans of its
# disabled choices. They are tried in order and the first non-empty result wins.

def disabled_attribute_spans(row, selectors=MENU_SELECTORS):
    return row.select(selectors.disabled_choice)


def styled_choice_spans(row, selectors=MENU_SELECTORS):
    """Choices rendered without the disabled attribute, marked only by class."""
    spans = []
    for span in row.select(selectors.choice_candidate):
        classes = " ".join(span.get("class") or [])
        if selectors.disabled_choice_class in classes or span.has_attr("disabled"):
            spans.append(span)
    return spans


DEFAULT_CHOICE_STRATEGIES = (disabled_attribute_spans, styled_choice_spans)


def find_disabled_choices(row, strategies=DEFAULT_CHOICE_STRATEGIES, selectors=MENU_SELECTORS):
    for strategy in strategies:
        spans = strategy(row, selectors)
        if spans:
            return spans
    return []


def read_tags(row, selectors=MENU_SELECTORS):
    return [_text(tag).upper() for tag in row.select(selectors.tag_label)]


def item_record(row, category, selectors=MENU_SELECTORS):
    """Record for a standalone disabled item, or None if it has no name."""
    name = _text(row.select_one(selectors.item_name))
    if not name:
        logger.debug("Skipping disabled item row without a name")
        return None

    return DisabledRecord(
        kind=RecordKind.ITEM,
        name=name,
        description=_text(row.select_one(selectors.item_description)),
        price=normalize_price(_text(row.select_one(selectors.price)), selectors.currency),
        category=category,
    )


def option_records(row, category, strategies=DEFAULT_CHOICE_STRATEGIES, selectors=MENU_SELECTORS):
    """Records for every disabled choice in an option-group row."""
    group_name = _text(row.select_one(selectors.option_group_name)) or UNKNOWN_OPTION_GROUP
    records = []

    for span in find_disabled_choices(row, strategies, selectors):
        price = normalize_price(_text(span.select_one(selectors.price)), selectors.currency)
        name = clean_option_name(_text(span), price, selectors.currency)
        if not name:
            continue
        records.append(DisabledRecord(
            kind=RecordKind.OPTION,
            name=name,
            description=f"Option in: {group_name}",
            price=price,
            category=category,
            option_group=group_name,
        ))

    if not records:
        logger.debug(f"Option group '{group_name}' is tagged disabled but no choices were found")

    return records


def parse_row(category, row, selectors=MENU_SELECTORS, strategies=DEFAULT_CHOICE_STRATEGIES):
    """
    One fold step.

    Returns:
        tuple: (category for the following rows, records from this row)
    """
    header = row.select_one(selectors.category_header)
    if header is not None:
        return (_text(header) or category), []

    tags = read_tags(row, selectors)
    records = []

    if any(tag == DISABLED_TAG for tag in tags):
        record = item_record(row, category, selectors)
        if record is not None:
            records.append(record)

    if any(DISABLED_CHOICE_TAG.match(tag) for tag in tags):
        records.extend(option_records(row, category, strategies, selectors))

    return category, records


def fold_rows(rows, initial_category, step):
    """
    Thread the running category through the rows, collecting emitted records.

    Returns:
        tuple: (final category, list of records in row order)
    """
    category = initial_category
    records = []
    for row in rows:
        category, emitted = step(category, row)
        records.extend(emitted)
    return category, records


def extract_from_html(html_content, selectors=MENU_SELECTORS, strategies=DEFAULT_CHOICE_STRATEGIES):
    """
    Parse page HTML into disabled records. Unknown or malformed markup
    yields fewer records, never an exception.
    """
    soup = BeautifulSoup(html_content or "", "html.parser")
    rows = soup.select(selectors.row)
    step = partial(parse_row, selectors=selectors, strategies=strategies)
    _, records = fold_rows(rows, UNCATEGORIZED, step)
    return records


def extract(browser, selectors=MENU_SELECTORS, strategies=DEFAULT_CHOICE_STRATEGIES):
    """
    Read the current page in one round trip and extract disabled records.
    """
    return extract_from_html(browser.page_source(), selectors, strategies)
