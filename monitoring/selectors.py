"""
Page Selectors

CSS selectors and text markers for the merchant menu page. The class-name
fragments are generated by the site's build and change between releases;
update them here (see scripts/capture_page.py) rather than in the parsers.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class MenuSelectors:
    row: str = '[class*="gQlFER"]'
    category_header: str = '[class*="itoaO"]'
    tag_label: str = '[class*="al-Tag-lbl-d84"]'
    item_name: str = '[class*="hgTNKZ"], [class*="al-t-caption-label"]'
    item_description: str = '[class*="iWwtCn"]'
    price: str = '[class*="cgreXg"]'
    option_group_name: str = '[class*="al-t-caption-label"]'
    disabled_choice: str = "span[disabled]"
    choice_candidate: str = 'span[dir="auto"][lang]'
    disabled_choice_class: str = "jQyrIl"
    currency: str = "ALL"


@dataclass(frozen=True)
class LoginMarkers:
    url_fragments: Tuple[str, ...] = ("/login", "/auth")
    selectors: Tuple[str, ...] = ('input[type="email"]', '[class*="login"]')
    texts: Tuple[str, ...] = ("Sign in", "Log in")


@dataclass(frozen=True)
class ScrollSelectors:
    container: str = '[class*="virtual-list"], [style*="overflow"]'


MENU_SELECTORS = MenuSelectors()
LOGIN_MARKERS = LoginMarkers()
SCROLL_SELECTORS = ScrollSelectors()
