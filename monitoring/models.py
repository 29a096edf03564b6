"""
Monitoring Data Models

Records produced by the extractor and the state values shared by the scrape loop.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

UNCATEGORIZED = "Uncategorized"
UNKNOWN_OPTION_GROUP = "Unknown Option Group"


class RecordKind(str, Enum):
    ITEM = "item"
    OPTION = "option"


class LoginState(str, Enum):
    UNKNOWN = "unknown"
    AUTHENTICATED = "authenticated"
    EXPIRED = "expired"


class LoopPhase(str, Enum):
    IDLE = "idle"
    CHECKING = "checking"
    SCRAPING = "scraping"
    RELOADING = "reloading"
    RESTARTING = "restarting"


@dataclass(frozen=True)
class DisabledRecord:
    """One disabled menu item, or one disabled choice inside an option group."""

    kind: RecordKind
    name: str
    description: str = ""
    price: str = ""
    category: str = UNCATEGORIZED
    option_group: Optional[str] = None

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("DisabledRecord.name must be non-empty")
        if self.kind is RecordKind.OPTION and not (self.option_group or "").strip():
            raise ValueError("Option records require an option_group")

    def to_dict(self):
        """JSON shape sent to the sheet sink and the status API."""
        data = {
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "category": self.category,
            "type": self.kind.value,
        }
        if self.kind is RecordKind.OPTION:
            data["optionGroup"] = self.option_group
        return data


@dataclass(frozen=True)
class ScrapeSnapshot:
    records: Tuple[DisabledRecord, ...]
    taken_at: datetime
    scrape_number: int

    @property
    def item_count(self):
        return sum(1 for r in self.records if r.kind is RecordKind.ITEM)

    @property
    def option_count(self):
        return sum(1 for r in self.records if r.kind is RecordKind.OPTION)

    def is_empty(self):
        return not self.records


@dataclass(frozen=True)
class ReconciliationState:
    min_resend_interval: float
    last_sent_fingerprint: str = ""
    last_sent_at: Optional[float] = None


@dataclass
class LoopStats:
    """Counters and timestamps read by the status surface."""

    total_scrapes: int = 0
    scrape_passes: int = 0
    scrape_errors: int = 0
    last_scrape_time: Optional[str] = None
    last_send_time: Optional[str] = None
    restarts: int = 0
    reloads: int = 0
