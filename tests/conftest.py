"""
Shared fixtures: a scriptable browser, a manual timer and recording sinks,
so the scrape loop can be exercised without Chrome or the network.
"""

import dataclasses

import pytest

from config.settings import Settings
from monitoring.scrape_loop import ScrapeLoop
from tests.fakes import (
    MENU_URL,
    FakeBrowser,
    FakeClock,
    ManualTimer,
    MemorySessionStore,
    RecordingAlerts,
    RecordingSink,
    make_record,
)


@pytest.fixture
def settings():
    return dataclasses.replace(
        Settings(),
        menu_url=MENU_URL,
        scrape_interval=20,
        sheet_send_interval=300,
        startup_delay=0,
        materialize_every=5,
        error_threshold=5,
        cache_clear_every=50,
        max_scroll_steps=10,
    )


@pytest.fixture
def browser():
    return FakeBrowser()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def alerts():
    return RecordingAlerts()


@pytest.fixture
def session_store():
    return MemorySessionStore(cookies=[{"name": "session", "value": "saved"}])


@pytest.fixture
def extracted():
    """Records the fake extractor returns; tests mutate this list."""
    return [make_record("Pizza")]


@pytest.fixture
def loop_factory(settings, browser, session_store, sink, alerts, clock, extracted):
    def factory(**overrides):
        calls = {"materialize": 0, "extract": 0}

        def fake_materialize(browser, max_steps=50, sleep=None, **kwargs):
            calls["materialize"] += 1
            return 0

        def fake_extract(browser):
            calls["extract"] += 1
            return list(extracted)

        kwargs = dict(
            settings=settings,
            browser=browser,
            session_store=session_store,
            sheet_sink=sink,
            alert_notifier=alerts,
            clock=clock,
            sleep=lambda seconds: None,
            timer_factory=ManualTimer,
            materialize=fake_materialize,
            extractor=fake_extract,
        )
        kwargs.update(overrides)
        loop = ScrapeLoop(**kwargs)
        loop.calls = calls
        return loop

    return factory


@pytest.fixture
def loop(loop_factory):
    return loop_factory()


@pytest.fixture
def database(tmp_path):
    """Fresh SQLite database for each test."""
    from config import database as db

    db.configure_database(f"sqlite:///{tmp_path / 'test.db'}")
    db.init_database()
    yield db
    db.engine.dispose()
