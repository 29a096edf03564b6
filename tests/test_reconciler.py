"""
Tests for the send-or-skip decision.
"""

from datetime import datetime, timezone

from monitoring.models import (
    DisabledRecord,
    RecordKind,
    ReconciliationState,
    ScrapeSnapshot,
)
from monitoring.reconciler import fingerprint, reconcile, should_send


def snapshot(*records):
    return ScrapeSnapshot(
        records=tuple(records),
        taken_at=datetime(2025, 3, 16, 8, 30, tzinfo=timezone.utc),
        scrape_number=1,
    )


PIZZA = DisabledRecord(kind=RecordKind.ITEM, name="Pizza")
CHEESE = DisabledRecord(kind=RecordKind.OPTION, name="Cheese", option_group="Toppings")
CHEESE_ITEM = DisabledRecord(kind=RecordKind.ITEM, name="Cheese")


class Recorder:
    def __init__(self, error=None):
        self.sent = []
        self.error = error

    def __call__(self, snap):
        self.sent.append(snap)
        if self.error:
            raise self.error


def test_fingerprint_ignores_order_and_extra_fields():
    described = DisabledRecord(kind=RecordKind.ITEM, name="Pizza", description="Large", price="900")

    assert fingerprint([PIZZA, CHEESE]) == fingerprint([CHEESE, described])


def test_fingerprint_distinguishes_kind_and_duplicates():
    assert fingerprint([CHEESE]) != fingerprint([CHEESE_ITEM])
    assert fingerprint([PIZZA]) != fingerprint([PIZZA, PIZZA])


def test_first_non_empty_snapshot_is_sent():
    sink = Recorder()
    state = ReconciliationState(min_resend_interval=300)

    new_state = reconcile(snapshot(PIZZA), state, sink, now=1000)

    assert len(sink.sent) == 1
    assert new_state.last_sent_at == 1000
    assert new_state.last_sent_fingerprint == fingerprint([PIZZA])
    assert state.last_sent_at is None


def test_empty_snapshot_is_never_sent():
    sink = Recorder()
    state = ReconciliationState(min_resend_interval=0)

    assert reconcile(snapshot(), state, sink, now=1000) is state
    assert sink.sent == []


def test_unchanged_snapshot_waits_for_resend_interval():
    sink = Recorder()
    state = reconcile(snapshot(PIZZA), ReconciliationState(min_resend_interval=300), sink, now=1000)

    assert reconcile(snapshot(PIZZA), state, sink, now=1299) is state
    assert len(sink.sent) == 1

    resent = reconcile(snapshot(PIZZA), state, sink, now=1300)
    assert len(sink.sent) == 2
    assert resent.last_sent_at == 1300


def test_change_is_sent_regardless_of_interval():
    sink = Recorder()
    state = reconcile(snapshot(PIZZA), ReconciliationState(min_resend_interval=300), sink, now=1000)

    reconcile(snapshot(PIZZA, CHEESE), state, sink, now=1001)

    assert len(sink.sent) == 2


def test_sink_failure_still_records_attempt():
    sink = Recorder(error=RuntimeError("pool closed"))
    state = ReconciliationState(min_resend_interval=300)

    new_state = reconcile(snapshot(PIZZA), state, sink, now=1000)

    assert new_state.last_sent_at == 1000


def test_should_send_without_previous_send():
    state = ReconciliationState(min_resend_interval=300, last_sent_fingerprint="abc")

    assert should_send("abc", state, now=0)
