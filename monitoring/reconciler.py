"""
Reconciler

Decides whether a fresh snapshot should be pushed to the sheet. A push
happens when the set of disabled entries changed, or when the last push is
older than the minimum resend interval. Empty snapshots are never pushed.
"""

import json
import hashlib
import logging
from dataclasses import replace

logger = logging.getLogger(__name__)


def fingerprint(records):
    """
    Order-independent hash of the (kind, name) pairs of a record sequence.
    Duplicates count, so two identical entries differ from one.
    """
    keys = sorted(f"{r.kind.value}:{r.name}" for r in records)
    return hashlib.sha256(json.dumps(keys).encode("utf-8")).hexdigest()


def should_send(current_fingerprint, state, now):
    if current_fingerprint != state.last_sent_fingerprint:
        return True
    if state.last_sent_at is None:
        return True
    return now - state.last_sent_at >= state.min_resend_interval


def reconcile(snapshot, state, sink_send, now):
    """
    Push the snapshot through sink_send if it is new or due for a resend.

    The returned state records the attempt whether or not the sink call
    succeeds; the sink is fire-and-forget.

    Args:
        snapshot (ScrapeSnapshot): Latest extraction result
        state (ReconciliationState): State after the previous reconcile
        sink_send (callable): Called with the snapshot when a push is due
        now (float): Current time in seconds

    Returns:
        ReconciliationState: The new state (the same object if nothing was sent)
    """
    if snapshot.is_empty():
        return state

    current = fingerprint(snapshot.records)
    if not should_send(current, state, now):
        logger.debug("No changes since last send and resend interval not reached")
        return state

    new_state = replace(state, last_sent_fingerprint=current, last_sent_at=now)
    try:
        sink_send(snapshot)
    except Exception as e:
        logger.error(f"Sheet send could not be dispatched: {e}")
    return new_state
