import logging
import random

import pytest

from login_ledger.config import DEFAULT_ALERT_MESSAGE
from login_ledger.ledger import LedgerStore, UndoHistory
from login_ledger.models import Alert


def fail(store, ip, ts="2025-11-23 14:00", user="root"):
    return store.record_attempt(user, ip, ts, False)


def test_third_failure_creates_exactly_one_alert(store):
    assert fail(store, "10.0.0.5", "t1") is None
    assert fail(store, "10.0.0.5", "t2") is None
    alert = fail(store, "10.0.0.5", "t3")
    assert alert == Alert("10.0.0.5", DEFAULT_ALERT_MESSAGE, "t3")
    assert fail(store, "10.0.0.5", "t4") is None
    assert store.list_backlog() == [alert]
    assert store.failure_count("10.0.0.5") == 4


def test_successes_do_not_count(store):
    for _ in range(5):
        store.record_attempt("alice", "10.0.0.7", "t", True)
    assert store.failure_count("10.0.0.7") == 0
    assert store.failure_counts() == {}
    assert store.list_backlog() == []
    assert len(store.list_events()) == 5


def test_failure_counter_matches_failed_events():
    rng = random.Random(7)
    store = LedgerStore()
    ips = ["1.1.1.1", "2.2.2.2", "3.3.3.3"]
    alerted = []
    for i in range(60):
        ip = rng.choice(ips)
        success = rng.random() < 0.3
        alert = store.record_attempt(f"user{i}", ip, str(i), success)
        failed_so_far = sum(1 for e in store.list_events() if e.ip_address == ip and not e.success)
        assert store.failure_count(ip) == failed_so_far
        if alert is not None:
            assert failed_so_far == 3
            alerted.append(ip)
    assert sorted(alerted) == sorted(set(alerted))


def test_alerts_are_per_address(store):
    for ip in ("a", "b", "a", "b", "a", "b"):
        fail(store, ip)
    assert [a.ip_address for a in store.list_backlog()] == ["a", "b"]


def test_custom_threshold_and_callback():
    seen = []
    store = LedgerStore(threshold=1, alert_message="boom", on_alert=seen.append)
    alert = fail(store, "9.9.9.9")
    assert alert.message == "boom"
    assert seen == [alert]


def test_inputs_are_accepted_verbatim(store):
    store.record_attempt("", "not an ip", "yesterday-ish", False)
    assert store.list_events()[0].ip_address == "not an ip"


def test_sort_is_case_insensitive_and_stable(store):
    for i, user in enumerate(["bob", "Alice", "alice", "Zed"]):
        store.record_attempt(user, "1.1.1.1", str(i), True)
    assert store.sort_by_identity() is True
    assert [e.username for e in store.list_events()] == ["Alice", "alice", "bob", "Zed"]


def test_sort_keeps_order_of_equal_keys(store):
    for i, user in enumerate(["b", "A", "a", "B", "a"]):
        store.record_attempt(user, "ip", str(i), True)
    store.sort_by_identity()
    assert [(e.username, e.timestamp) for e in store.list_events()] == [
        ("A", "1"), ("a", "2"), ("a", "4"), ("b", "0"), ("B", "3"),
    ]


def test_sort_with_fewer_than_two_events_is_noop(store):
    assert store.sort_by_identity() is False
    store.record_attempt("x", "ip", "t", True)
    assert store.sort_by_identity() is False
    assert len(store.list_events()) == 1


def test_list_events_is_a_snapshot(store):
    store.record_attempt("x", "ip", "t", True)
    events = store.list_events()
    events.clear()
    assert len(store.list_events()) == 1


def test_dismiss_and_undo_on_empty_are_noops(store):
    assert store.dismiss_next() is None
    assert store.undo_last_dismissal() is None
    assert store.list_backlog() == []
    assert store.list_dismissed() == []


def test_dismiss_is_fifo_and_undo_is_lifo(store):
    for ip in ("a", "b", "c"):
        for _ in range(3):
            fail(store, ip)
    a1, a2, a3 = store.list_backlog()
    assert store.dismiss_next() == a1
    assert store.dismiss_next() == a2
    assert store.list_dismissed() == [a1, a2]
    assert store.undo_last_dismissal() == a2
    assert store.list_backlog() == [a3, a2]
    assert store.list_dismissed() == [a1]


def test_undo_reappends_to_tail(store):
    for ip in ("a", "b"):
        for _ in range(3):
            fail(store, ip)
    a1, a2 = store.list_backlog()
    assert store.dismiss_next() == a1
    assert store.undo_last_dismissal() == a1
    assert store.list_backlog() == [a2, a1]


def test_dismiss_undo_never_loses_or_duplicates_alerts():
    rng = random.Random(11)
    store = LedgerStore()
    created = []
    for i in range(8):
        for _ in range(3):
            alert = fail(store, f"10.0.0.{i}", ts=str(i))
        created.append(alert)
    for _ in range(200):
        if rng.random() < 0.5:
            store.dismiss_next()
        else:
            store.undo_last_dismissal()
        backlog = store.list_backlog()
        dismissed = store.list_dismissed()
        assert sorted(backlog + dismissed, key=str) == sorted(created, key=str)
        assert not set(backlog) & set(dismissed)


def test_has_data_and_summary(store):
    assert store.has_data() is False
    assert str(store.summary()) == "Logs=0 | Alerts pending=0 | Dismissed=0"
    for _ in range(3):
        fail(store, "ip")
    store.dismiss_next()
    summary = store.summary()
    assert store.has_data() is True
    assert (summary.event_count, summary.pending_alert_count, summary.dismissed_count) == (3, 0, 1)


def test_has_data_with_only_counters():
    store = LedgerStore.from_state(failures={"ip": 2})
    assert store.has_data() is True
    assert store.list_events() == []


def test_from_state_rebuilds_undo_top():
    a, b = Alert("a", "m", "1"), Alert("b", "m", "2")
    store = LedgerStore.from_state(dismissed=[a, b])
    assert store.undo_last_dismissal() == b


def test_undo_history_stack():
    history = UndoHistory()
    assert not history
    assert history.pop() is None
    a, b = Alert("a"), Alert("b")
    history.push(a)
    history.push(b)
    assert len(history) == 2
    assert history.peek() == b
    assert list(history.bottom_to_top()) == [a, b]
    assert history.pop() == b
    assert history.pop() == a


def test_non_positive_threshold_rejected():
    with pytest.raises(ValueError):
        LedgerStore(threshold=0)


def test_sort_folds_case_beyond_ascii(store):
    # LATIN SMALL LETTER LONG S folds to "s"
    for user in ("sb", "ſa"):
        store.record_attempt(user, "ip", "t", True)
    store.sort_by_identity()
    assert [e.username for e in store.list_events()] == ["ſa", "sb"]


def test_alert_is_logged_with_ip_and_attempts(store, caplog):
    with caplog.at_level(logging.INFO, logger="login_ledger"):
        for _ in range(3):
            fail(store, "10.0.0.5")
    assert "ALERT for IP 10.0.0.5 after 3 failed attempts" in caplog.text
    assert "FAILED_LOGIN from 10.0.0.5" in caplog.text
