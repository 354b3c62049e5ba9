import pytest

from core.event_log import EventLog
from models import LogCategory


def test_duplicate_message_within_window_is_dropped(clock):
    log = EventLog(capacity=10, dedup_window_ms=500, clock=clock)
    assert log.append("Purchased 50 coins", LogCategory.PURCHASE) is not None
    clock.advance(0.2)
    assert log.append("Purchased 50 coins", LogCategory.PURCHASE) is None
    assert len(log) == 1


def test_dedup_ignores_category(clock):
    log = EventLog(capacity=10, clock=clock)
    log.append("same text", LogCategory.SYSTEM)
    assert log.append("same text", LogCategory.INFO) is None


def test_duplicate_message_after_window_is_kept(clock):
    log = EventLog(capacity=10, dedup_window_ms=500, clock=clock)
    log.append("Purchased 50 coins", LogCategory.PURCHASE)
    clock.advance(0.5)
    assert log.append("Purchased 50 coins", LogCategory.PURCHASE) is not None
    assert len(log) == 2


def test_different_messages_are_not_deduplicated(clock):
    log = EventLog(capacity=10, clock=clock)
    log.append("first", LogCategory.INFO)
    log.append("second", LogCategory.INFO)
    log.append("first", LogCategory.INFO)
    assert [entry.message for entry in log.entries()] == ["first", "second", "first"]


def test_capacity_evicts_oldest_first(clock):
    log = EventLog(capacity=3, clock=clock)
    for i in range(5):
        log.append(f"event {i}", LogCategory.INFO)
        assert len(log) <= 3
    assert [entry.message for entry in log.entries()] == ["event 2", "event 3", "event 4"]


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        EventLog(capacity=0)


def test_critical_view_filters_and_orders_newest_first(clock):
    log = EventLog(capacity=50, clock=clock)
    log.append("welcome", LogCategory.SYSTEM)
    clock.advance(1)
    log.append("matched", LogCategory.MATCH)
    log.append("note", LogCategory.INFO)
    clock.advance(1)
    log.append("bet placed", LogCategory.BET)
    assert [entry.message for entry in log.critical_view()] == ["bet placed", "welcome"]


def test_critical_view_keeps_one_entry_per_category_per_second(clock):
    log = EventLog(capacity=50, clock=clock)
    log.append("bought 50", LogCategory.PURCHASE)
    clock.advance(0.6)
    log.append("bought 100", LogCategory.PURCHASE)
    log.append("cashed out", LogCategory.WITHDRAW)
    view = log.critical_view()
    assert [entry.message for entry in view] == ["cashed out", "bought 100"]


def test_critical_view_is_capped_at_six(clock):
    log = EventLog(capacity=50, clock=clock)
    for i in range(10):
        log.append(f"bet {i}", LogCategory.BET)
        clock.advance(1)
    view = log.critical_view()
    assert len(view) == 6
    assert view[0].message == "bet 9"
    assert view[-1].message == "bet 4"


def test_time_label_is_wall_clock_seconds(clock):
    log = EventLog(capacity=5, clock=clock)
    entry = log.append("hello", LogCategory.INFO)
    assert len(entry.time_label) == 8
    assert entry.time_label.count(":") == 2


def test_clear_resets_dedup_state(clock):
    log = EventLog(capacity=5, clock=clock)
    log.append("hello", LogCategory.INFO)
    log.clear()
    assert len(log) == 0
    assert log.append("hello", LogCategory.INFO) is not None
