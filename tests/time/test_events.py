"""Tests for the event calendar."""

import pytest

from chronostep.exceptions import EmptyQueueError, PrecondNegativeRecurrence
from chronostep.time import EventQueue, ScheduledEvent


def test_scheduled_event():
    """Tests for ScheduledEvent class."""
    event = ScheduledEvent(10, "drought", 3)
    assert event.fire_time == 10.0
    assert event.label == "drought"
    assert event.recurrence_interval == 3.0
    assert event.recurring

    one_shot = ScheduledEvent(10, "flood")
    assert one_shot.recurrence_interval == 0.0
    assert not one_shot.recurring

    with pytest.raises(PrecondNegativeRecurrence, match="recurrence interval"):
        ScheduledEvent(1.0, "bad", -1.0)

    # comparison for sorting
    event1 = ScheduledEvent(10, "a")
    event2 = ScheduledEvent(10, "b")
    assert event1 < event2  # based on just unique_id as tiebreaker

    event1 = ScheduledEvent(11, "a")
    event2 = ScheduledEvent(10, "b")
    assert event2 < event1

    following = event.next_occurrence()
    assert following.fire_time == 13.0
    assert following.label == "drought"
    assert following.recurrence_interval == 3.0
    assert following.unique_id > event.unique_id


def test_eventqueue():
    """Tests for EventQueue."""
    queue = EventQueue()
    assert queue.empty()
    assert len(queue) == 0

    # insert
    event = queue.insert(1.0, "a")
    assert len(queue) == 1
    assert event in queue
    assert not queue.empty()

    with pytest.raises(PrecondNegativeRecurrence):
        queue.insert(2.0, "b", -0.5)
    assert len(queue) == 1

    # peek
    queue = EventQueue()
    for t in [5.0, 15.0, 10.0, 25.0, 20.0, 8.0]:
        queue.insert(t, f"e{t}")
    assert queue.peek_time() == 5.0
    assert queue.peek_label() == "e5.0"
    assert len(queue) == 6  # peeking does not remove

    events = queue.peek_ahead(3)
    assert [e.fire_time for e in events] == [5.0, 8.0, 10.0]
    assert len(queue.peek_ahead(10)) == 6

    # pop in chronological order
    times = []
    while not queue.empty():
        times.append(queue.pop().fire_time)
    assert times == sorted(times)

    # clear
    queue.insert(1.0, "a")
    queue.clear()
    assert queue.empty()


def test_empty_queue_fails_loudly():
    """Peeking an empty queue raises instead of returning a sentinel."""
    queue = EventQueue()
    with pytest.raises(EmptyQueueError):
        queue.peek_time()
    with pytest.raises(EmptyQueueError):
        queue.peek_label()
    with pytest.raises(IndexError):
        queue.peek_ahead()
    with pytest.raises(EmptyQueueError):
        queue.reschedule_top(1.0)

    # popping an empty queue is a no-op
    assert queue.pop() is None
    assert queue.empty()


def test_simultaneous_events_keep_insertion_order():
    """Events at the same instant come out in the order they were inserted."""
    queue = EventQueue()
    queue.insert(5.0, "first")
    queue.insert(3.0, "early")
    queue.insert(5.0, "second")
    queue.insert(5.0, "third")

    assert [queue.pop().label for _ in range(4)] == [
        "early",
        "first",
        "second",
        "third",
    ]


def test_recurring_event_reinserts_itself():
    """Popping a recurring event queues its next occurrence."""
    queue = EventQueue()
    queue.insert(4.0, "recurring", 3.0)

    fired = []
    for _ in range(5):
        event = queue.pop()
        fired.append((event.fire_time, event.label))
        assert len(queue) == 1

    assert fired == [(4.0 + 3.0 * i, "recurring") for i in range(5)]
    assert queue.peek_time() == 19.0
    assert queue.peek().recurrence_interval == 3.0


def test_recurring_event_follows_events_already_at_that_time():
    """A re-inserted occurrence ties after events queued earlier for the same instant."""
    queue = EventQueue()
    queue.insert(10.0, "large")
    queue.insert(7.0, "recurring", 3.0)

    assert queue.pop().label == "recurring"
    assert queue.pop().label == "large"
    assert queue.peek_time() == 10.0
    assert queue.peek_label() == "recurring"


def test_reschedule_top():
    """reschedule_top pushes a copy of the earliest event and keeps the original."""
    queue = EventQueue()
    queue.insert(2.0, "a", 1.5)
    queue.insert(6.0, "b")

    assert queue.reschedule_top(3.0) == 5.0
    assert len(queue) == 3
    assert queue.peek_time() == 2.0

    labels = [(e.fire_time, e.label, e.recurrence_interval) for e in queue]
    assert labels == [(2.0, "a", 1.5), (5.0, "a", 1.5), (6.0, "b", 0.0)]


def test_repr():
    """The representation lists events in firing order."""
    queue = EventQueue()
    queue.insert(2.0, "b")
    queue.insert(1.0, "a")
    text = repr(queue)
    assert text.startswith("EventQueue([")
    assert text.index("'a'") < text.index("'b'")


def test_nan_times_and_intervals_are_rejected():
    """A NaN fire time would block the queue and a NaN interval would drop recurrence."""
    queue = EventQueue()
    with pytest.raises(ValueError, match="fire time"):
        queue.insert(float("nan"), "bad")
    with pytest.raises(PrecondNegativeRecurrence):
        queue.insert(1.0, "bad", float("nan"))
    with pytest.raises(PrecondNegativeRecurrence):
        queue.insert(1.0, "bad", float("inf"))
    assert queue.empty()

    queue.insert(1.0, "ok", 2.0)
    assert queue.pop().recurring
    assert queue.peek_time() == 3.0
