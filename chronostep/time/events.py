"""Event scheduling for event-aware integration.

This module provides the calendar of discrete events that interrupts continuous
integration. The EventQueue class is a priority queue that keeps scheduled events in
chronological order. Key features:

- Efficient insertion and removal of the earliest event using a heap queue
- Deterministic ordering of simultaneous events by insertion order
- Automatic re-insertion of recurring events when they are popped

The module contains two main components:
- ScheduledEvent: a labelled instant, optionally recurring at a fixed interval
- EventQueue: a heap-based priority queue of scheduled events
"""

from __future__ import annotations

import itertools
import math
from collections.abc import Iterator
from heapq import heappop, heappush, nsmallest

from chronostep.exceptions import EmptyQueueError, PrecondNegativeRecurrence


class ScheduledEvent:
    """A labelled instant in simulation time.

    Attributes:
        fire_time (float): The simulation time at which the event fires
        label (str): The name identifying what the event is
        recurrence_interval (float): Time until the event fires again, 0 means once
        unique_id (int): The unique identifier of the event, used as a tie-breaker

    """

    _ids = itertools.count()

    __slots__ = ("fire_time", "label", "recurrence_interval", "unique_id")

    def __init__(
        self, fire_time: float, label: str, recurrence_interval: float = 0.0
    ) -> None:
        """Initialize a scheduled event.

        Args:
            fire_time: the instant of time of the event
            label: the name of the event
            recurrence_interval: time between recurrences, 0 for a one-shot event

        Raises:
            ValueError: if fire_time is NaN
            PrecondNegativeRecurrence: if recurrence_interval is negative or not finite
        """
        if math.isnan(fire_time):
            raise ValueError(f"event '{label}' must have a fire time, got {fire_time}")
        if not (math.isfinite(recurrence_interval) and recurrence_interval >= 0):
            raise PrecondNegativeRecurrence(
                f"recurrence interval must be finite and >= 0, got {recurrence_interval}"
            )

        self.fire_time = float(fire_time)
        self.label = str(label)
        self.recurrence_interval = float(recurrence_interval)
        self.unique_id = next(self._ids)

    @property
    def recurring(self) -> bool:
        """Return whether the event reschedules itself after firing."""
        return self.recurrence_interval > 0

    def next_occurrence(self) -> ScheduledEvent:
        """Return a fresh copy of this event one recurrence interval later."""
        return ScheduledEvent(
            self.fire_time + self.recurrence_interval,
            self.label,
            self.recurrence_interval,
        )

    def __lt__(self, other):  # noqa
        # Define a total ordering for events to be used by the heapq
        return (self.fire_time, self.unique_id) < (other.fire_time, other.unique_id)

    def __repr__(self) -> str:  # noqa: D105
        return (
            f"ScheduledEvent(fire_time={self.fire_time}, label={self.label!r}, "
            f"recurrence_interval={self.recurrence_interval})"
        )


class EventQueue:
    """A calendar of scheduled events.

    This is a heap queue sorted list of events. Events are always removed from the left, so heapq is a performant and
    appropriate data structure. Events are sorted based on their fire time with their unique_id as a tie-breaker,
    so events scheduled for the same instant come out in the order they were inserted.

    """

    def __init__(self):
        """Initialize an empty event queue."""
        self._events: list[ScheduledEvent] = []

    def insert(
        self, time: float, label: str, recurrence: float = 0.0
    ) -> ScheduledEvent:
        """Schedule ``label`` at ``time``.

        No check is made against the current simulation time; consumers decide what
        an event in the past means.

        Args:
            time: the time at which the event fires
            label: the name of the event
            recurrence: interval at which the event recurs, 0 for a one-shot event

        Returns:
            ScheduledEvent: the event that was queued

        Raises:
            ValueError: if time is NaN
            PrecondNegativeRecurrence: if recurrence is negative or not finite
        """
        event = ScheduledEvent(time, label, recurrence)
        heappush(self._events, event)
        return event

    def peek(self) -> ScheduledEvent:
        """Return the earliest event without removing it.

        Raises:
            EmptyQueueError: If the queue is empty
        """
        if not self._events:
            raise EmptyQueueError("event queue is empty")
        return self._events[0]

    def peek_time(self) -> float:
        """Return the time of the earliest event."""
        return self.peek().fire_time

    def peek_label(self) -> str:
        """Return the label of the earliest event."""
        return self.peek().label

    def peek_ahead(self, n: int = 1) -> list[ScheduledEvent]:
        """Look at the first n events in firing order.

        Args:
            n (int): The number of events to look ahead

        Returns:
            list[ScheduledEvent]

        Raises:
            EmptyQueueError: If the queue is empty

        Notes:
            this method returns a shorter list than n if fewer than n events are queued.

        """
        if not self._events:
            raise EmptyQueueError("event queue is empty")
        return nsmallest(n, self._events)

    def pop(self) -> ScheduledEvent | None:
        """Remove and return the earliest event.

        A recurring event is put back in the queue one recurrence interval after the
        time it was scheduled for. Popping an empty queue does nothing and returns None.
        """
        if not self._events:
            return None

        event = heappop(self._events)
        if event.recurring:
            heappush(self._events, event.next_occurrence())
        return event

    def reschedule_top(self, delta: float) -> float:
        """Queue a copy of the earliest event ``delta`` later; the original stays.

        Args:
            delta: offset from the earliest event's fire time

        Returns:
            float: the fire time of the new copy

        Raises:
            EmptyQueueError: If the queue is empty
        """
        top = self.peek()
        copy = self.insert(top.fire_time + delta, top.label, top.recurrence_interval)
        return copy.fire_time

    def clear(self) -> None:
        """Remove all events."""
        self._events.clear()

    def empty(self) -> bool:
        """Return whether the queue is empty."""
        return not self._events

    def __contains__(self, event: ScheduledEvent) -> bool:  # noqa
        return event in self._events

    def __len__(self) -> int:  # noqa
        return len(self._events)

    def __iter__(self) -> Iterator[ScheduledEvent]:
        """Iterate over the queued events in firing order."""
        return iter(sorted(self._events))

    def __repr__(self) -> str:
        """Return a string representation of the event queue."""
        events_str = ", ".join(
            f"(time={e.fire_time}, label={e.label!r}, id={e.unique_id})"
            for e in sorted(self._events)
        )
        return f"EventQueue([{events_str}])"
