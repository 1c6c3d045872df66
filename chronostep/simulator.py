"""Simulation driver for event-aware integration.

The :class:`Simulator` owns the loop that callers would otherwise write by hand: step
the integrator, and whenever it stops on an event, call the handler registered for that
event's label so it can perturb the state before integration resumes. Runs can be
bounded by an end time, a duration, or a number of calls, and every call can be recorded
into a :class:`~chronostep.data_collection.TrajectoryRecorder`.
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chronostep.data_collection import TrajectoryRecorder
    from chronostep.integrators import EventAwareStepper
    from chronostep.time import ScheduledEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[["EventAwareStepper"], None]


class Simulator:
    """The Simulator drives an EventAwareStepper and dispatches its events.

    Attributes:
        stepper (EventAwareStepper): The integrator being driven
        recorder (TrajectoryRecorder | None): Receives a snapshot after every call to step

    """

    def __init__(
        self, stepper: EventAwareStepper, recorder: TrajectoryRecorder | None = None
    ):
        """Initialize a Simulator.

        Args:
            stepper: the integrator to drive
            recorder: optional recorder; the initial state is recorded immediately
        """
        self.stepper = stepper
        self.recorder = recorder
        self._handlers: dict[str, EventHandler] = {}
        self._unhandled: set[str] = set()

        if self.recorder is not None:
            self.recorder.record(self.stepper)

    @property
    def time(self) -> float:
        """Return the current simulation time."""
        return self.stepper.time

    def on(self, label: str, handler: EventHandler) -> None:
        """Register ``handler(stepper)`` to run whenever event ``label`` fires.

        Args:
            label: the event label
            handler: callable receiving the stepper; it may modify ``stepper.state``
        """
        if not callable(handler):
            raise TypeError("handler must be callable")
        self._handlers[label] = handler

    def schedule(
        self,
        time: float,
        label: str,
        handler: EventHandler | None = None,
        recurrence: float = 0.0,
    ) -> ScheduledEvent:
        """Schedule an event and optionally register its handler in one call.

        Args:
            time: the time at which the event fires
            label: the event label
            handler: callable receiving the stepper, optional
            recurrence: interval at which the event recurs, 0 for a one-shot event

        Returns:
            ScheduledEvent: the event that is scheduled

        """
        event = self.stepper.insert_event(time, label, recurrence)
        if handler is not None:
            self.on(label, handler)
        return event

    def handle_event(self) -> None:
        """Call the handler for the event the stepper currently sits on, if any."""
        if not self.stepper.is_event():
            return

        label = self.stepper.event()
        handler = self._handlers.get(label)
        if handler is None:
            if label not in self._unhandled:
                self._unhandled.add(label)
                warnings.warn(
                    f"No handler registered for event '{label}'",
                    RuntimeWarning,
                    stacklevel=2,
                )
            return

        logger.debug("handling event '%s' at t=%g", label, self.stepper.time)
        handler(self.stepper)

    def run_until(self, end_time: float) -> None:
        """Run the simulation until the end time.

        Events due exactly at the final time are fired and drained before returning.

        Args:
            end_time (float): The end time for stopping the simulation

        """
        if end_time < self.stepper.time:
            warnings.warn(
                f"end_time ({end_time}) is before current time ({self.stepper.time}), nothing to run",
                RuntimeWarning,
                stacklevel=2,
            )
            return

        while self.stepper.time < end_time:
            self._step()
        self._drain()

    def run_for(self, time_delta: float) -> None:
        """Run the simulation for the specified time delta.

        Args:
            time_delta (float): The simulation is run from the current time to the current time
                                plus the time delta

        """
        if time_delta < 0:
            raise ValueError(f"time_delta must be >= 0, got {time_delta}")
        self.run_until(self.stepper.time + time_delta)

    def run_steps(self, n: int) -> None:
        """Call ``step()`` n times, dispatching events as they occur."""
        if n < 0:
            raise ValueError(f"n must be >= 0, got {n}")
        for _ in range(n):
            self._step()

    def _step(self) -> None:
        self.stepper.step()
        self.handle_event()
        if self.recorder is not None:
            self.recorder.record(self.stepper)

    def _drain(self) -> None:
        while True:
            next_time = self.stepper.next_event_time()
            if next_time is None or next_time > self.stepper.time:
                return
            self._step()
