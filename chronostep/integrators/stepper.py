"""Adaptive explicit integrators with exact landing on scheduled events.

This module provides two integrators for systems described by ``dx/dt = f(x, t)``:

- Stepper: a forward Euler integrator with a cheap adaptive step-size scheme. Each step
  compares the endpoint of a plain Euler step with a midpoint-corrected one; if their
  norms disagree by more than 5 percent only half the step is committed and the step
  size is halved, otherwise the full step is committed. After eight consecutive accepted
  steps the step size doubles, up to ``dt_max``.
- EventAwareStepper: wraps a Stepper and an EventQueue. It approaches scheduled events
  with an exponentially decreasing step size, lands exactly on each event time, and lets
  the caller drain simultaneous events one call at a time before integration resumes.

Both integrators are single threaded and mutate their state in place on every ``step()``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import numpy as np

from chronostep.exceptions import OutOfRange
from chronostep.integrators.config import (
    ERROR_TOLERANCE,
    GROWTH_STREAK,
    StepSizeBounds,
)
from chronostep.state import as_state, norm
from chronostep.time import EventQueue, ScheduledEvent

logger = logging.getLogger(__name__)

Derivative = Callable[[Any, float], Any]


class Stepper:
    """Forward Euler integrator with adaptive step-size control.

    The stepper knows nothing about events. A rejected step still moves forward by half
    the attempted step, so every call to ``step()`` advances time.

    Attributes:
        derivative (Callable): ``f(state, t)`` returning the rate of change of the state
        bounds (StepSizeBounds): the admissible step sizes

    """

    def __init__(
        self, state: Any, derivative: Derivative, dt_max: float, dt_min: float
    ) -> None:
        """Initialize a stepper at ``t = 0`` with ``dt = dt_min``.

        Args:
            state: the initial state, a float, array-like or VectorState
            derivative: callable ``f(state, t)`` returning the time derivative
            dt_max: the largest step size
            dt_min: the smallest step size, also the initial one

        Raises:
            InvalidConfiguration: if the step bounds are not ``0 < dt_min <= dt_max``
        """
        if not callable(derivative):
            raise TypeError("derivative must be callable")

        self.bounds = StepSizeBounds(dt_min=dt_min, dt_max=dt_max)
        self.derivative = derivative

        self._state = as_state(state)
        self._t: float = 0.0
        self._dt: float = self.bounds.dt_min
        self._good_step_streak: int = 0
        self._step_count: int = 0

    @property
    def time(self) -> float:
        """Return the current simulation time."""
        return self._t

    @property
    def state(self) -> Any:
        """Return the live state; in-place edits affect the integration.

        Array states are updated in place by every step, so a reference taken here stays
        live. Immutable states such as floats are replaced, and must be read again.
        """
        return self._state

    @state.setter
    def state(self, value: Any) -> None:
        self._state = as_state(value)

    def _commit(self, new_state: Any) -> None:
        if (
            isinstance(self._state, np.ndarray)
            and isinstance(new_state, np.ndarray)
            and new_state.shape == self._state.shape
        ):
            self._state[...] = new_state
        else:
            self._state = new_state

    @property
    def dt(self) -> float:
        """Return the step size the next step will attempt."""
        return self._dt

    @dt.setter
    def dt(self, h: float) -> None:
        if not self.bounds.contains(h):
            raise OutOfRange(
                f"dt must be within [{self.dt_min}, {self.dt_max}], got {h}"
            )
        self._dt = h

    @property
    def dt_min(self) -> float:  # noqa: D102
        return self.bounds.dt_min

    @property
    def dt_max(self) -> float:  # noqa: D102
        return self.bounds.dt_max

    @property
    def steps(self) -> int:
        """Return the number of steps taken."""
        return self._step_count

    @property
    def good_step_streak(self) -> int:
        """Return the number of consecutive accepted steps."""
        return self._good_step_streak

    @good_step_streak.setter
    def good_step_streak(self, value: int) -> None:
        self._good_step_streak = value

    def step(self) -> None:
        """Advance the state by one adaptive step."""
        self.advance()
        self._step_count += 1

    def advance(self) -> None:
        """Perform one error-controlled step without counting it.

        Evaluates the derivative twice: once at the current point and once at the
        midpoint of an Euler step. The relative difference between the norms of the
        Euler endpoint and the midpoint-corrected endpoint decides between a full step
        and a half step.
        """
        x, t, dt = self._state, self._t, self._dt

        e1 = self.derivative(x, t)
        e2 = self.derivative(x + e1 * dt / 2, t + dt / 2)
        mag_full = norm(x + e1 * dt)
        mag_mid = norm(x + e1 * dt / 2 + e2 * dt / 2)

        # both endpoints at the origin agree perfectly
        total = mag_full + mag_mid
        rho = abs(mag_full - mag_mid) / (total / 2) if total > 0 else 0.0

        if rho > ERROR_TOLERANCE:
            self._commit(x + e1 * dt / 2)
            self._t = t + dt / 2
            self._dt = max(dt / 2, self.dt_min)
            self._good_step_streak = 0
            logger.debug(
                "rejected step at t=%g (rho=%.4g), committed half step, dt -> %g",
                t,
                rho,
                self._dt,
            )
        else:
            self._commit(x + e1 * dt)
            self._t = t + dt
            self._good_step_streak += 1

        if self._dt < self.dt_max and self._good_step_streak >= GROWTH_STREAK:
            self._dt *= 2
        self._dt = min(self._dt, self.dt_max)

    def euler_step_to(self, t_end: float) -> float:
        """Take one plain Euler step that ends exactly at ``t_end``.

        This bypasses error control and leaves ``dt`` and the step counter untouched.

        Returns:
            float: the size of the step taken
        """
        h = t_end - self._t
        e1 = self.derivative(self._state, self._t)
        self._commit(self._state + e1 * h)
        self._t = t_end
        return h

    def __repr__(self) -> str:  # noqa: D105
        return (
            f"{type(self).__name__}(t={self._t}, dt={self._dt}, steps={self.steps})"
        )


@dataclass
class EventFlag:
    """Whether the integrator currently sits on an event, and which one."""

    is_at_event: bool = False
    label: str = ""

    def set(self, label: str) -> None:  # noqa: D102
        self.is_at_event = True
        self.label = label

    def clear(self) -> None:  # noqa: D102
        self.is_at_event = False
        self.label = ""


class EventAwareStepper:
    """An adaptive integrator that stops exactly on scheduled events.

    Each call to ``step()`` does one of two things:

    - if the integrator sits on an event and another event is due at the same instant,
      that event is consumed without advancing time (draining)
    - otherwise time advances, either by an adaptive step shrunk so as not to overshoot
      the next event, or by a plain Euler step that lands exactly on it

    After a call that lands on or drains an event, ``is_event()`` is True and ``event()``
    names it, so the caller can perturb ``state`` before the next call.

    Attributes:
        stepper (Stepper): the event-agnostic integrator doing the continuous steps

    """

    def __init__(
        self, state: Any, derivative: Derivative, dt_max: float, dt_min: float
    ) -> None:
        """Initialize an event-aware stepper at ``t = 0`` with an empty calendar.

        Args:
            state: the initial state, a float, array-like or VectorState
            derivative: callable ``f(state, t)`` returning the time derivative
            dt_max: the largest step size
            dt_min: the smallest step size, also the initial one

        Raises:
            InvalidConfiguration: if the step bounds are not ``0 < dt_min <= dt_max``
        """
        self.stepper = Stepper(state, derivative, dt_max, dt_min)
        self._queue = EventQueue()
        self._flag = EventFlag()
        self._step_count: int = 0

    @property
    def time(self) -> float:  # noqa: D102
        return self.stepper.time

    @property
    def state(self) -> Any:
        """Return the live state; in-place edits affect the integration."""
        return self.stepper.state

    @state.setter
    def state(self, value: Any) -> None:
        self.stepper.state = value

    @property
    def dt(self) -> float:  # noqa: D102
        return self.stepper.dt

    @dt.setter
    def dt(self, h: float) -> None:
        self.stepper.dt = h

    @property
    def dt_min(self) -> float:  # noqa: D102
        return self.stepper.dt_min

    @property
    def dt_max(self) -> float:  # noqa: D102
        return self.stepper.dt_max

    @property
    def steps(self) -> int:
        """Return the number of calls that advanced time, landings included."""
        return self._step_count

    @property
    def good_step_streak(self) -> int:  # noqa: D102
        return self.stepper.good_step_streak

    @property
    def events(self) -> EventQueue:
        """Return the calendar of pending events."""
        return self._queue

    def insert_event(
        self, time: float, label: str, recurrence: float = 0.0
    ) -> ScheduledEvent:
        """Schedule an event.

        Args:
            time: the time at which the event fires
            label: the name reported by ``event()`` when it fires
            recurrence: interval at which the event recurs, 0 for a one-shot event

        Returns:
            ScheduledEvent: the event that was queued

        Raises:
            PrecondNegativeRecurrence: if recurrence is negative
            ValueError: if time is NaN or lies before the current simulation time
        """
        if time < self.time:
            raise ValueError(
                f"Cannot schedule event '{label}' in the past: time ({time}) "
                f"is before current time ({self.time})"
            )
        return self._queue.insert(time, label, recurrence)

    def next_event_time(self) -> float | None:
        """Return the time of the next pending event, or None if there is none."""
        return None if self._queue.empty() else self._queue.peek_time()

    def is_event(self) -> bool:
        """Return whether the last call landed on or drained an event."""
        return self._flag.is_at_event

    def event(self) -> str:
        """Return the label of the current event, or an empty string."""
        return self._flag.label if self._flag.is_at_event else ""

    def step(self) -> None:
        """Drain one simultaneous event, or advance time toward the next event."""
        queue = self._queue
        stepper = self.stepper

        if (
            self._flag.is_at_event
            and not queue.empty()
            and queue.peek_time() == stepper.time
        ):
            event = queue.pop()
            self._flag.set(event.label)
            logger.debug("drained event '%s' at t=%g", event.label, stepper.time)
            return

        self._flag.clear()
        self._step_count += 1

        if not queue.empty():
            next_time = queue.peek_time()

            dt = stepper.dt
            while dt > stepper.dt_min and stepper.time + dt > next_time:
                dt /= 2
            dt = max(dt, stepper.dt_min)
            stepper.dt = dt

            if dt == stepper.dt_min and stepper.time + dt > next_time:
                self._land(next_time)
                return

        stepper.advance()

    def _land(self, next_time: float) -> None:
        """Step exactly onto the earliest event and fire it."""
        stepper = self.stepper
        # an overdue event fires where the integrator already is
        stepper.euler_step_to(max(next_time, stepper.time))
        stepper.dt = stepper.dt_min
        stepper.good_step_streak = 0

        event = self._queue.pop()
        self._flag.set(event.label)
        logger.debug("landed on event '%s' at t=%g", event.label, stepper.time)

    def __repr__(self) -> str:  # noqa: D105
        return (
            f"EventAwareStepper(t={self.time}, dt={self.dt}, steps={self.steps}, "
            f"pending_events={len(self._queue)})"
        )
