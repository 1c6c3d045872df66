"""State containers understood by the integrators.

The integrators never look inside a state. They combine states with ``+``, ``-``,
``*`` and ``/`` by a scalar, and measure them with an L1 norm (the sum of absolute
component values). Python floats and :class:`numpy.ndarray` values already support
all of that, so they can be used directly; custom containers only need to follow
the :class:`VectorState` protocol.
"""

from __future__ import annotations

from typing import Any, Protocol, Self, runtime_checkable

import numpy as np


@runtime_checkable
class VectorState(Protocol):
    """Protocol for user defined state containers.

    Any object that can be added to another of its kind, scaled by a float and
    report a non-negative norm can be integrated.
    """

    def __add__(self, other: Self) -> Self: ...  # noqa: D105

    def __sub__(self, other: Self) -> Self: ...  # noqa: D105

    def __mul__(self, k: float) -> Self: ...  # noqa: D105

    def __truediv__(self, k: float) -> Self: ...  # noqa: D105

    def norm(self) -> float:
        """Return the sum of the absolute values of the components."""
        ...


def norm(state: Any) -> float:
    """Return the L1 norm of a state.

    Args:
        state: a float, an array-like, or an object with a ``norm()`` method

    Returns:
        float: the sum of absolute component values
    """
    if isinstance(state, VectorState):
        return float(state.norm())
    return float(np.sum(np.abs(state)))


def as_state(value: Any) -> Any:
    """Coerce a user supplied initial value into something the integrators can use.

    Lists and tuples become float arrays and arrays are copied to float dtype, so
    that an integer initial condition does not truncate later updates. Anything else
    is returned as is.
    """
    if isinstance(value, (list, tuple, np.ndarray)):
        return np.array(value, dtype=float)
    if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
        return float(value)
    return value


def components(state: Any) -> list[float]:
    """Flatten a state into a list of floats for recording.

    Raises:
        TypeError: if a custom state cannot be iterated over
    """
    if isinstance(state, VectorState):
        if not hasattr(state, "__iter__"):
            raise TypeError(
                f"cannot record components of non-iterable state {type(state).__name__}"
            )
        state = list(state)
    return [float(v) for v in np.ravel(np.asarray(state, dtype=float))]
