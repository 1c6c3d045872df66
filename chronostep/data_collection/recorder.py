"""Trajectory recording for integrator runs.

The recorder keeps one row per call to ``step()``: the step counter, the time, the
step size the integrator will try next, the current event label, and the flattened
state. Rows are converted to a :class:`pandas.DataFrame` on request.
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

import pandas as pd

from chronostep.state import components

if TYPE_CHECKING:
    from chronostep.integrators import EventAwareStepper, Stepper


class TrajectoryRecorder:
    """In-memory recorder of integrator snapshots.

    Attributes:
        window_size (int | None): Max rows to keep (None = keep all, N = sliding window)
    """

    def __init__(self, window_size: int | None = None):
        """Initialize an empty recorder.

        Args:
            window_size: keep only the last ``window_size`` rows if given
        """
        if window_size is not None and window_size <= 0:
            raise ValueError(f"window_size must be > 0 or None, got {window_size}")

        self.window_size = window_size
        self._rows: deque[dict] = deque(maxlen=window_size)
        self._n_components: int | None = None

    def record(self, stepper: Stepper | EventAwareStepper) -> None:
        """Store a snapshot of the integrator."""
        values = components(stepper.state)
        if self._n_components is None:
            self._n_components = len(values)
        elif len(values) != self._n_components:
            raise ValueError(
                f"state has {len(values)} components, expected {self._n_components}"
            )

        event = stepper.event() if hasattr(stepper, "event") else ""
        row = {
            "step": stepper.steps,
            "time": stepper.time,
            "dt": stepper.dt,
            "event": event,
        }
        row.update({f"x{i}": v for i, v in enumerate(values)})
        self._rows.append(row)

    def get_dataframe(self) -> pd.DataFrame:
        """Return the recorded rows as a DataFrame."""
        if not self._rows:
            n = self._n_components or 0
            return pd.DataFrame(
                columns=["step", "time", "dt", "event", *(f"x{i}" for i in range(n))]
            )
        return pd.DataFrame(list(self._rows))

    def clear(self) -> None:
        """Remove all recorded rows."""
        self._rows.clear()
        self._n_components = None

    def __len__(self) -> int:  # noqa: D105
        return len(self._rows)
