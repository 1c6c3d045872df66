"""Step-size configuration for the adaptive integrators."""

from __future__ import annotations

import math
from dataclasses import dataclass

from chronostep.exceptions import InvalidConfiguration

# Relative discrepancy between the Euler and midpoint endpoint norms above which a step is rejected
ERROR_TOLERANCE = 0.05
# Number of consecutive accepted steps before the step size is doubled
GROWTH_STREAK = 8


@dataclass(frozen=True, slots=True)
class StepSizeBounds:
    """Bounds on the integration step.

    Attributes:
        dt_min: Smallest step the integrator takes, also its initial step
        dt_max: Largest step the integrator takes
    """

    dt_min: float
    dt_max: float

    def __post_init__(self):
        """Validate the bounds."""
        if math.isnan(self.dt_min) or math.isnan(self.dt_max):
            raise InvalidConfiguration(
                f"step bounds must be numbers, got dt_min={self.dt_min}, dt_max={self.dt_max}"
            )
        if self.dt_min <= 0:
            raise InvalidConfiguration(f"dt_min must be > 0, got {self.dt_min}")
        if self.dt_max <= 0:
            raise InvalidConfiguration(f"dt_max must be > 0, got {self.dt_max}")
        if self.dt_min > self.dt_max:
            raise InvalidConfiguration(
                f"dt_min ({self.dt_min}) cannot be larger than dt_max ({self.dt_max})"
            )

    def contains(self, h: float) -> bool:
        """Return whether ``h`` is an admissible step size."""
        return self.dt_min <= h <= self.dt_max
