"""Adaptive explicit integrators.

- Stepper: forward Euler with a midpoint-based step-size controller
- EventAwareStepper: a Stepper that lands exactly on scheduled events
"""

from .config import ERROR_TOLERANCE, GROWTH_STREAK, StepSizeBounds
from .stepper import EventAwareStepper, EventFlag, Stepper

__all__ = [
    "ERROR_TOLERANCE",
    "GROWTH_STREAK",
    "EventAwareStepper",
    "EventFlag",
    "StepSizeBounds",
    "Stepper",
]
