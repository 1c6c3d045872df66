"""
Quadratic Growth
================

Integrates ``dx/dt = 2t`` from ``x(0) = 0.5``; the exact solution is ``x = 0.5 + t**2``.
With no events scheduled this exercises the adaptive step-size controller on its own.
"""

import pandas as pd

from chronostep.data_collection import TrajectoryRecorder
from chronostep.integrators import Stepper

X0 = 0.5
DT_MIN = 1e-6
DT_MAX = 0.01


def derivative(x, t):
    """Rate of change of the quadratic model."""
    return 2 * t


def exact(t):
    """Closed form solution."""
    return X0 + t**2


def run(n_steps: int = 100) -> pd.DataFrame:
    """Take ``n_steps`` adaptive steps and return the trajectory.

    Args:
        n_steps: number of steps to take

    Returns:
        DataFrame with one row per step, plus the initial state
    """
    stepper = Stepper(X0, derivative, dt_max=DT_MAX, dt_min=DT_MIN)
    recorder = TrajectoryRecorder()
    recorder.record(stepper)

    while stepper.steps < n_steps:
        stepper.step()
        recorder.record(stepper)

    return recorder.get_dataframe()
