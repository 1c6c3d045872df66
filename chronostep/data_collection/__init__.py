"""Data collection for integrator runs.

Records integrator snapshots and exposes them as pandas DataFrames.
"""

from .recorder import TrajectoryRecorder

__all__ = ["TrajectoryRecorder"]
