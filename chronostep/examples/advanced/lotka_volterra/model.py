"""
Lotka-Volterra with Droughts
============================

A predator-prey system where droughts periodically kill off part of the prey:

    dx0/dt =  1.5 x0 - x0 x1
    dx1/dt = -3 x1  + x0 x1

Starting from 10 prey and 4 predators, a recurring drought halves the prey every three
time units from ``t = 4``, and a single large drought at ``t = 10`` kills 70% of them.
At ``t = 10`` both droughts coincide and are applied one after the other.
"""

import numpy as np
import pandas as pd

from chronostep.data_collection import TrajectoryRecorder
from chronostep.integrators import EventAwareStepper
from chronostep.simulator import Simulator

INITIAL_STATE = (10.0, 4.0)
DT_MIN = 1e-3
DT_MAX = 0.01


def derivative(state, t):
    """Rate of change of prey (x0) and predators (x1)."""
    prey, predators = state
    return np.array(
        [
            1.5 * prey - prey * predators,
            -3.0 * predators + prey * predators,
        ]
    )


def large_drought(stepper):
    """Kill 70% of the prey."""
    stepper.state[0] *= 0.3


def recurring_drought(stepper):
    """Kill half of the prey."""
    stepper.state[0] *= 0.5


class LotkaVolterraDroughts:
    """Predator-prey model interrupted by scheduled droughts.

    Attributes:
        stepper (EventAwareStepper): integrator for the populations
        simulator (Simulator): drives the stepper and applies the droughts
        recorder (TrajectoryRecorder): trajectory of every call to step
    """

    def __init__(self, dt_min=DT_MIN, dt_max=DT_MAX):
        """Set up the populations and the drought calendar."""
        self.stepper = EventAwareStepper(
            INITIAL_STATE, derivative, dt_max=dt_max, dt_min=dt_min
        )
        self.recorder = TrajectoryRecorder()
        self.simulator = Simulator(self.stepper, recorder=self.recorder)

        self.simulator.schedule(10, "large_drought", large_drought)
        self.simulator.schedule(4, "recurring_drought", recurring_drought, recurrence=3)

    def run(self, end_time: float = 20.0) -> pd.DataFrame:
        """Run the model to ``end_time`` and return the trajectory."""
        self.simulator.run_until(end_time)
        return self.recorder.get_dataframe()
