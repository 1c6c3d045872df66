"""chronostep: adaptive ODE integration with scheduled discrete events.

Core Objects: Stepper, EventAwareStepper, EventQueue, and Simulator.
"""

import datetime

import chronostep.data_collection as data_collection
import chronostep.time as time
from chronostep.exceptions import (
    ChronostepError,
    EmptyQueueError,
    InvalidConfiguration,
    OutOfRange,
    PrecondNegativeRecurrence,
)
from chronostep.integrators import EventAwareStepper, Stepper
from chronostep.simulator import Simulator
from chronostep.state import VectorState
from chronostep.time import EventQueue, ScheduledEvent

__all__ = [
    "ChronostepError",
    "EmptyQueueError",
    "EventAwareStepper",
    "EventQueue",
    "InvalidConfiguration",
    "OutOfRange",
    "PrecondNegativeRecurrence",
    "ScheduledEvent",
    "Simulator",
    "Stepper",
    "VectorState",
    "data_collection",
    "time",
]

__title__ = "chronostep"
__version__ = "0.1.0"
__license__ = "Apache 2.0"
_this_year = datetime.datetime.now(tz=datetime.UTC).date().year
__copyright__ = f"Copyright {_this_year} chronostep developers"
