"""Tests for TrajectoryRecorder."""

import numpy as np
import pandas as pd
import pytest

from chronostep.data_collection import TrajectoryRecorder
from chronostep.integrators import EventAwareStepper, Stepper


def decay(x, t):
    """Exponential decay."""
    return -x


def test_record_array_state():
    """Array states are flattened into x0..xn columns."""
    stepper = Stepper([1.0, 2.0, 3.0], decay, dt_max=0.1, dt_min=0.01)
    recorder = TrajectoryRecorder()

    recorder.record(stepper)
    for _ in range(5):
        stepper.step()
        recorder.record(stepper)

    df = recorder.get_dataframe()
    assert isinstance(df, pd.DataFrame)
    assert len(recorder) == 6
    assert list(df.columns) == ["step", "time", "dt", "event", "x0", "x1", "x2"]
    assert list(df["step"]) == list(range(6))
    assert df["event"].eq("").all()
    np.testing.assert_allclose(df.iloc[-1][["x0", "x1", "x2"]].to_numpy(float), stepper.state)


def test_record_scalar_state():
    """A float state gives a single component column."""
    stepper = Stepper(0.5, lambda x, t: 2 * t, dt_max=0.01, dt_min=1e-6)
    recorder = TrajectoryRecorder()
    recorder.record(stepper)
    stepper.step()
    recorder.record(stepper)

    df = recorder.get_dataframe()
    assert list(df.columns) == ["step", "time", "dt", "event", "x0"]
    assert df["x0"].iloc[0] == 0.5


def test_record_event_label():
    """The event column carries the label the stepper reports."""
    stepper = EventAwareStepper(1.0, decay, dt_max=0.1, dt_min=0.01)
    stepper.insert_event(0.2, "kick")
    recorder = TrajectoryRecorder()

    while not stepper.is_event():
        stepper.step()
        recorder.record(stepper)

    df = recorder.get_dataframe()
    assert df["event"].iloc[-1] == "kick"
    assert df["time"].iloc[-1] == 0.2


def test_window_size():
    """Only the last window_size rows are kept."""
    stepper = Stepper(1.0, decay, dt_max=0.1, dt_min=0.01)
    recorder = TrajectoryRecorder(window_size=3)
    for _ in range(10):
        stepper.step()
        recorder.record(stepper)

    df = recorder.get_dataframe()
    assert len(df) == 3
    assert list(df["step"]) == [8, 9, 10]

    with pytest.raises(ValueError, match="window_size"):
        TrajectoryRecorder(window_size=0)


def test_empty_and_clear():
    """An empty recorder returns an empty frame; clear drops everything."""
    recorder = TrajectoryRecorder()
    df = recorder.get_dataframe()
    assert df.empty
    assert list(df.columns) == ["step", "time", "dt", "event"]

    stepper = Stepper([1.0, 2.0], decay, dt_max=0.1, dt_min=0.01)
    recorder.record(stepper)
    recorder.clear()
    assert len(recorder) == 0

    # after clear a state with a different size is accepted
    recorder.record(Stepper(1.0, decay, dt_max=0.1, dt_min=0.01))
    assert len(recorder) == 1


def test_component_count_must_not_change():
    """Recording states of different sizes into one recorder fails."""
    recorder = TrajectoryRecorder()
    stepper = Stepper([1.0, 2.0], decay, dt_max=0.1, dt_min=0.01)
    recorder.record(stepper)
    stepper.state = [1.0, 2.0, 3.0]
    with pytest.raises(ValueError, match="components"):
        recorder.record(stepper)
