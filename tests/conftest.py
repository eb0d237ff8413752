import pytest

from sim_engine import SimulatedClock


class ScriptedSource:
    """Sensor source that replays fixed (temperature, humidity, gas_raw) tuples."""

    def __init__(self, readings, gas=300):
        self.readings = list(readings)
        self.gas = gas
        self.reads = 0

    def read(self):
        value = self.readings[min(self.reads, len(self.readings) - 1)]
        self.reads += 1
        return value

    def read_gas(self):
        return self.gas


@pytest.fixture
def clock():
    return SimulatedClock()


@pytest.fixture
def scripted_source():
    return ScriptedSource
