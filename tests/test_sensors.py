import math
import random
from dataclasses import replace

import pytest

from config import MonitorConfig
from data_models import FruitType
from fruit_profiles import get_profile
from sensors import StorageEnvironment, make_reading


CFG = MonitorConfig()


def test_valid_reading_and_gas_delta():
    r = make_reading(21.3, 64.0, 342, 310, CFG)
    assert r.valid
    assert r.gas_delta == 32


def test_gas_delta_can_be_negative():
    assert make_reading(21.3, 64.0, 290, 310, CFG).gas_delta == -20


@pytest.mark.parametrize("temperature,humidity", [
    (float("nan"), 60.0),
    (20.0, float("nan")),
    (float("nan"), float("nan")),
    (85.0, 60.0),
    (-41.0, 60.0),
    (20.0, 100.5),
    (20.0, -1.0),
])
def test_invalid_readings(temperature, humidity):
    assert not make_reading(temperature, humidity, 300, 300, CFG).valid


def test_range_limits_are_inclusive():
    assert make_reading(-40.0, 0.0, 0, 0, CFG).valid
    assert make_reading(80.0, 100.0, 0, 0, CFG).valid


def test_environment_starts_at_profile_midpoint():
    env = StorageEnvironment(get_profile(FruitType.ORANGE), CFG)
    assert env.temp_c == 7.0
    assert env.humidity_pct == 87.5
    assert env.age_hours == 0.0


def test_environment_setpoint_override():
    cfg = replace(CFG, setpoint_c=25.0, humidity_target_pct=40.0)
    env = StorageEnvironment(get_profile(FruitType.BANANA), cfg)
    assert env.setpoint_c == 25.0
    assert env.humidity_target_pct == 40.0


def test_gas_rises_with_age():
    cfg = replace(CFG, gas_noise_sd=0.0)
    env = StorageEnvironment(get_profile(FruitType.BANANA), cfg)
    assert env.read_gas() == 310
    for _ in range(10):
        env.step(60)
    assert env.age_hours == pytest.approx(10.0)
    assert env.read_gas() == 319


def test_gas_is_clipped_to_adc_range():
    cfg = replace(CFG, gas_noise_sd=0.0, clean_air_gas=2000.0)
    env = StorageEnvironment(get_profile(FruitType.BANANA), cfg)
    assert env.read_gas() == cfg.gas_adc_max


def test_retarget_resets_age_and_setpoint():
    env = StorageEnvironment(get_profile(FruitType.BANANA), CFG)
    env.step(120)
    env.retarget(get_profile(FruitType.APPLE))
    assert env.age_hours == 0.0
    assert env.setpoint_c == 2.0


def test_dropout_returns_nan():
    cfg = replace(CFG, dropout_prob=1.0)
    env = StorageEnvironment(get_profile(FruitType.BANANA), cfg)
    temperature, humidity, gas = env.read()
    assert math.isnan(temperature) and math.isnan(humidity)
    assert isinstance(gas, int)


def test_environment_holds_near_setpoint():
    random.seed(3)
    cfg = replace(CFG, dropout_prob=0.0)
    env = StorageEnvironment(get_profile(FruitType.BANANA), cfg)
    for _ in range(100):
        env.step(30)
        temperature, humidity, _ = env.read()
        assert 10.0 < temperature < 30.0
        assert 0.0 <= humidity <= 100.0
