# freshness_model.py
from __future__ import annotations
import math
import time
from typing import Callable

from data_models import FreshnessStage, FruitProfile, FruitType
from fruit_profiles import get_profile


MS_PER_HOUR = 3_600_000.0

# lower bound of each stage, inclusive
VERY_FRESH_MIN = 80.0
GOOD_MIN = 60.0
EAT_TODAY_MIN = 40.0

# storage quality penalty per unit outside the optimal band
STORAGE_TEMP_PENALTY = 5.0       # per degC
STORAGE_HUMID_PENALTY = 2.0      # per %RH


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def calculate_score(
    profile: FruitProfile,
    temperature: float,
    humidity: float,
    gas_delta: float,
    age_hours: float,
) -> float:
    """
    Freshness score in [0, 100].

    Temperature and humidity are penalized symmetrically around the band
    midpoint. Gas (above baseline only) and elapsed time are one-directional:
    better conditions never earn points back.
    """
    score = profile.initial_score

    # 1) temperature
    score -= abs(temperature - profile.optimal_temp) * profile.temp_decay_coeff

    # 2) humidity
    score -= abs(humidity - profile.optimal_humidity) * profile.humid_decay_coeff

    # 3) gas, positive deltas only
    if gas_delta > 0:
        score -= gas_delta * profile.gas_decay_coeff

    # 4) time since the last fruit-type reset
    score -= age_hours * profile.time_decay_coeff

    return _clamp(score, 0.0, 100.0)


def stage_for_score(score: float) -> FreshnessStage:
    if score >= VERY_FRESH_MIN:
        return FreshnessStage.VERY_FRESH
    if score >= GOOD_MIN:
        return FreshnessStage.GOOD
    if score >= EAT_TODAY_MIN:
        return FreshnessStage.EAT_TODAY
    return FreshnessStage.SPOILED


def remaining_days_for(score: float, expected_life_days: int) -> int:
    """Proportional estimate; -1 means expired."""
    if score <= 0:
        return -1
    return int(math.floor((score / 100.0) * expected_life_days))


class FreshnessModel:
    """
    Stateful scorer for one fruit at a time.

    The only memory is the time-origin: the score is recomputed from scratch on
    every reading, so equal inputs at equal elapsed time give equal scores.
    """

    def __init__(
        self,
        fruit_type: FruitType = FruitType.BANANA,
        clock: Callable[[], float] = monotonic_ms,
    ):
        self._clock = clock
        self.fruit_type = fruit_type
        self.profile = get_profile(fruit_type)
        self.current_score = self.profile.initial_score
        self.start_time = clock()

    def set_fruit_type(self, fruit_type: FruitType) -> None:
        """Switch profile and restart the decay clock."""
        self.fruit_type = fruit_type
        self.profile = get_profile(fruit_type)
        self.current_score = self.profile.initial_score
        self.start_time = self._clock()

    def age_hours(self) -> float:
        return (self._clock() - self.start_time) / MS_PER_HOUR

    def update_readings(self, temperature: float, humidity: float, gas_delta: float) -> None:
        self.current_score = calculate_score(
            self.profile, temperature, humidity, gas_delta, self.age_hours()
        )

    def get_score(self) -> float:
        return self.current_score

    def get_remaining_days(self) -> int:
        return remaining_days_for(self.current_score, self.profile.expected_life_days)

    def get_stage(self) -> FreshnessStage:
        return stage_for_score(self.current_score)

    def calculate_storage_score(self, temperature: float, humidity: float) -> int:
        """
        How well the current ambient conditions match the optimal band.
        Independent of elapsed time and of the freshness score.

        The score is an integer throughout: each penalty is truncated toward
        zero as it is applied, so fractional readings lose whole points the
        same way the device display does.
        """
        p = self.profile
        score = 100

        if temperature < p.min_temp:
            score = int(score - (p.min_temp - temperature) * STORAGE_TEMP_PENALTY)
        elif temperature > p.max_temp:
            score = int(score - (temperature - p.max_temp) * STORAGE_TEMP_PENALTY)

        if humidity < p.min_humidity:
            score = int(score - (p.min_humidity - humidity) * STORAGE_HUMID_PENALTY)
        elif humidity > p.max_humidity:
            score = int(score - (humidity - p.max_humidity) * STORAGE_HUMID_PENALTY)

        return max(0, min(100, score))
