# advisory.py
"""
Advisory outputs shown next to the freshness score.

Nothing here feeds back into the score. The Q10 estimate is a second opinion
on shelf life, the tips and ratings are plain-language hints for the user, and
the gas composition is an illustrative breakdown of the single MQ channel.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List

from config import MonitorConfig
from data_models import FreshnessStage, FruitProfile


ACCEPTABLE_TIP = "Current conditions are acceptable for storage."
GAS_RECOVERY_TIP = "Wait 1-2 minutes for sensor recovery"


@dataclass
class ShelfLifeEstimate:
    days: float
    temp_factor: float
    humidity_factor: float
    gas_factor: float


def _humidity_factor(humidity: float) -> float:
    if humidity >= 90:
        return 1.3    # ideal high humidity
    if humidity >= 70:
        return 1.1
    if humidity >= 50:
        return 1.0
    if humidity >= 40:
        return 0.85
    return 0.7


def estimate_q10_shelf_life(
    profile: FruitProfile,
    temperature: float,
    humidity: float,
    score: float,
    cfg: MonitorConfig,
) -> ShelfLifeEstimate:
    """
    Q10 rule: every 10 degC above the reference temperature multiplies the
    spoilage rate by Q10. The base shelf life is the profile's expected life
    at the reference temperature.
    """
    temp_factor = cfg.q10 ** ((temperature - cfg.q10_reference_temp_c) / 10.0)
    humidity_factor = _humidity_factor(humidity)
    gas_factor = min(1.2, max(0.5, score / 60.0))

    days = profile.expected_life_days * humidity_factor * gas_factor / temp_factor
    lo, hi = cfg.shelf_life_bounds_days
    days = min(hi, max(lo, days))

    return ShelfLifeEstimate(
        days=days,
        temp_factor=temp_factor,
        humidity_factor=humidity_factor,
        gas_factor=gas_factor,
    )


def storage_tips(
    profile: FruitProfile,
    temperature: float,
    humidity: float,
    gas_delta: float,
) -> List[str]:
    tips: List[str] = []

    if temperature > profile.max_temp:
        tips.append(f"Lower temperature by {temperature - profile.max_temp:.1f}°C")
    elif temperature < profile.min_temp:
        tips.append(f"Raise temperature by {profile.min_temp - temperature:.1f}°C")

    if humidity < profile.min_humidity:
        tips.append(f"Increase humidity by {profile.min_humidity - humidity:.1f}%")
    elif humidity > profile.max_humidity:
        tips.append(f"Decrease humidity by {humidity - profile.max_humidity:.1f}%")

    if abs(gas_delta) > profile.gas_threshold:
        tips.append(GAS_RECOVERY_TIP)

    return tips or [ACCEPTABLE_TIP]


# --- Gas composition (illustrative split of the single MQ-135 channel) ---

GAS_COMPONENTS = ("nh3", "alcohol", "co2", "nox", "benzene", "smoke")

# relative levels (0-100) typical of each ripening stage
STAGE_GAS_PROFILES: Dict[FreshnessStage, Dict[str, float]] = {
    FreshnessStage.VERY_FRESH: {"nh3": 2, "alcohol": 5, "co2": 30, "nox": 3, "benzene": 2, "smoke": 10},
    FreshnessStage.GOOD: {"nh3": 8, "alcohol": 20, "co2": 45, "nox": 10, "benzene": 8, "smoke": 12},
    FreshnessStage.EAT_TODAY: {"nh3": 25, "alcohol": 35, "co2": 40, "nox": 20, "benzene": 18, "smoke": 15},
    FreshnessStage.SPOILED: {"nh3": 50, "alcohol": 40, "co2": 35, "nox": 35, "benzene": 30, "smoke": 20},
}


def gas_delta_factor(gas_delta: float) -> float:
    if gas_delta > 50:
        return 2.0
    if gas_delta > 30:
        return 1.5
    if gas_delta > 10:
        return 1.2
    if gas_delta > 0:
        return 1.0
    if gas_delta > -10:
        return 0.8
    return 0.6


def estimate_gas_composition(stage: FreshnessStage, gas_delta: float) -> Dict[str, float]:
    """
    Split the gas reading into per-component levels for display.

    The stage picks a base mix and the delta from baseline scales it up or
    down. Each level is capped at 100.
    """
    factor = gas_delta_factor(gas_delta)
    base = STAGE_GAS_PROFILES[stage]
    return {name: min(100.0, base[name] * factor) for name in GAS_COMPONENTS}


# --- Condition ratings ---

def evaluate_temperature(profile: FruitProfile, temperature: float, cfg: MonitorConfig) -> str:
    if profile.min_temp <= temperature <= profile.max_temp:
        return "Optimal"
    if temperature > profile.max_temp:
        over = temperature - profile.max_temp
        if over <= cfg.acceptable_temp_margin_c:
            return "Acceptable"
        return f"Too High (+{over:.1f}°C)"
    under = profile.min_temp - temperature
    if under <= cfg.acceptable_temp_margin_c:
        return "Acceptable"
    return f"Too Low (-{under:.1f}°C)"


def evaluate_humidity(profile: FruitProfile, humidity: float, cfg: MonitorConfig) -> str:
    if profile.min_humidity <= humidity <= profile.max_humidity:
        return "Optimal"
    if humidity > profile.max_humidity:
        over = humidity - profile.max_humidity
        if over <= cfg.acceptable_humidity_margin_pct:
            return "Acceptable"
        return f"Too High (+{over:.1f}%)"
    under = profile.min_humidity - humidity
    if under <= cfg.acceptable_humidity_margin_pct:
        return "Acceptable"
    return f"Too Low (-{under:.1f}%)"


def evaluate_gas_raw(gas_raw: int) -> str:
    if gas_raw < 150:
        return "Very Clean"
    if gas_raw < 200:
        return "Clean"
    if gas_raw < 300:
        return "Moderate"
    return "High"


def evaluate_gas_delta(profile: FruitProfile, gas_delta: float) -> str:
    change = abs(gas_delta)
    if change <= 5:
        return "Stable"
    if change <= profile.gas_threshold:
        return "Minor Change"
    return "Significant Change"
