import pytest

from advisory import (
    ACCEPTABLE_TIP,
    GAS_COMPONENTS,
    GAS_RECOVERY_TIP,
    STAGE_GAS_PROFILES,
    estimate_gas_composition,
    estimate_q10_shelf_life,
    evaluate_gas_delta,
    evaluate_gas_raw,
    evaluate_humidity,
    evaluate_temperature,
    gas_delta_factor,
    storage_tips,
)
from config import MonitorConfig
from data_models import FreshnessStage, FruitType
from fruit_profiles import get_profile


CFG = MonitorConfig()
BANANA = get_profile(FruitType.BANANA)


def test_q10_at_reference_conditions_is_base_life():
    est = estimate_q10_shelf_life(BANANA, 20.0, 65.0, 60.0, CFG)
    assert est.temp_factor == pytest.approx(1.0)
    assert est.humidity_factor == 1.0
    assert est.gas_factor == pytest.approx(1.0)
    assert est.days == pytest.approx(7.0)


def test_q10_ten_degrees_warmer_divides_by_q10():
    est = estimate_q10_shelf_life(BANANA, 30.0, 65.0, 60.0, CFG)
    assert est.temp_factor == pytest.approx(2.5)
    assert est.days == pytest.approx(7.0 / 2.5)


@pytest.mark.parametrize("humidity,factor", [
    (95.0, 1.3), (90.0, 1.3), (75.0, 1.1), (50.0, 1.0), (45.0, 0.85), (20.0, 0.7),
])
def test_q10_humidity_tiers(humidity, factor):
    assert estimate_q10_shelf_life(BANANA, 20.0, humidity, 60.0, CFG).humidity_factor == factor


@pytest.mark.parametrize("score,factor", [(0.0, 0.5), (30.0, 0.5), (45.0, 0.75), (100.0, 1.2)])
def test_q10_gas_factor_is_clamped(score, factor):
    assert estimate_q10_shelf_life(BANANA, 20.0, 65.0, score, CFG).gas_factor == pytest.approx(factor)


def test_q10_days_are_clamped():
    short = estimate_q10_shelf_life(BANANA, 40.0, 65.0, 0.0, CFG)
    assert short.days == 1.0

    apple = get_profile(FruitType.APPLE)
    long = estimate_q10_shelf_life(apple, 0.0, 92.0, 100.0, CFG)
    assert long.days == 40.0


def test_tips_for_warm_dry_storage():
    tips = storage_tips(BANANA, 25.0, 55.0, 0)
    assert tips == ["Lower temperature by 3.0°C", "Increase humidity by 5.0%"]


def test_tips_for_cold_humid_storage():
    tips = storage_tips(BANANA, 15.5, 72.0, 0)
    assert tips == ["Raise temperature by 2.5°C", "Decrease humidity by 2.0%"]


def test_tips_flag_gas_beyond_threshold():
    assert storage_tips(BANANA, 20.0, 65.0, 51) == [GAS_RECOVERY_TIP]
    assert storage_tips(BANANA, 20.0, 65.0, -51) == [GAS_RECOVERY_TIP]
    assert storage_tips(BANANA, 20.0, 65.0, 50) == [ACCEPTABLE_TIP]


def test_tips_inside_band():
    assert storage_tips(BANANA, 18.0, 70.0, 10) == [ACCEPTABLE_TIP]


@pytest.mark.parametrize("stage,expected", [
    (FreshnessStage.VERY_FRESH, {"co2": 30, "smoke": 10, "alcohol": 5, "nh3": 2, "nox": 3, "benzene": 2}),
    (FreshnessStage.GOOD, {"co2": 45, "alcohol": 20, "smoke": 12, "nh3": 8, "nox": 10, "benzene": 8}),
    (FreshnessStage.EAT_TODAY, {"alcohol": 35, "co2": 40, "nh3": 25, "nox": 20, "benzene": 18, "smoke": 15}),
    (FreshnessStage.SPOILED, {"nh3": 50, "alcohol": 40, "nox": 35, "benzene": 30, "co2": 35, "smoke": 20}),
])
def test_gas_composition_stage_mix_at_unit_factor(stage, expected):
    # a small positive delta leaves the stage mix unscaled
    composition = estimate_gas_composition(stage, 5)
    assert set(composition) == set(GAS_COMPONENTS)
    assert composition == pytest.approx(expected)


@pytest.mark.parametrize("gas_delta,factor", [
    (51, 2.0), (50, 1.5), (31, 1.5), (30, 1.2), (11, 1.2), (10, 1.0),
    (1, 1.0), (0, 0.8), (-9, 0.8), (-10, 0.6), (-300, 0.6),
])
def test_gas_delta_factor_tiers(gas_delta, factor):
    assert gas_delta_factor(gas_delta) == factor


def test_gas_composition_scales_with_delta():
    composition = estimate_gas_composition(FreshnessStage.GOOD, 40)
    assert composition["co2"] == pytest.approx(45 * 1.5)
    assert composition["alcohol"] == pytest.approx(20 * 1.5)

    quiet = estimate_gas_composition(FreshnessStage.GOOD, -20)
    assert quiet["co2"] == pytest.approx(45 * 0.6)


def test_gas_composition_is_capped_at_100(monkeypatch):
    spoiled = estimate_gas_composition(FreshnessStage.SPOILED, 200)
    assert spoiled["nh3"] == 100.0
    assert all(v <= 100.0 for v in spoiled.values())

    boosted = dict(STAGE_GAS_PROFILES[FreshnessStage.SPOILED], nh3=80)
    monkeypatch.setitem(STAGE_GAS_PROFILES, FreshnessStage.SPOILED, boosted)
    assert estimate_gas_composition(FreshnessStage.SPOILED, 60)["nh3"] == 100.0


@pytest.mark.parametrize("temperature,rating", [
    (18.0, "Optimal"),
    (22.0, "Optimal"),
    (24.0, "Acceptable"),
    (16.0, "Acceptable"),
    (24.5, "Too High (+2.5°C)"),
    (15.0, "Too Low (-3.0°C)"),
])
def test_temperature_rating(temperature, rating):
    assert evaluate_temperature(BANANA, temperature, CFG) == rating


@pytest.mark.parametrize("humidity,rating", [
    (60.0, "Optimal"),
    (70.0, "Optimal"),
    (75.0, "Acceptable"),
    (55.0, "Acceptable"),
    (76.0, "Too High (+6.0%)"),
    (54.0, "Too Low (-6.0%)"),
])
def test_humidity_rating(humidity, rating):
    assert evaluate_humidity(BANANA, humidity, CFG) == rating


@pytest.mark.parametrize("gas_raw,rating", [
    (0, "Very Clean"), (149, "Very Clean"), (150, "Clean"), (199, "Clean"),
    (200, "Moderate"), (299, "Moderate"), (300, "High"), (1023, "High"),
])
def test_gas_raw_rating(gas_raw, rating):
    assert evaluate_gas_raw(gas_raw) == rating


@pytest.mark.parametrize("gas_delta,rating", [
    (0, "Stable"), (5, "Stable"), (-5, "Stable"),
    (6, "Minor Change"), (-6, "Minor Change"), (50, "Minor Change"), (-50, "Minor Change"),
    (51, "Significant Change"), (-51, "Significant Change"),
])
def test_gas_delta_rating_uses_profile_threshold(gas_delta, rating):
    assert evaluate_gas_delta(BANANA, gas_delta) == rating


def test_gas_delta_rating_threshold_differs_per_fruit():
    orange = get_profile(FruitType.ORANGE)
    assert evaluate_gas_delta(BANANA, 70) == "Significant Change"
    assert evaluate_gas_delta(orange, 70) == "Minor Change"
