# fruit_profiles.py
"""
Static per-fruit storage parameters.

Storage bands follow Kader (2002), gas sensitivity Saltveit (1999). The decay
coefficients are empirically chosen and treated as fixed configuration.
"""
from __future__ import annotations
from typing import Dict

from data_models import FruitProfile, FruitType


PROFILES: Dict[FruitType, FruitProfile] = {
    FruitType.BANANA: FruitProfile(
        name="Banana", emoji="🍌",
        min_temp=18.0, max_temp=22.0,
        min_humidity=60.0, max_humidity=70.0,
        gas_threshold=50.0,
        temp_decay_coeff=3.0, humid_decay_coeff=2.0,
        gas_decay_coeff=0.15, time_decay_coeff=0.6,
        initial_score=100.0, expected_life_days=7,
    ),
    FruitType.ORANGE: FruitProfile(
        name="Orange", emoji="🍊",
        min_temp=4.0, max_temp=10.0,
        min_humidity=85.0, max_humidity=90.0,
        gas_threshold=80.0,
        temp_decay_coeff=2.5, humid_decay_coeff=1.5,
        gas_decay_coeff=0.08, time_decay_coeff=0.3,
        initial_score=100.0, expected_life_days=14,
    ),
    FruitType.APPLE: FruitProfile(
        name="Apple", emoji="🍎",
        min_temp=0.0, max_temp=4.0,
        min_humidity=90.0, max_humidity=95.0,
        gas_threshold=60.0,
        temp_decay_coeff=2.0, humid_decay_coeff=1.5,
        gas_decay_coeff=0.10, time_decay_coeff=0.2,
        initial_score=100.0, expected_life_days=30,
    ),
    FruitType.GRAPE: FruitProfile(
        name="Grape", emoji="🍇",
        min_temp=0.0, max_temp=2.0,
        min_humidity=90.0, max_humidity=95.0,
        gas_threshold=70.0,
        temp_decay_coeff=2.5, humid_decay_coeff=2.0,
        gas_decay_coeff=0.12, time_decay_coeff=0.8,
        initial_score=100.0, expected_life_days=10,
    ),
}


def get_profile(fruit_type: FruitType) -> FruitProfile:
    return PROFILES[fruit_type]


def get_display_name(fruit_type: FruitType) -> str:
    return PROFILES[fruit_type].name


def get_emoji(fruit_type: FruitType) -> str:
    return PROFILES[fruit_type].emoji


def parse_fruit_type(name: str) -> FruitType:
    """Map a user-supplied fruit name ("banana", "Grape") to its FruitType."""
    key = name.strip().upper()
    try:
        return FruitType[key]
    except KeyError:
        options = ", ".join(t.name.lower() for t in FruitType)
        raise ValueError(f"Unknown fruit '{name}' (expected one of: {options})") from None
