# sensors.py
from __future__ import annotations
import math
import random
from typing import Tuple

from config import MonitorConfig
from data_models import FruitProfile, SensorReading


def make_reading(
    temperature: float,
    humidity: float,
    gas_raw: int,
    gas_baseline: int,
    cfg: MonitorConfig,
) -> SensorReading:
    """
    Package one sensor sample. A NaN or out-of-range temperature/humidity
    marks the whole reading invalid; the gas channel is analog and always
    present.
    """
    t_lo, t_hi = cfg.temp_valid_range
    h_lo, h_hi = cfg.humidity_valid_range

    valid = (
        not math.isnan(temperature)
        and not math.isnan(humidity)
        and t_lo <= temperature <= t_hi
        and h_lo <= humidity <= h_hi
    )

    return SensorReading(
        temperature=temperature,
        humidity=humidity,
        gas_raw=int(gas_raw),
        gas_baseline=int(gas_baseline),
        valid=valid,
    )


class StorageEnvironment:
    """
    Simulated storage space around one fruit batch.

    Each step:
      - temperature drifts toward ambient due to leakage
      - cooling pulls it toward the setpoint
      - occasional "glitch" reduces effective cooling
      - humidity relaxes toward its target with noise
      - gas rises with fruit age on top of the clean-air level
    Reads can fail (NaN temperature/humidity) with cfg.dropout_prob.
    """

    def __init__(self, profile: FruitProfile, cfg: MonitorConfig):
        self.cfg = cfg
        self.age_hours = 0.0
        self.retarget(profile)
        self.temp_c = self.setpoint_c
        self.humidity_pct = self.humidity_target_pct

    def retarget(self, profile: FruitProfile) -> None:
        """Point the setpoints at a new fruit; a fresh batch starts at zero age."""
        cfg = self.cfg
        self.setpoint_c = cfg.setpoint_c if cfg.setpoint_c is not None else profile.optimal_temp
        self.humidity_target_pct = (
            cfg.humidity_target_pct if cfg.humidity_target_pct is not None
            else profile.optimal_humidity
        )
        self.age_hours = 0.0

    def step(self, dt_min: float) -> None:
        cfg = self.cfg

        # leakage: drift toward ambient
        leakage = cfg.base_leakage * (1.0 + random.gauss(0, 0.15))
        leakage = max(0.0, leakage)

        # cooling: pull toward setpoint
        cooling_power = cfg.base_cooling_power * (1.0 + random.gauss(0, 0.10))
        cooling_power = max(0.0, cooling_power)

        if random.random() < cfg.cooling_glitch_prob:
            cooling_power *= cfg.glitch_cooling_factor

        toward_ambient = leakage * (cfg.ambient_temp_c - self.temp_c)
        toward_setpoint = cooling_power * (self.setpoint_c - self.temp_c)
        self.temp_c += toward_ambient + toward_setpoint
        self.temp_c += random.gauss(0, cfg.temp_noise_sd)

        # humidity: relax toward target, leak toward ambient
        self.humidity_pct += 0.3 * (self.humidity_target_pct - self.humidity_pct)
        self.humidity_pct += leakage * (cfg.ambient_humidity_pct - self.humidity_pct)
        self.humidity_pct += random.gauss(0, cfg.humidity_noise_sd)
        self.humidity_pct = min(100.0, max(0.0, self.humidity_pct))

        self.age_hours += dt_min / 60.0

    def read_gas(self) -> int:
        cfg = self.cfg
        level = cfg.clean_air_gas + cfg.gas_rise_per_hour * self.age_hours
        level += random.gauss(0, cfg.gas_noise_sd)
        return int(min(cfg.gas_adc_max, max(0.0, round(level))))

    def read(self) -> Tuple[float, float, int]:
        gas_raw = self.read_gas()
        if random.random() < self.cfg.dropout_prob:
            return float("nan"), float("nan"), gas_raw
        return round(self.temp_c, 2), round(self.humidity_pct, 2), gas_raw
