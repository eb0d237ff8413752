# config.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class MonitorConfig:
    # --- Simulation clock ---
    dt_min: int = 30                 # monitoring cycle in minutes (simulated)
    horizon_min: int = 72 * 60       # total session length in minutes (demo)

    # --- Gas sensor calibration ---
    calibration_window_s: float = 10.0       # device polls the MQ sensor for 10 s at boot
    calibration_interval_s: float = 0.5      # one ADC sample every half second

    # --- Sensor validity (DHT22 operating range) ---
    temp_valid_range: Tuple[float, float] = (-40.0, 80.0)
    humidity_valid_range: Tuple[float, float] = (0.0, 100.0)
    gas_adc_max: int = 1023          # 10-bit analog input

    # --- Simulated storage environment (placeholder physics) ---
    ambient_temp_c: float = 24.0
    ambient_humidity_pct: float = 55.0
    # None -> hold the fruit profile's optimal midpoint
    setpoint_c: Optional[float] = None
    humidity_target_pct: Optional[float] = None
    base_leakage: float = 0.05       # fraction of the gap to ambient closed each step
    base_cooling_power: float = 0.30 # fraction of the gap to setpoint closed each step
    temp_noise_sd: float = 0.3
    humidity_noise_sd: float = 1.0
    # probability of a cooling underperform step and its strength
    cooling_glitch_prob: float = 0.03
    glitch_cooling_factor: float = 0.35
    # probability that a DHT read fails (NaN temperature/humidity)
    dropout_prob: float = 0.02

    # --- Simulated gas signal (ADC units) ---
    clean_air_gas: float = 310.0     # MQ-135 reading in clean air
    gas_noise_sd: float = 2.0
    gas_rise_per_hour: float = 0.9   # off-gassing as the fruit ripens

    # --- Q10 shelf-life advisory ---
    q10: float = 2.5
    q10_reference_temp_c: float = 20.0
    shelf_life_bounds_days: Tuple[float, float] = (1.0, 40.0)

    # --- Condition ratings ---
    # how far outside the profile band still rates "Acceptable"
    acceptable_temp_margin_c: float = 2.0
    acceptable_humidity_margin_pct: float = 5.0

    # --- Console tracing ---
    verbose: bool = False
