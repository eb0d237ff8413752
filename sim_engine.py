# sim_engine.py
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from config import MonitorConfig
from data_models import FreshnessReport, FruitType, MonitorEvent
from fruit_profiles import get_profile
from monitoring import FruitMonitor, report_row
from sensors import StorageEnvironment


class SimulatedClock:
    """Monotonic millisecond clock that only moves when told to."""

    def __init__(self, start_ms: float = 0.0):
        self.now_ms = float(start_ms)

    def __call__(self) -> float:
        return self.now_ms

    def advance_min(self, minutes: float) -> None:
        self.now_ms += minutes * 60_000.0

    def sleep(self, seconds: float) -> None:
        self.now_ms += seconds * 1000.0


@dataclass
class MonitoringResult:
    log_rows: List[Dict[str, Any]]      # time-step log (can be DF later)
    events: List[MonitorEvent]          # discrete events
    reports: List[FreshnessReport]
    baseline: int


def run_monitoring(
    cfg: Optional[MonitorConfig] = None,
    fruit_type: FruitType = FruitType.BANANA,
    seed: int = 7,
    switch_schedule: Optional[Dict[float, FruitType]] = None,
) -> MonitoringResult:
    """
    Time-stepped session (NOT real-time):
      - calibrates the gas baseline against the simulated clean air
      - steps the storage environment every cfg.dt_min
      - runs one monitoring cycle per step
      - switch_schedule maps t_min -> fruit put in at that time; the switch
        is queued and applied at the first cycle at or after t_min

    Key outputs:
      - per-step log rows
      - event list
      - per-step reports for the presentation layer
    """
    if cfg is None:
        cfg = MonitorConfig()

    random.seed(seed)

    clock = SimulatedClock()
    env = StorageEnvironment(get_profile(fruit_type), cfg)
    monitor = FruitMonitor(env, cfg, fruit_type, clock=clock, sleep=clock.sleep)

    # calibration happens before the first cycle on the session timeline
    baseline = monitor.calibrate(t_min=0.0)

    pending = sorted((switch_schedule or {}).items())

    dt = float(cfg.dt_min)
    horizon = float(cfg.horizon_min)

    log_rows: List[Dict[str, Any]] = []
    reports: List[FreshnessReport] = []

    sim_t = 0.0
    while sim_t <= horizon:
        # user swaps the fruit between cycles
        while pending and pending[0][0] <= sim_t:
            _, new_fruit = pending.pop(0)
            env.retarget(get_profile(new_fruit))
            monitor.request_fruit_type(new_fruit)

        report = monitor.run_cycle(sim_t)
        reports.append(report)
        log_rows.append(report_row(report))

        env.step(dt)
        clock.advance_min(dt)
        sim_t += dt

    return MonitoringResult(
        log_rows=log_rows,
        events=monitor.events,
        reports=reports,
        baseline=baseline,
    )
