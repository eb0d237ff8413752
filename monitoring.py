# monitoring.py
from __future__ import annotations
import time
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple

from advisory import estimate_q10_shelf_life, storage_tips
from config import MonitorConfig
from data_models import FreshnessReport, FruitType, MonitorEvent
from freshness_model import FreshnessModel, monotonic_ms
from gas_calibration import GasCalibrator, run_calibration
from sensors import make_reading


class SensorSource(Protocol):
    def read(self) -> Tuple[float, float, int]: ...
    def read_gas(self) -> int: ...


class FruitMonitor:
    """
    One monitoring session: calibrate once, then read -> score -> report
    every cycle.

    All state changes happen inside calibrate() and run_cycle(). A fruit
    switch requested from elsewhere (a button callback) is only queued and
    takes effect at the start of the next cycle.
    """

    def __init__(
        self,
        source: SensorSource,
        cfg: Optional[MonitorConfig] = None,
        fruit_type: FruitType = FruitType.BANANA,
        clock: Callable[[], float] = monotonic_ms,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.source = source
        self.cfg = cfg if cfg is not None else MonitorConfig()
        self.clock = clock
        self.sleep = sleep

        self.calibrator = GasCalibrator()
        self.model = FreshnessModel(fruit_type, clock)
        self.events: List[MonitorEvent] = []

        self._started_ms = clock()
        self._pending_fruit: Optional[FruitType] = None
        self._last_stage = self.model.get_stage()
        self._expired = False

    def _elapsed_min(self) -> float:
        return (self.clock() - self._started_ms) / 60000.0

    def calibrate(
        self,
        on_progress: Optional[Callable[[int], None]] = None,
        t_min: Optional[float] = None,
    ) -> int:
        """
        Poll the gas sensor for the calibration window and freeze the baseline.

        The completion event is stamped at `t_min` when given, otherwise at the
        elapsed wall time. A session that treats calibration as happening before
        its first cycle passes 0.0.
        """
        cfg = self.cfg
        if cfg.verbose:
            print(f"  [CALIBRATION] sampling gas sensor for {cfg.calibration_window_s:.0f}s...")

        baseline = run_calibration(
            self.calibrator,
            self.source.read_gas,
            self.clock,
            self.sleep,
            window_s=cfg.calibration_window_s,
            interval_s=cfg.calibration_interval_s,
            on_progress=on_progress,
        )

        if t_min is None:
            t_min = self._elapsed_min()
        self.events.append(MonitorEvent(t_min, "CALIBRATION_COMPLETE", {
            "baseline": baseline,
            "samples": self.calibrator.sample_count,
        }))
        if cfg.verbose:
            print(f"  [CALIBRATION] baseline={baseline} ({self.calibrator.sample_count} samples)")
        return baseline

    def request_fruit_type(self, fruit_type: FruitType) -> None:
        self._pending_fruit = fruit_type

    def _apply_pending_switch(self, t_min: float) -> None:
        if self._pending_fruit is None:
            return

        previous = self.model.fruit_type
        fruit_type = self._pending_fruit
        self._pending_fruit = None

        self.model.set_fruit_type(fruit_type)
        self._last_stage = self.model.get_stage()
        self._expired = False

        self.events.append(MonitorEvent(t_min, "FRUIT_SWITCH", {
            "from": previous.name, "to": fruit_type.name,
        }))
        if self.cfg.verbose:
            print(f"  [SWITCH] t={t_min:.1f} {previous.name} -> {fruit_type.name}")

    def run_cycle(self, t_min: Optional[float] = None) -> FreshnessReport:
        if t_min is None:
            t_min = self._elapsed_min()

        self._apply_pending_switch(t_min)

        temperature, humidity, gas_raw = self.source.read()
        reading = make_reading(
            temperature, humidity, gas_raw, self.calibrator.get_baseline(), self.cfg
        )
        model = self.model
        profile = model.profile

        if reading.valid:
            model.update_readings(reading.temperature, reading.humidity, reading.gas_delta)
            storage_quality = model.calculate_storage_score(reading.temperature, reading.humidity)
            shelf_life = estimate_q10_shelf_life(
                profile, reading.temperature, reading.humidity, model.get_score(), self.cfg
            ).days
            tips = storage_tips(profile, reading.temperature, reading.humidity, reading.gas_delta)
        else:
            # keep the previous score; nothing from this cycle reaches the model
            storage_quality = None
            shelf_life = None
            tips = []
            self.events.append(MonitorEvent(t_min, "SENSOR_INVALID", {
                "temperature": reading.temperature, "humidity": reading.humidity,
            }))
            if self.cfg.verbose:
                print(f"  [SKIP] t={t_min:.1f} invalid reading, score held at {model.get_score():.1f}")

        score = model.get_score()
        stage = model.get_stage()
        remaining = model.get_remaining_days()

        if stage != self._last_stage:
            self.events.append(MonitorEvent(t_min, "STAGE_CHANGE", {
                "from": self._last_stage.name, "to": stage.name, "score": round(score, 2),
            }))
            if self.cfg.verbose:
                print(f"  [STAGE] t={t_min:.1f} {self._last_stage.label} -> {stage.label} (score={score:.1f})")
            self._last_stage = stage

        if remaining == -1 and not self._expired:
            self._expired = True
            self.events.append(MonitorEvent(t_min, "EXPIRED", {"fruit": model.fruit_type.name}))

        return FreshnessReport(
            t_min=t_min,
            fruit_type=model.fruit_type,
            score=score,
            stage=stage,
            remaining_days=remaining,
            storage_quality=storage_quality,
            shelf_life_days=shelf_life,
            tips=tips,
            reading=reading,
        )


def report_row(report: FreshnessReport) -> Dict[str, Any]:
    """Flatten a report into one log row."""
    reading = report.reading
    return {
        "t_min": report.t_min,
        "fruit": report.fruit_type.name,
        "temperature_c": None if reading is None or not reading.valid else reading.temperature,
        "humidity_pct": None if reading is None or not reading.valid else reading.humidity,
        "gas_raw": None if reading is None else reading.gas_raw,
        "gas_delta": None if reading is None else reading.gas_delta,
        "valid": reading is not None and reading.valid,
        "score": round(report.score, 2),
        "stage": report.stage.name,
        "remaining_days": report.remaining_days,
        "storage_quality": report.storage_quality,
        "shelf_life_days": None if report.shelf_life_days is None else round(report.shelf_life_days, 2),
    }


def session_statistics(reports: List[FreshnessReport]) -> Dict[str, Any]:
    """
    Session totals for the dashboard. The remaining-days average only counts
    reports that are not expired, and is None when every report is.
    """
    days = [r.remaining_days for r in reports if r.remaining_days >= 0]
    return {
        "readings": len(reports),
        "avg_score": sum(r.score for r in reports) / len(reports) if reports else None,
        "avg_remaining_days": sum(days) / len(days) if days else None,
    }
