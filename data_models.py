# data_models.py
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class FruitType(Enum):
    # values match the fruit byte of the device uplink
    BANANA = 0
    ORANGE = 1
    APPLE = 2
    GRAPE = 3


class FreshnessStage(Enum):
    VERY_FRESH = 0   # 80-100
    GOOD = 1         # 60-79
    EAT_TODAY = 2    # 40-59
    SPOILED = 3      # <40

    @property
    def label(self) -> str:
        return self.name.replace("_", " ")

    @property
    def color(self) -> str:
        return _STAGE_COLORS[self]


_STAGE_COLORS = {
    FreshnessStage.VERY_FRESH: "#22c55e",
    FreshnessStage.GOOD: "#3b82f6",
    FreshnessStage.EAT_TODAY: "#f59e0b",
    FreshnessStage.SPOILED: "#ef4444",
}


@dataclass(frozen=True)
class FruitProfile:
    name: str
    emoji: str

    # optimal storage band (Kader, 2002)
    min_temp: float              # degC
    max_temp: float
    min_humidity: float          # %RH
    max_humidity: float

    # gas sensitivity (Saltveit, 1999)
    gas_threshold: float

    # freshness score decay coefficients
    temp_decay_coeff: float      # points per degC off the midpoint
    humid_decay_coeff: float     # points per %RH off the midpoint
    gas_decay_coeff: float       # points per ADC unit above baseline
    time_decay_coeff: float      # points per hour

    initial_score: float = 100.0
    expected_life_days: int = 7

    @property
    def optimal_temp(self) -> float:
        return (self.min_temp + self.max_temp) / 2.0

    @property
    def optimal_humidity(self) -> float:
        return (self.min_humidity + self.max_humidity) / 2.0


@dataclass
class SensorReading:
    temperature: float           # degC, NaN when the read failed
    humidity: float              # %RH, NaN when the read failed
    gas_raw: int                 # ADC units
    gas_baseline: int            # calibrated clean-air reference
    valid: bool

    @property
    def gas_delta(self) -> int:
        return self.gas_raw - self.gas_baseline


@dataclass
class FreshnessReport:
    t_min: float
    fruit_type: FruitType
    score: float
    stage: FreshnessStage
    remaining_days: int          # -1 once expired
    storage_quality: Optional[int]   # None when the reading was skipped
    shelf_life_days: Optional[float]
    tips: List[str] = field(default_factory=list)
    reading: Optional[SensorReading] = None


@dataclass
class MonitorEvent:
    t_min: float
    event: str
    details: Dict[str, Any]
