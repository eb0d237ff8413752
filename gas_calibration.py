# gas_calibration.py
from __future__ import annotations
from typing import Callable, Optional


class GasCalibrator:
    """
    Running-average baseline for the analog gas channel.

    The baseline is the plain arithmetic mean of the samples taken since the
    last reset. Reading it before any sample returns 0; callers are expected to
    run a full calibration window first.
    """

    def __init__(self):
        self._sum = 0
        self._count = 0
        self._baseline = 0

    def reset(self) -> None:
        self._sum = 0
        self._count = 0
        self._baseline = 0

    def add_sample(self, raw: int) -> None:
        self._sum += int(raw)
        self._count += 1
        self._baseline = self._sum // self._count

    def get_baseline(self) -> int:
        return self._baseline

    @property
    def sample_count(self) -> int:
        return self._count


def run_calibration(
    calibrator: GasCalibrator,
    read_gas: Callable[[], int],
    clock: Callable[[], float],
    sleep: Callable[[float], None],
    window_s: float = 10.0,
    interval_s: float = 0.5,
    on_progress: Optional[Callable[[int], None]] = None,
) -> int:
    """
    Poll the gas channel for a fixed window and return the frozen baseline.

    clock returns monotonic milliseconds. At least one sample is always taken,
    so the baseline is never the uninitialized 0.
    """
    calibrator.reset()
    window_ms = window_s * 1000.0
    started = clock()

    while True:
        calibrator.add_sample(read_gas())

        elapsed = clock() - started
        if on_progress is not None:
            on_progress(min(100, int(elapsed * 100 / window_ms)) if window_ms > 0 else 100)
        if elapsed >= window_ms:
            break
        sleep(interval_s)

    return calibrator.get_baseline()
