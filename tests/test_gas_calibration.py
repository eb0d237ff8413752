from gas_calibration import GasCalibrator, run_calibration


def test_baseline_is_zero_before_samples():
    cal = GasCalibrator()
    assert cal.get_baseline() == 0
    assert cal.sample_count == 0


def test_baseline_is_running_integer_mean():
    cal = GasCalibrator()
    cal.add_sample(300)
    assert cal.get_baseline() == 300
    cal.add_sample(301)
    assert cal.get_baseline() == 300     # 601 // 2
    cal.add_sample(305)
    assert cal.get_baseline() == 302     # 906 // 3
    assert cal.sample_count == 3


def test_reset_discards_history():
    cal = GasCalibrator()
    for raw in (500, 520, 540):
        cal.add_sample(raw)
    cal.reset()
    assert cal.get_baseline() == 0
    assert cal.sample_count == 0

    cal.add_sample(310)
    assert cal.get_baseline() == 310


def test_run_calibration_covers_window(clock):
    cal = GasCalibrator()
    values = iter(range(300, 400))
    progress = []

    baseline = run_calibration(
        cal, lambda: next(values), clock, clock.sleep,
        window_s=10.0, interval_s=0.5, on_progress=progress.append,
    )

    # samples at 0.0, 0.5, ..., 10.0 s
    assert cal.sample_count == 21
    assert baseline == (300 + 320) // 2
    assert clock() == 10_000.0
    assert progress[0] == 0
    assert progress[-1] == 100
    assert progress == sorted(progress)


def test_run_calibration_takes_at_least_one_sample(clock):
    cal = GasCalibrator()
    baseline = run_calibration(cal, lambda: 287, clock, clock.sleep, window_s=0.0)
    assert cal.sample_count == 1
    assert baseline == 287


def test_recalibration_replaces_previous_baseline(clock):
    cal = GasCalibrator()
    run_calibration(cal, lambda: 300, clock, clock.sleep, window_s=2.0, interval_s=1.0)
    assert cal.get_baseline() == 300

    run_calibration(cal, lambda: 420, clock, clock.sleep, window_s=2.0, interval_s=1.0)
    assert cal.get_baseline() == 420
    assert cal.sample_count == 3
