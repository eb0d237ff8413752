# run_demo.py
from __future__ import annotations

import matplotlib.pyplot as plt
import matplotlib
matplotlib.use('Agg')  # Non-interactive backend for saving figures

from config import MonitorConfig
from data_models import FreshnessStage, FruitType
from fruit_profiles import get_display_name, get_emoji, get_profile, parse_fruit_type
from sim_engine import run_monitoring
import time


STAGE_ICONS = {
    FreshnessStage.VERY_FRESH: "🟢",
    FreshnessStage.GOOD: "🔵",
    FreshnessStage.EAT_TODAY: "🟡",
    FreshnessStage.SPOILED: "🔴",
}


def print_profile(fruit_type: FruitType):
    p = get_profile(fruit_type)
    print(f"\n=== {get_emoji(fruit_type)} {get_display_name(fruit_type)} profile ===")
    print(f"Optimal temperature: {p.min_temp:.0f}-{p.max_temp:.0f}°C (midpoint {p.optimal_temp:.1f}°C)")
    print(f"Optimal humidity:    {p.min_humidity:.0f}-{p.max_humidity:.0f}% (midpoint {p.optimal_humidity:.1f}%)")
    print(f"Expected life:       {p.expected_life_days} days, {p.time_decay_coeff} points/hour")


def print_cycle_table(sim_res, every_n: int = 4):
    """Print every n-th cycle as the display would show it."""
    print("\n=== Monitoring Cycles ===")
    print(f"{'t (h)':>6} {'fruit':<7} {'temp':>6} {'hum':>6} {'gasΔ':>5} {'score':>6} "
          f"{'stage':<11} {'days':>4} {'store':>5}")

    for idx, report in enumerate(sim_res.reports):
        if idx % every_n != 0 and idx != len(sim_res.reports) - 1:
            continue
        reading = report.reading
        if reading is not None and reading.valid:
            temp_str = f"{reading.temperature:6.1f}"
            hum_str = f"{reading.humidity:6.1f}"
        else:
            temp_str = hum_str = f"{'--':>6}"
        store_str = "--" if report.storage_quality is None else str(report.storage_quality)
        days_str = "EXP" if report.remaining_days < 0 else str(report.remaining_days)
        gas_str = "--" if reading is None else str(reading.gas_delta)
        print(f"{report.t_min / 60:6.1f} {report.fruit_type.name.title():<7} {temp_str} {hum_str} "
              f"{gas_str:>5} {report.score:6.1f} "
              f"{STAGE_ICONS[report.stage]} {report.stage.label:<9} {days_str:>4} {store_str:>5}")


def print_events(events):
    """Show discrete events, skipping the noisy per-cycle ones."""
    print(f"\n=== Events ({len(events)} total) ===")
    invalid = [e for e in events if e.event == "SENSOR_INVALID"]
    for ev in events:
        if ev.event == "SENSOR_INVALID":
            continue
        print(f"t={ev.t_min / 60:6.1f} h  {ev.event:<20} {ev.details}")
    if invalid:
        print(f"({len(invalid)} invalid readings skipped)")


def plot_freshness_graphs(sim_res, filename: str = 'freshness_timeline.png'):
    """Plot score, remaining days and storage quality over the session."""
    print("\n=== Generating Freshness Graphs ===")

    if not sim_res.log_rows:
        print("No log data available for plotting")
        return

    hours = [row['t_min'] / 60 for row in sim_res.log_rows]
    scores = [row['score'] for row in sim_res.log_rows]
    storage = [row['storage_quality'] for row in sim_res.log_rows]
    days = [row['remaining_days'] for row in sim_res.log_rows]

    fig, axes = plt.subplots(2, 1, figsize=(12, 8), sharex=True)

    ax = axes[0]
    ax.plot(hours, scores, marker='o', markersize=3, label='Freshness score', linewidth=2)
    storage_pts = [(h, s) for h, s in zip(hours, storage) if s is not None]
    if storage_pts:
        sh, sv = zip(*storage_pts)
        ax.plot(sh, sv, linestyle='--', color='gray', label='Storage quality', linewidth=1.5)
    ax.set_ylabel('Score', fontsize=10)
    ax.set_title('Freshness Score Over Time', fontsize=12, fontweight='bold')
    ax.grid(True, alpha=0.3)
    ax.legend(fontsize=8, loc='best')
    ax.set_ylim([0, 105])

    # Add stage zones
    ax.axhspan(80, 100, alpha=0.05, color='green')
    ax.axhspan(60, 80, alpha=0.05, color='blue')
    ax.axhspan(40, 60, alpha=0.05, color='orange')
    ax.axhspan(0, 40, alpha=0.05, color='red')

    # Mark fruit switches
    for ev in sim_res.events:
        if ev.event == "FRUIT_SWITCH":
            ax.axvline(x=ev.t_min / 60, color='purple', linestyle=':', alpha=0.6)

    ax = axes[1]
    ax.step(hours, days, where='post', color='darkgreen', linewidth=2)
    ax.axhline(y=0, color='red', linestyle='--', alpha=0.3, linewidth=1)
    ax.set_xlabel('Time (hours)', fontsize=10)
    ax.set_ylabel('Remaining days', fontsize=10)
    ax.set_title('Estimated Remaining Shelf Life', fontsize=12, fontweight='bold')
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(filename, dpi=150, bbox_inches='tight')
    plt.close()
    print(f"✓ Freshness graph saved: {filename}")


def plot_environment_graphs(sim_res, fruit_type: FruitType, filename: str = 'storage_environment.png'):
    """Plot temperature, humidity and gas delta against the optimal band."""
    print("\n=== Generating Environment Graphs ===")

    rows = [row for row in sim_res.log_rows if row['valid']]
    if not rows:
        print("No valid readings available for plotting")
        return

    p = get_profile(fruit_type)
    hours = [row['t_min'] / 60 for row in rows]

    fig, axes = plt.subplots(3, 1, figsize=(12, 10), sharex=True)

    series = [
        ('temperature_c', 'Temperature (°C)', 'orange', (p.min_temp, p.max_temp)),
        ('humidity_pct', 'Humidity (%)', 'blue', (p.min_humidity, p.max_humidity)),
        ('gas_delta', 'Gas Δ (ADC)', 'brown', None),
    ]
    for ax, (key, label, color, band) in zip(axes, series):
        ax.plot(hours, [row[key] for row in rows], marker='o', markersize=2, color=color, linewidth=1.5)
        if band is not None:
            ax.axhspan(band[0], band[1], alpha=0.1, color='green')
        else:
            ax.axhline(y=0, color=color, linestyle='--', alpha=0.3, linewidth=1)
        ax.set_ylabel(label, fontsize=10)
        ax.grid(True, alpha=0.3)

    axes[0].set_title(f'{get_display_name(fruit_type)} - Storage Environment', fontsize=12, fontweight='bold')
    axes[-1].set_xlabel('Time (hours)', fontsize=10)

    plt.tight_layout()
    plt.savefig(filename, dpi=150, bbox_inches='tight')
    plt.close()
    print(f"✓ Environment graph saved: {filename}")


def print_summary(sim_res):
    print("\n=== Final Summary ===")
    if not sim_res.reports:
        print("No cycles ran")
        return

    final = sim_res.reports[-1]
    valid = sum(1 for row in sim_res.log_rows if row['valid'])
    qualities = [row['storage_quality'] for row in sim_res.log_rows if row['storage_quality'] is not None]

    print(f"  Gas baseline: {sim_res.baseline}")
    print(f"  Cycles: {len(sim_res.reports)} ({valid} valid, {len(sim_res.reports) - valid} skipped)")
    print(f"  Fruit: {get_emoji(final.fruit_type)} {get_display_name(final.fruit_type)}")
    print(f"  Final score: {final.score:.1f} ({final.stage.label})")
    if final.remaining_days < 0:
        print("  Remaining: expired")
    else:
        print(f"  Remaining: {final.remaining_days} days")
    if final.shelf_life_days is not None:
        print(f"  Q10 shelf-life estimate: {final.shelf_life_days:.1f} days")
    if qualities:
        print(f"  Average storage quality: {sum(qualities) / len(qualities):.0f}/100")
    if final.tips:
        print(f"  Tips: {' • '.join(final.tips)}")


def main(fruit_type: FruitType = FruitType.BANANA):
    start_time = time.time()
    cfg = MonitorConfig(verbose=True)

    print("\n" + "="*70)
    print("FRUIT FRESHNESS MONITOR - SIMULATED SESSION")
    print("="*70)

    print_profile(fruit_type)

    # 1) Calibrate and run the time-stepped session
    print("\n" + "="*70)
    print("RUNNING MONITOR...")
    print("="*70)
    sim_res = run_monitoring(cfg, fruit_type=fruit_type, seed=7)
    print(f"✓ Session complete: {len(sim_res.log_rows)} cycles, {len(sim_res.events)} events")

    # 2) Print outputs in order
    print_cycle_table(sim_res)
    print_events(sim_res.events)

    # 3) Generate graphs
    plot_freshness_graphs(sim_res)
    plot_environment_graphs(sim_res, fruit_type)

    # 4) Final summary
    print_summary(sim_res)

    print("\n" + "="*70)
    print(f"DONE in {time.time() - start_time:.2f}s")
    print("="*70)


if __name__ == "__main__":
    import sys
    import subprocess
    import webbrowser
    from pathlib import Path

    fruit = FruitType.BANANA
    if "--fruit" in sys.argv:
        idx = sys.argv.index("--fruit")
        if idx + 1 >= len(sys.argv):
            sys.exit("--fruit needs a name (banana, orange, apple, grape)")
        try:
            fruit = parse_fruit_type(sys.argv[idx + 1])
        except ValueError as e:
            sys.exit(str(e))

    main(fruit)

    # Auto-launch option (can be controlled via command line)
    if "--dashboard" in sys.argv or "-d" in sys.argv:
        print("\n🚀 Launching Streamlit dashboard...")
        print("   Dashboard will open at: http://localhost:8501")
        print("   Press Ctrl+C in this terminal to stop the dashboard.\n")

        dashboard_file = Path(__file__).parent / "dashboard.py"
        try:
            subprocess.Popen(["streamlit", "run", str(dashboard_file)],
                             creationflags=subprocess.CREATE_NEW_CONSOLE if sys.platform == 'win32' else 0)
            time.sleep(3)
            webbrowser.open("http://localhost:8501")
        except OSError as e:
            print(f"❌ Error launching dashboard: {e}")
            print("\n   You can manually launch it with:")
            print("   streamlit run dashboard.py")
    else:
        print("\n💡 To launch the dashboard, run:")
        print("   streamlit run dashboard.py")
        print("   OR")
        print("   python run_demo.py --dashboard")
