"""
Run one simulated day in both operating modes and plot the results.

Produces in results/:
  1. day_cycle_load.png   — Cooling load (manual vs AI) with solar output
  2. day_cycle_ice.png    — Ice storage level and condensate recovery (AI)

Run from project root:
    python examples/day_cycle.py
"""

import logging
import os

import matplotlib.pyplot as plt
import numpy as np

from solrix.config import SimulationConfig
from solrix.control import OperatingMode
from solrix.simulation import SimulationController, TickDriver

# ── Style ──────────────────────────────────────────────────────────────────────
plt.rcParams.update({
    'figure.dpi': 150,
    'savefig.dpi': 150,
    'font.size': 11,
    'axes.titlesize': 13,
    'axes.labelsize': 11,
    'legend.fontsize': 9,
    'figure.facecolor': 'white',
    'axes.facecolor': '#fafafa',
    'axes.grid': True,
    'grid.alpha': 0.3,
})

RESULTS_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'results')


def run_day(mode: OperatingMode, tick_period_ms: float = 1.0) -> dict:
    """Drive a controller through 24 ticks and collect every snapshot."""
    config = SimulationConfig(tick_period_ms=tick_period_ms, start_mode=mode,
                              history_capacity=24)
    controller = SimulationController(config)
    snapshots = []
    driver = TickDriver(controller, on_tick=snapshots.append)
    driver.run(max_ticks=24)

    return {
        'hour': np.array([s.hour for s in snapshots]),
        'temp': np.array([s.temperature_c for s in snapshots]),
        'load': np.array([s.cooling_load_kw for s in snapshots]),
        'solar': np.array([s.solar_kw for s in snapshots]),
        'ice': np.array([s.ice_level_pct for s in snapshots]),
        'water': np.array([s.water_recovered_lph for s in snapshots]),
        'analysis': [s.analysis_text for s in snapshots],
    }


def print_summary(results: dict):
    print("\n" + "=" * 60)
    print("DAILY SUMMARY")
    print("=" * 60)
    for mode, r in results.items():
        print(f"\n{mode.label}:")
        print(f"  Cooling energy:    {r['load'].sum():.1f} kWh")
        print(f"  Peak load:         {r['load'].max():.1f} kW")
        print(f"  Solar generated:   {r['solar'].sum():.1f} kWh")
        print(f"  Water recovered:   {r['water'].sum():.1f} L")

    manual = results[OperatingMode.MANUAL]['load'].sum()
    ai = results[OperatingMode.AI_OPTIMIZED]['load'].sum()
    print(f"\nAI cooling savings: {manual - ai:.1f} kWh ({(1 - ai / manual) * 100:.0f}%)")


def plot_load(results: dict):
    ai = results[OperatingMode.AI_OPTIMIZED]
    manual = results[OperatingMode.MANUAL]

    fig, ax = plt.subplots(figsize=(10, 4.5))
    # ticks land on hours 1..23, 0
    order = np.argsort(ai['hour'])
    ax.plot(manual['hour'][order], manual['load'][order], color='#c0392b', lw=2,
            label='Cooling load — manual')
    ax.plot(ai['hour'][order], ai['load'][order], color='#22d3ee', lw=2,
            label='Cooling load — AI')
    ax.fill_between(ai['hour'][order], ai['solar'][order], color='#fbbf24', alpha=0.3,
                    label='Solar park')
    ax.axvspan(11, 17, color='#e67e22', alpha=0.08, label='Peak window')
    ax.set_xlabel('Hour of day')
    ax.set_ylabel('Power (kW)')
    ax.set_xticks(range(0, 24, 2))
    ax.set_title('Cooling Load vs Solar Generation')
    ax.legend(loc='upper left')
    fig.tight_layout()
    path = os.path.join(RESULTS_DIR, 'day_cycle_load.png')
    fig.savefig(path)
    plt.close(fig)
    print(f"Saved {path}")


def plot_ice(results: dict):
    ai = results[OperatingMode.AI_OPTIMIZED]
    order = np.argsort(ai['hour'])

    fig, ax1 = plt.subplots(figsize=(10, 4.5))
    ax1.bar(ai['hour'][order], ai['ice'][order], color='#3498db', alpha=0.6,
            label='Ice level')
    ax1.set_ylim(0, 100)
    ax1.set_xlabel('Hour of day')
    ax1.set_ylabel('Ice storage (%)')

    ax2 = ax1.twinx()
    ax2.plot(ai['hour'][order], ai['water'][order], color='#27ae60', lw=2,
             label='Condensate recovered')
    ax2.set_ylabel('Water (L/h)')
    ax2.grid(False)

    ax1.set_title('Ice Storage and Water Recovery (AI optimized)')
    fig.tight_layout()
    path = os.path.join(RESULTS_DIR, 'day_cycle_ice.png')
    fig.savefig(path)
    plt.close(fig)
    print(f"Saved {path}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    os.makedirs(RESULTS_DIR, exist_ok=True)

    results = {mode: run_day(mode) for mode in OperatingMode}
    print_summary(results)
    plot_load(results)
    plot_ice(results)
