# renderfarm/metrics/plots.py
import os
import logging
from typing import List, Optional

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

from renderfarm.api.schemas import SimulationConfig, SimulationResult

# 1280x720 at 100 dpi
FIGSIZE = (12.8, 7.2)
DPI = 100


def _ensure_dir(path):
    d = os.path.dirname(path)
    if d and not os.path.exists(d):
        os.makedirs(d, exist_ok=True)


def simulation_plot(results: List[SimulationResult], config: Optional[SimulationConfig], path: str) -> str:
    """
    Line plot of utilization % (solid) and completion % (dashed) per cycle,
    one pair of lines per repetition. Returns the written path.
    """
    _ensure_dir(path)
    fig, ax = plt.subplots(figsize=FIGSIZE, dpi=DPI)

    for rep, result in enumerate(results):
        cycles = range(len(result.utilization_series))
        line, = ax.plot(cycles, result.utilization_series, label=f"rep {rep} utilization")
        ax.plot(
            cycles,
            result.completion_series,
            linestyle="--",
            color=line.get_color(),
            alpha=0.7,
            label=f"rep {rep} completed",
        )

    ax.set_ylim(0, 100)
    ax.set_xlabel("Cycle")
    ax.set_ylabel("Percent")
    if config is not None:
        ax.set_title(
            f"Render farm: {config.cpu_count} CPUs, {config.job_count} jobs, "
            f"{config.repetitions} repetitions"
        )
    else:
        ax.set_title("Render farm")
    ax.grid(True, alpha=0.3)
    if results and len(results) <= 10:
        ax.legend(loc="lower right", fontsize="small")

    fig.tight_layout()
    fig.savefig(path)
    plt.close(fig)
    logging.info(f"[plots] Saved simulation plot -> {path}")
    return path
