# renderfarm/main.py

import argparse
import logging
import sys

from pydantic import ValidationError

from renderfarm.api.schemas import SimulationConfig
from renderfarm.errors import ConfigError
from renderfarm.metrics.plots import simulation_plot
from renderfarm.metrics.summary import mean_utilization
from renderfarm.simulation.engine import SimulationEngine
from renderfarm.store.config_store import DEFAULT_CONFIG_PATH, load_config


def build_parser():
    parser = argparse.ArgumentParser(description="Simulate a render farm draining a batch of jobs.")
    parser.add_argument("--config", type=str, default=DEFAULT_CONFIG_PATH,
                        help="Path to the JSON config (written with defaults if missing).")
    parser.add_argument("--repetitions", type=int, default=None, help="Override config repetitions.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for job generation.")
    parser.add_argument("--plot", type=str, default=None, help="Override the output plot path.")
    parser.add_argument("--no-plot", action="store_true", help="Skip writing the plot image.")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def resolve_config(args) -> SimulationConfig:
    config = load_config(args.config)
    overrides = {}
    if args.repetitions is not None:
        overrides["repetitions"] = args.repetitions
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.plot is not None:
        overrides["plot_path"] = args.plot
    if not overrides:
        return config
    # model_copy skips validation, so run the merged values through the model again
    return SimulationConfig(**config.model_copy(update=overrides).model_dump())


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        config = resolve_config(args)
    except (ConfigError, ValidationError) as e:
        logging.error(str(e))
        return 1

    engine = SimulationEngine(config)
    batch = engine.run(progress=True)

    print("=== Simulation Results ===")
    for rep, result in enumerate(batch.results):
        if result.exhausted:
            outcome = f"cap reached, {result.remaining_jobs} jobs left"
        else:
            outcome = f"drained at cycle {result.last_active_cycle}"
        print(f"Repetition {rep}: {outcome}")
        print(f"  Units at start: {result.total_units_at_start}")
        print(f"  Mean utilization: {mean_utilization(result.utilization_series):.2f}%")

    summary = batch.summary
    print(f"Drained {summary.drained_repetitions}/{summary.repetitions} repetitions")
    if summary.mean_last_active_cycle is not None:
        print(
            f"  Cycles to drain: mean {summary.mean_last_active_cycle:.1f}, "
            f"min {summary.min_last_active_cycle}, max {summary.max_last_active_cycle}"
        )
    print(f"  Mean utilization: {summary.mean_utilization:.2f}%")

    if not args.no_plot:
        simulation_plot(batch.results, config, config.plot_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
