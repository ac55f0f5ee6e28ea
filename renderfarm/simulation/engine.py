# renderfarm/simulation/engine.py

from enum import Enum
from typing import Callable, Iterable, Iterator, List, Optional
from tqdm import tqdm
from renderfarm.api import BatchResult, Job, SimulationConfig, SimulationResult, CycleStats
from renderfarm.metrics.summary import summarize_batch
from renderfarm.simulation.farm import Farm
from renderfarm.simulation.job_generator import JobGenerator
import logging
import asyncio

JobFactory = Callable[[], Iterable[Job]]


class RunPhase(str, Enum):
    ACTIVE = "active"
    DRAINING = "draining"


def _iter_cycles(
    farm: Farm,
    max_cycles: int,
    result: SimulationResult,
    stop_flag: Optional[Callable[[], bool]] = None,
) -> Iterator[CycleStats]:
    """Render cycles into ``result`` until the delayed stop fires or the cap is hit.

    The farm is first seen empty at the end of some cycle; the run then
    goes one more cycle before stopping, and that extra cycle is the one
    recorded as ``last_active_cycle``. ``stop_flag`` is checked before each
    cycle is rendered, so a stopped result holds only the yielded cycles.
    """
    phase = RunPhase.ACTIVE
    try:
        for cycle in range(max_cycles):
            if stop_flag and stop_flag():
                result.stopped = True
                break
            stats = farm.render_cycle()
            stats.cycle = cycle
            result.utilization_series.append(stats.utilization)
            result.completion_series.append(stats.completion)
            logging.debug(
                f"Cycle {cycle}: utilization {stats.utilization:.2f}%, "
                f"completed {stats.completion:.2f}%, jobs left {stats.active_jobs}"
            )
            yield stats

            if phase is RunPhase.DRAINING:
                result.last_active_cycle = cycle
                break
            if farm.is_empty:
                phase = RunPhase.DRAINING
    finally:
        result.cycles_run = len(result.utilization_series)
        result.remaining_jobs = len(farm.jobs)


def run_repetition(farm: Farm, max_cycles: int) -> SimulationResult:
    result = SimulationResult(total_units_at_start=farm.total_units)
    for _ in _iter_cycles(farm, max_cycles, result):
        pass

    if result.exhausted:
        logging.warning(
            f"Cycle cap {max_cycles} reached with {result.remaining_jobs} job(s) unfinished"
        )
    else:
        logging.info(
            f"Farm drained: last active cycle {result.last_active_cycle}, "
            f"{result.total_units_at_start} units at start"
        )
    return result


def run_batch(
    repetitions: int,
    job_factory: JobFactory,
    max_cycles: int,
    cpu_capacity: int,
    progress: bool = False,
) -> List[SimulationResult]:
    results = []
    for rep in tqdm(range(repetitions), desc="Repetitions", disable=not progress):
        farm = Farm(cpu_capacity, jobs=job_factory())
        logging.info(f"Repetition {rep}: {len(farm.jobs)} jobs on {cpu_capacity} CPUs")
        results.append(run_repetition(farm, max_cycles))
    return results


class SimulationEngine:
    def __init__(self, config: SimulationConfig, job_factory: Optional[JobFactory] = None):
        self.config = config
        self.job_factory = job_factory or JobGenerator(config)
        self.results: List[SimulationResult] = []

    # ------------------------------
    # Batch Run
    # ------------------------------
    def run(self, progress: bool = False) -> BatchResult:
        logging.info("SimulationEngine started")
        self.results = run_batch(
            self.config.repetitions,
            self.job_factory,
            self.config.max_cycles,
            self.config.cpu_count,
            progress=progress,
        )
        logging.info("SimulationEngine finished")
        return self._collect_results()

    # ------------------------------
    # Live Run
    # ------------------------------
    async def run_live(self, stop_flag=None):
        self.results = []
        logging.info("SimulationEngine started (live)")

        for rep in range(self.config.repetitions):
            farm = Farm(self.config.cpu_count, jobs=self.job_factory())
            result = SimulationResult(total_units_at_start=farm.total_units)
            self.results.append(result)

            cycles = _iter_cycles(farm, self.config.max_cycles, result, stop_flag=stop_flag)
            try:
                for stats in cycles:
                    yield {
                        "repetition": rep,
                        "cycle": stats.cycle,
                        "utilization": stats.utilization,
                        "completion": stats.completion,
                        "active_jobs": stats.active_jobs,
                    }
                    await asyncio.sleep(0)
            finally:
                cycles.close()

            if result.stopped:
                logging.info(f"Stop requested, ending simulation early in repetition {rep}")
                return

        logging.info("SimulationEngine finished (live)")

    # ------------------------------
    # Results Collection
    # ------------------------------
    def _collect_results(self) -> BatchResult:
        return BatchResult(
            config=self.config,
            results=self.results,
            summary=summarize_batch(self.results),
        )
