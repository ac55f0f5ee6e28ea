import random
from typing import Iterable, List, Optional

from renderfarm.api import Job, JobParams, SimulationConfig
import logging


def jobs_from_params(params: Iterable[JobParams]) -> List[Job]:
    return [Job.from_params(p) for p in params]


class JobGenerator:
    """Draws job parameters uniformly from the config's inclusive ranges.

    An instance is callable with no arguments, so it can be handed to
    ``run_batch`` as the job factory. Each call yields a fresh population.
    """

    def __init__(self, config: SimulationConfig, rng: Optional[random.Random] = None):
        self.config = config
        self.rng = rng if rng is not None else random.Random(config.seed)

    def sample_params(self) -> JobParams:
        return (
            self.rng.randint(*self.config.frames_range),
            self.rng.randint(*self.config.chunk_size_range),
            self.rng.randint(*self.config.startup_cycles_range),
        )

    def generate(self, count: Optional[int] = None) -> List[Job]:
        count = self.config.job_count if count is None else count
        jobs = jobs_from_params(self.sample_params() for _ in range(count))
        logging.debug(
            f"Generated {len(jobs)} jobs, {sum(j.remaining_units for j in jobs)} units total"
        )
        return jobs

    def __call__(self) -> List[Job]:
        return self.generate()
