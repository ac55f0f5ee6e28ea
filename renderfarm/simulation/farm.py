# renderfarm/simulation/farm.py

import logging
from typing import Iterable, List, Optional

from renderfarm.api.schemas import CycleStats, Job
from renderfarm.errors import DegenerateCapacity
from renderfarm.schedulers.fifo_scheduler import FIFOScheduler


class Farm:
    def __init__(self, cpu_capacity: int, jobs: Optional[Iterable[Job]] = None, scheduler=None):
        if cpu_capacity < 1:
            raise DegenerateCapacity(f"cpu_capacity must be >= 1, got {cpu_capacity}")
        self.cpu_capacity = cpu_capacity
        self.free_cpus = cpu_capacity
        self.scheduler = scheduler or FIFOScheduler()
        self.jobs: List[Job] = []
        self.submitted_count = 0
        for job in jobs or []:
            self.submit(job)

    def submit(self, job: Job):
        self.jobs.append(job)
        self.submitted_count += 1

    @property
    def total_units(self) -> int:
        return sum(job.remaining_units for job in self.jobs)

    @property
    def is_empty(self) -> bool:
        return not self.jobs

    # ------------------------------
    # One Cycle
    # ------------------------------
    def render_cycle(self) -> CycleStats:
        self.free_cpus = self.cpu_capacity
        self.free_cpus = self.scheduler.schedule(self.jobs, self.free_cpus)

        before = len(self.jobs)
        self.jobs = [job for job in self.jobs if not job.done]
        finished = before - len(self.jobs)
        if finished:
            logging.debug(f"Removed {finished} finished job(s), {len(self.jobs)} left")

        used_cpus = self.cpu_capacity - self.free_cpus
        stats = CycleStats(
            used_cpus=used_cpus,
            utilization=self._utilization(used_cpus),
            completion=self._completion(),
            active_jobs=len(self.jobs),
            finished_jobs=finished,
        )

        self.free_cpus = self.cpu_capacity
        return stats

    def _utilization(self, used_cpus: int) -> float:
        if used_cpus == self.cpu_capacity:
            return 100.0
        return (used_cpus / self.cpu_capacity) * 100.0

    def _completion(self) -> float:
        if self.submitted_count == 0:
            return 100.0
        return ((self.submitted_count - len(self.jobs)) / self.submitted_count) * 100.0
