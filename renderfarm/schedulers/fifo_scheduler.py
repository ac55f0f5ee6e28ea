# renderfarm/schedulers/fifo_scheduler.py

from renderfarm.api.schemas import Job
import logging
from typing import List


class FIFOScheduler:
    """
    Strict submission-order allocation of CPU slots to job tasks.

    Each task of a job claims one slot and advances the job by one unit.
    A job stops claiming slots as soon as it finishes. Once the farm runs
    out of free slots the whole walk stops, so later jobs get nothing this
    cycle even if they have idle tasks.
    """

    def schedule(self, jobs: List[Job], free_cpus: int) -> int:
        logging.debug(
            f"=== Farm State Before Scheduling === free CPUs {free_cpus}, "
            f"jobs {len(jobs)}"
        )

        for job in jobs:
            if free_cpus == 0:
                break
            free_cpus = self._render_job(job, free_cpus)

        logging.debug(
            f"=== Farm State After Scheduling === free CPUs {free_cpus}, "
            f"remaining units {sum(job.remaining_units for job in jobs)}"
        )
        return free_cpus

    def _render_job(self, job: Job, free_cpus: int) -> int:
        for _ in range(job.task_count):
            if free_cpus == 0:
                break
            free_cpus -= 1
            job.advance()
            if job.done:
                logging.debug(f"Job {job.id[:6]} rendered its last unit")
                break
        return free_cpus
