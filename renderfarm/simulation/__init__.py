# renderfarm/simulation/__init__.py
from .engine import SimulationEngine, RunPhase, run_repetition, run_batch
from .farm import Farm
from .job_generator import JobGenerator, jobs_from_params
