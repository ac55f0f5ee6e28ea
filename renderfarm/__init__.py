# renderfarm/__init__.py
from .api import SimulationConfig, Job, CycleStats, SimulationResult, BatchResult
from .errors import FarmError, InvalidChunkSize, DegenerateCapacity, ConfigError
from .schedulers import FIFOScheduler
from .simulation import SimulationEngine, Farm, JobGenerator, run_repetition, run_batch
