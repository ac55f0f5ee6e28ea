# renderfarm/api/__init__.py
from .schemas import (
    SimulationConfig,
    Job,
    JobParams,
    CycleStats,
    SimulationResult,
    BatchSummary,
    BatchResult,
)
