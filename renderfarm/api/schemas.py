# renderfarm/api/schemas.py

from pydantic import BaseModel, Field, conint, field_validator, model_validator
from typing import Optional, List, Tuple
import math
import uuid

from renderfarm.errors import InvalidChunkSize


# -----------------------------
# 1. Simulation Config (User Input Parameters)
# -----------------------------
class SimulationConfig(BaseModel):
    repetitions: conint(gt=0) = Field(..., description="Independent runs over fresh job populations")
    max_cycles: conint(gt=0) = Field(..., description="Cycle cap per repetition")

    # Farm Config
    cpu_count: conint(gt=0) = Field(..., description="Concurrent CPU slots in the farm")

    # Job Config
    job_count: conint(gt=0) = Field(..., description="Jobs generated per repetition")
    frames_range: Tuple[conint(ge=1), conint(ge=1)] = Field(..., description="Min/Max frames per job")
    chunk_size_range: Tuple[conint(ge=1), conint(ge=1)] = Field(..., description="Min/Max frames per task")
    startup_cycles_range: Tuple[conint(ge=0), conint(ge=0)] = Field(..., description="Min/Max startup cycles per task")

    seed: Optional[int] = None
    plot_path: str = "renderfarm.png"

    @model_validator(mode="after")
    def check_ranges(self):
        for name in ("frames_range", "chunk_size_range", "startup_cycles_range"):
            low, high = getattr(self, name)
            if high < low:
                raise ValueError(f"{name}: max ({high}) must be >= min ({low})")
        return self


# -----------------------------
# 2. Job Model
# -----------------------------
JobParams = Tuple[int, int, int]


class Job(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    total_frames: conint(ge=0)
    chunk_size: int
    startup_cycles: conint(ge=0) = 0
    task_count: int = 0
    remaining_units: int = 0

    @field_validator("chunk_size")
    @classmethod
    def check_chunk_size(cls, value: int) -> int:
        # raised as-is, pydantic only wraps ValueError/AssertionError
        if value < 1:
            raise InvalidChunkSize(f"chunk_size must be >= 1, got {value}")
        return value

    @model_validator(mode="after")
    def derive_work(self):
        self.task_count = math.ceil(self.total_frames / self.chunk_size)
        self.remaining_units = self.total_frames + self.task_count * self.startup_cycles
        return self

    @classmethod
    def from_params(cls, params: JobParams) -> "Job":
        frames, chunk_size, startup_cycles = params
        return cls(total_frames=frames, chunk_size=chunk_size, startup_cycles=startup_cycles)

    @property
    def done(self) -> bool:
        return self.remaining_units == 0

    def advance(self):
        if self.remaining_units > 0:
            self.remaining_units -= 1


# -----------------------------
# 3. Result Models
# -----------------------------
class CycleStats(BaseModel):
    cycle: int = -1
    used_cpus: int
    utilization: float
    completion: float
    active_jobs: int
    finished_jobs: int = 0


class SimulationResult(BaseModel):
    utilization_series: List[float] = Field(default_factory=list)
    completion_series: List[float] = Field(default_factory=list)
    last_active_cycle: Optional[int] = None
    total_units_at_start: int
    cycles_run: int = 0
    remaining_jobs: int = 0
    stopped: bool = False  # ended by a stop request, not by draining or the cap

    @property
    def exhausted(self) -> bool:
        return self.remaining_jobs > 0 and not self.stopped


class BatchSummary(BaseModel):
    repetitions: int
    drained_repetitions: int
    exhausted_repetitions: int
    stopped_repetitions: int = 0
    mean_last_active_cycle: Optional[float] = None
    min_last_active_cycle: Optional[int] = None
    max_last_active_cycle: Optional[int] = None
    mean_utilization: float = 0.0
    peak_utilization: float = 0.0


class BatchResult(BaseModel):
    config: Optional[SimulationConfig] = None
    results: List[SimulationResult] = Field(default_factory=list)
    summary: BatchSummary
