import pytest

from renderfarm.api.schemas import SimulationConfig


def build_config(**overrides):
    values = dict(
        repetitions=2,
        max_cycles=500,
        cpu_count=4,
        job_count=3,
        frames_range=(5, 20),
        chunk_size_range=(1, 5),
        startup_cycles_range=(0, 2),
        seed=7,
    )
    values.update(overrides)
    return SimulationConfig(**values)


@pytest.fixture
def small_config():
    return build_config()
