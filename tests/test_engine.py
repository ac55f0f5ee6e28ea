import asyncio

from renderfarm.api.schemas import Job
from renderfarm.simulation.engine import SimulationEngine, run_batch, run_repetition
from renderfarm.simulation.farm import Farm
from renderfarm.simulation.job_generator import jobs_from_params

from conftest import build_config


def two_overhead_jobs():
    return jobs_from_params([(10, 5, 2), (10, 5, 2)])


def test_two_jobs_drain_with_delayed_stop():
    farm = Farm(2, jobs=two_overhead_jobs())

    result = run_repetition(farm, max_cycles=100)

    assert result.total_units_at_start == 28
    assert result.last_active_cycle == 14
    assert result.cycles_run == 15
    assert result.remaining_jobs == 0
    assert not result.exhausted
    assert result.utilization_series == [100.0] * 14 + [0.0]
    assert result.completion_series[5] == 0.0
    assert result.completion_series[6] == 50.0
    assert result.completion_series[12] == 50.0
    assert result.completion_series[13:] == [100.0, 100.0]


def test_delayed_stop_records_one_idle_cycle():
    farm = Farm(1, jobs=[Job(total_frames=1, chunk_size=1000)])

    result = run_repetition(farm, max_cycles=10)

    assert result.utilization_series == [100.0, 0.0]
    assert result.last_active_cycle == 1


def test_empty_farm_completes_immediately():
    result = run_repetition(Farm(3), max_cycles=10)

    assert result.total_units_at_start == 0
    assert result.last_active_cycle == 1
    assert result.utilization_series == [0.0, 0.0]
    assert result.completion_series == [100.0, 100.0]


def test_cycle_cap_is_a_normal_outcome():
    farm = Farm(1, jobs=[Job(total_frames=10, chunk_size=1)])

    result = run_repetition(farm, max_cycles=3)

    assert result.last_active_cycle is None
    assert result.exhausted
    assert result.remaining_jobs == 1
    assert result.cycles_run == 3
    assert result.utilization_series == [100.0, 100.0, 100.0]


def test_total_units_at_start_is_not_mutated():
    farm = Farm(2, jobs=two_overhead_jobs())
    result = run_repetition(farm, max_cycles=5)
    assert result.total_units_at_start == 28
    assert farm.total_units == 28 - 10


def test_run_batch_uses_fresh_farm_and_jobs():
    calls = []

    def factory():
        calls.append(1)
        return two_overhead_jobs()

    results = run_batch(3, factory, max_cycles=100, cpu_capacity=2)

    assert len(calls) == 3
    assert [r.last_active_cycle for r in results] == [14, 14, 14]
    assert all(r.total_units_at_start == 28 for r in results)


def test_engine_run_collects_summary():
    config = build_config(repetitions=2, cpu_count=2, max_cycles=100)
    engine = SimulationEngine(config, job_factory=two_overhead_jobs)

    batch = engine.run()

    assert batch.config == config
    assert len(batch.results) == 2
    assert batch.summary.drained_repetitions == 2
    assert batch.summary.mean_last_active_cycle == 14.0


def test_engine_defaults_to_random_generator():
    config = build_config(repetitions=3, job_count=4)
    batch = SimulationEngine(config).run()

    assert len(batch.results) == 3
    for result in batch.results:
        assert len(result.utilization_series) == len(result.completion_series)
        assert result.cycles_run == len(result.utilization_series)


def test_seeded_engines_are_reproducible():
    config = build_config(repetitions=2, seed=123)
    first = SimulationEngine(config).run()
    second = SimulationEngine(config).run()
    assert first.results == second.results


def test_run_live_streams_every_cycle():
    config = build_config(repetitions=2, cpu_count=2, max_cycles=100)
    engine = SimulationEngine(config, job_factory=two_overhead_jobs)

    async def collect():
        return [snapshot async for snapshot in engine.run_live()]

    snapshots = asyncio.run(collect())

    assert len(snapshots) == 30
    assert snapshots[14] == {
        "repetition": 0,
        "cycle": 14,
        "utilization": 0.0,
        "completion": 100.0,
        "active_jobs": 0,
    }
    assert snapshots[15]["repetition"] == 1
    assert [r.last_active_cycle for r in engine.results] == [14, 14]
    assert engine._collect_results().summary.drained_repetitions == 2


def test_run_live_honours_stop_flag():
    config = build_config(repetitions=3, cpu_count=2, max_cycles=100)
    engine = SimulationEngine(config, job_factory=two_overhead_jobs)

    async def collect():
        snapshots = []
        async for snapshot in engine.run_live(stop_flag=lambda: len(snapshots) >= 3):
            snapshots.append(snapshot)
        return snapshots

    snapshots = asyncio.run(collect())

    assert [s["cycle"] for s in snapshots] == [0, 1, 2]
    assert len(engine.results) == 1
    result = engine.results[0]
    assert result.stopped
    assert result.last_active_cycle is None
    assert result.cycles_run == len(snapshots)
    assert result.utilization_series == [s["utilization"] for s in snapshots]

    summary = engine._collect_results().summary
    assert summary.exhausted_repetitions == 0
    assert summary.stopped_repetitions == 1


def test_run_repetition_is_never_marked_stopped():
    result = run_repetition(Farm(1, jobs=[Job(total_frames=10, chunk_size=1)]), max_cycles=3)
    assert not result.stopped
    assert result.exhausted
