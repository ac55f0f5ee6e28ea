# renderfarm/metrics/summary.py

from typing import List, Sequence

from renderfarm.api.schemas import BatchSummary, SimulationResult


def mean_utilization(series: Sequence[float]) -> float:
    """
    Average per-cycle utilization of one repetition.

    Args:
        series: utilization percentages, one per cycle
    Returns:
        Mean in [0, 100], or 0.0 for an empty series
    """
    if not series:
        return 0.0
    return sum(series) / len(series)


def summarize_batch(results: List[SimulationResult]) -> BatchSummary:
    """
    Aggregate a batch of repetitions.

    Drain-time statistics only consider repetitions that emptied the farm
    before the cycle cap; exhausted and stopped runs are counted separately.
    """
    drained = [r.last_active_cycle for r in results if r.last_active_cycle is not None]
    peaks = [max(r.utilization_series) for r in results if r.utilization_series]

    return BatchSummary(
        repetitions=len(results),
        drained_repetitions=len(drained),
        exhausted_repetitions=sum(1 for r in results if r.exhausted),
        stopped_repetitions=sum(1 for r in results if r.stopped),
        mean_last_active_cycle=sum(drained) / len(drained) if drained else None,
        min_last_active_cycle=min(drained) if drained else None,
        max_last_active_cycle=max(drained) if drained else None,
        mean_utilization=mean_utilization([mean_utilization(r.utilization_series) for r in results]),
        peak_utilization=max(peaks) if peaks else 0.0,
    )
