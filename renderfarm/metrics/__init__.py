# renderfarm/metrics/__init__.py
from .summary import mean_utilization, summarize_batch
