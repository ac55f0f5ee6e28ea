# renderfarm/schedulers/__init__.py
from .fifo_scheduler import FIFOScheduler
