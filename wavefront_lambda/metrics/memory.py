"""Memory statistics of the Lambda execution environment."""

import psutil

from wavefront_lambda.constants import BYTES_PER_MEGABYTE
from wavefront_lambda.metrics.models import MemoryStats


def get_memory_stats() -> MemoryStats:
    """Read virtual memory usage of the container the function runs in.

    Returns:
        Total and used memory in megabytes and the used percentage.
    """
    memory = psutil.virtual_memory()
    return MemoryStats(
        total=memory.total / BYTES_PER_MEGABYTE,
        used=memory.used / BYTES_PER_MEGABYTE,
        used_percentage=memory.percent,
    )
