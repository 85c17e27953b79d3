"""Metric value models."""

from dataclasses import dataclass

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class MetricsSnapshot:
    """Point-in-time copy of the standard invocation metrics."""

    cold_start_count: float = 0.0
    invocation_count: float = 0.0
    error_count: float = 0.0
    last_duration_millis: float = 0.0


@dataclass(frozen=True)
class CounterDeltas:
    """Counter increments accumulated since the previous report."""

    cold_starts: float = 0.0
    invocations: float = 0.0
    errors: float = 0.0


class MemoryStats(BaseModel):
    """Memory usage of the execution environment.

    Total and used are megabytes; used_percentage is 0-100.
    """

    total: float = Field(ge=0)
    used: float = Field(ge=0)
    used_percentage: float = Field(ge=0, le=100)
