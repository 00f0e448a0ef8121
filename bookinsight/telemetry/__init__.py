"""Telemetry helpers and metrics."""

from .metrics import (
    ERROR_COUNTER,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    STAGE_COUNTER,
    STAGE_LATENCY,
    observe_request,
    observe_stage,
)

__all__ = [
    "ERROR_COUNTER",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "STAGE_COUNTER",
    "STAGE_LATENCY",
    "observe_request",
    "observe_stage",
]
