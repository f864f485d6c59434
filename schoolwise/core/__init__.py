"""Core helpers shared by the services and UI layers."""

from .telemetry import SLOW_REQUEST_SECONDS, Timing, request_label, timed

__all__ = [
    "SLOW_REQUEST_SECONDS",
    "Timing",
    "request_label",
    "timed",
]
