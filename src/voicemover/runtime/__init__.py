"""Runtime host and service wiring."""

from voicemover.runtime.app import RuntimeApp, configure_logging, run_runtime

__all__ = [
    "RuntimeApp",
    "configure_logging",
    "run_runtime",
]
