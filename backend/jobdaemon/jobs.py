from __future__ import annotations

from typing import Any

from .base import Job
from .registry import register_job


@register_job(
    "echo_to_log",
    name="Echo To Log",
    description="Writes a message to the log on every loop of the daemon. Can be useful to debug operation.",
    interval_minutes=0,
)
class EchoToLogJob(Job):
    """Write to the log on every daemon loop."""

    def __init__(self, resources, logger) -> None:
        super().__init__(resources, logger)
        self.runcount = 0

    def run(self) -> None:
        self.logger.info("ECHO (%s)", self.runcount)
        self.runcount += 1

    def set_state(self, state: Any) -> None:
        if not isinstance(state, dict) or "runcount" not in state:
            return
        try:
            self.runcount = int(state["runcount"])
        except (TypeError, ValueError):
            return

    def get_state(self) -> dict[str, int]:
        return {"runcount": self.runcount}
