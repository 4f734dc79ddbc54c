"""Job contract for the daemon.

A job kind is a `Job` subclass registered with `jobdaemon.registry.register_job`,
which attaches a `JobDescriptor` (name, description, interval) to the class.
Metadata is therefore available without an instance:

    @register_job("cleanup", name="Cleanup", interval_minutes=60)
    class CleanupJob(Job):
        def run(self) -> None:
            ...

    CleanupJob.get_interval()  # 60
    CleanupJob.details()       # {"name": "Cleanup", "description": "..."}
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, ClassVar, MutableMapping


@dataclass(frozen=True)
class JobDescriptor:
    """Registered metadata for a job kind."""

    key: str
    name: str
    description: str
    interval_minutes: int
    job_class: type["Job"]
    enabled: bool = True

    def details(self) -> dict[str, str]:
        return {"name": self.name, "description": self.description}


class Job:
    """Base class for periodic daemon jobs.

    Subclasses implement `run()` and, when they carry state across runs,
    `get_state()` / `set_state()`. The daemon never inspects the state value;
    it only hands it back to `set_state()` before the next run.
    """

    descriptor: ClassVar[JobDescriptor | None] = None

    def __init__(self, resources: MutableMapping[str, Any], logger: logging.Logger) -> None:
        self.resources = resources
        self.logger = logger

    @classmethod
    def get_interval(cls) -> int:
        """Return the minimum number of minutes between runs (0 = every cycle)."""
        if cls.descriptor is None:
            return 0
        return cls.descriptor.interval_minutes

    @classmethod
    def details(cls) -> dict[str, str]:
        """Return `{"name": ..., "description": ...}` for display and logging."""
        if cls.descriptor is None:
            return {"name": cls.__name__, "description": ""}
        return cls.descriptor.details()

    def run(self) -> None:
        raise NotImplementedError

    def set_state(self, state: Any) -> None:
        """Restore fields from a previous `get_state()` value. Must tolerate None/garbage."""

    def get_state(self) -> Any:
        """Return a JSON-serializable snapshot; called right after `run()`."""
        return None
