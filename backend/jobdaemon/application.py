"""Interfaces between the daemon core and the surrounding application.

The lifecycle manager and scheduler loop never know where job state lives.
They talk to a `DaemonApplication`, which supplies jobs each cycle and is told
when each one finishes.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, MutableMapping, Protocol

from .base import Job, JobDescriptor
from .registry import build_job, get_enabled_job_kinds


@dataclass
class JobRecord:
    """A job instance paired with the time of its last completed run."""

    job: Job
    descriptor: JobDescriptor
    last_run_at: datetime | None = None
    finished_at: datetime | None = None

    @property
    def key(self) -> str:
        return self.descriptor.key


class DaemonApplication(Protocol):
    def bootstrap(self, params: Mapping[str, Any], resources: MutableMapping[str, Any]) -> None:
        """One-time setup in the daemon process before the loop starts."""
        ...

    def get_jobs(self, resources: MutableMapping[str, Any]) -> list[JobRecord]:
        """Return the current job set with state already restored."""
        ...

    def job_finished(self, record: JobRecord) -> None:
        """Persist `record.job.get_state()` and `record.finished_at`."""
        ...


class InMemoryApplication:
    """Keep job state and last-run times in process memory.

    State survives across cycles but not across daemon restarts.
    """

    def __init__(self) -> None:
        self.job_states: dict[str, Any] = {}
        self.last_runs: dict[str, datetime] = {}
        self.params: dict[str, Any] = {}

    def bootstrap(self, params: Mapping[str, Any], resources: MutableMapping[str, Any]) -> None:
        self.params = dict(params)
        resources["params"] = self.params

    def get_jobs(self, resources: MutableMapping[str, Any]) -> list[JobRecord]:
        records = []
        for descriptor in get_enabled_job_kinds():
            job = build_job(descriptor, resources)
            job.set_state(self.job_states.get(descriptor.key))
            records.append(
                JobRecord(
                    job=job,
                    descriptor=descriptor,
                    last_run_at=self.last_runs.get(descriptor.key),
                )
            )
        return records

    def job_finished(self, record: JobRecord) -> None:
        self.job_states[record.key] = record.job.get_state()
        if record.finished_at is not None:
            self.last_runs[record.key] = record.finished_at
