"""Database-backed `DaemonApplication` keeping job state in `JobState` rows."""

from __future__ import annotations

import logging
from typing import Any, Mapping, MutableMapping

from django.db import close_old_connections, connections
from django.db.models import F

from .application import JobRecord
from .models import JobState
from .registry import build_job, get_enabled_job_kinds

logger = logging.getLogger(__name__)


def get_job_state(job_key: str) -> JobState | None:
    return JobState.objects.filter(job_key=job_key).first()


def reset_job_state(job_key: str) -> bool:
    """Forget the state and last run of a job. Returns True if a row was removed."""
    deleted, _ = JobState.objects.filter(job_key=job_key).delete()
    return bool(deleted)


def save_job_state(record: JobRecord) -> JobState:
    """Store the job's current state and the time it finished."""
    state = record.job.get_state()
    row, created = JobState.objects.get_or_create(
        job_key=record.key,
        defaults={"state": state, "last_run_at": record.finished_at, "run_count": 1},
    )
    if not created:
        JobState.objects.filter(pk=row.pk).update(
            state=state,
            last_run_at=record.finished_at,
            run_count=F("run_count") + 1,
        )
        row.refresh_from_db()
    return row


class DatabaseApplication:
    """Restore and persist job state through the Django ORM."""

    def bootstrap(self, params: Mapping[str, Any], resources: MutableMapping[str, Any]) -> None:
        # Connections inherited across fork() must not be reused by the child.
        connections.close_all()
        resources["params"] = dict(params)
        logger.info("Daemon bootstrapped with %s job kind(s)", len(get_enabled_job_kinds()))

    def get_jobs(self, resources: MutableMapping[str, Any]) -> list[JobRecord]:
        close_old_connections()
        descriptors = get_enabled_job_kinds()
        rows = {
            row.job_key: row
            for row in JobState.objects.filter(job_key__in=[d.key for d in descriptors])
        }

        records = []
        for descriptor in descriptors:
            job = build_job(descriptor, resources)
            row = rows.get(descriptor.key)
            if row is not None:
                job.set_state(row.state)
            records.append(
                JobRecord(
                    job=job,
                    descriptor=descriptor,
                    last_run_at=row.last_run_at if row is not None else None,
                )
            )
        return records

    def job_finished(self, record: JobRecord) -> None:
        close_old_connections()
        save_job_state(record)
