"""Background job daemon.

A forked, detached process that runs registered jobs on minute intervals and
persists their state between runs.

Usage:
    from jobdaemon import Job, register_job

    @register_job("report", name="Nightly report", interval_minutes=24 * 60)
    class ReportJob(Job):
        def run(self) -> None:
            ...

    $ python manage.py daemon start
"""

from .base import Job, JobDescriptor
from .registry import get_enabled_job_kinds, get_job_kind, get_job_kinds, register_job

__all__ = [
    # Job contract
    "Job",
    "JobDescriptor",
    # Registration
    "register_job",
    "get_job_kinds",
    "get_job_kind",
    "get_enabled_job_kinds",
]
