"""Management command to run a daemon job once in the foreground."""

from __future__ import annotations

import time

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from jobdaemon.application import JobRecord
from jobdaemon.registry import build_job, get_job_kind, get_job_kinds
from jobdaemon.store import get_job_state, reset_job_state, save_job_state


class Command(BaseCommand):
    """Run a daemon job manually, restoring and saving its state."""

    help = "Run a daemon job once, outside the daemon loop"

    def add_arguments(self, parser) -> None:
        parser.add_argument(
            "job_key",
            type=str,
            help="Key of the job to run",
        )
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Discard the stored state before running",
        )

    def handle(self, *args, **options) -> None:
        job_key = options["job_key"]
        descriptor = get_job_kind(job_key)

        if descriptor is None:
            available = ", ".join(sorted(get_job_kinds().keys()))
            raise CommandError(
                f"Job '{job_key}' not found. Available jobs: {available or 'none'}"
            )

        if options["reset"] and reset_job_state(job_key):
            self.stdout.write(f"Cleared stored state for {job_key}")

        job = build_job(descriptor, {"params": {}})
        row = get_job_state(job_key)
        if row is not None:
            job.set_state(row.state)
        record = JobRecord(job=job, descriptor=descriptor, last_run_at=row.last_run_at if row else None)

        self.stdout.write(f"Running job: {descriptor.name} ({job_key})")
        start_time = time.monotonic()

        try:
            job.run()
        except Exception as e:
            duration = time.monotonic() - start_time
            raise CommandError(f"Job failed after {duration:.2f}s: {e}") from e

        duration = time.monotonic() - start_time
        record.finished_at = timezone.now()
        saved = save_job_state(record)
        self.stdout.write(self.style.SUCCESS(f"Job completed in {duration:.2f}s"))
        if saved.state is not None:
            self.stdout.write(f"State: {saved.state}")
