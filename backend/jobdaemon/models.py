from __future__ import annotations

from django.db import models


class JobState(models.Model):
    """
    Persisted state for one job kind.

    `state` is whatever the job returned from `get_state()`; the daemon never
    looks inside it.
    """

    job_key = models.CharField(max_length=128, unique=True)
    last_run_at = models.DateTimeField(null=True, blank=True)
    state = models.JSONField(null=True, blank=True)
    run_count = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=["last_run_at"], name="jobdaemon_jobstate_lastrun_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.job_key}:{self.last_run_at.isoformat() if self.last_run_at else 'never'}"
