"""Django app configuration for the job daemon."""

from __future__ import annotations

from django.apps import AppConfig


class JobDaemonConfig(AppConfig):
    """Register built-in daemon jobs once Django is ready."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "jobdaemon"
    verbose_name = "Job Daemon"

    def ready(self) -> None:
        # Apps register their own jobs from their ready() method or a jobs.py module.
        from . import jobs  # noqa: F401
