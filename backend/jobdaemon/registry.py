"""Job kind registration and discovery for the daemon."""

from __future__ import annotations

import logging
from typing import Any, Callable, MutableMapping

from .base import Job, JobDescriptor
from .conf import get_daemon_settings

_job_kinds: dict[str, JobDescriptor] = {}

JOB_LOGGER_PREFIX = "jobdaemon.jobs"


def register_job(
    key: str,
    *,
    name: str,
    description: str | None = None,
    interval_minutes: int = 0,
    enabled: bool = True,
) -> Callable[[type[Job]], type[Job]]:
    """Class decorator to register a job kind.

    Usage:
        @register_job("echo_to_log", name="Echo To Log", interval_minutes=0)
        class EchoToLogJob(Job):
            ...
    """

    def decorator(job_class: type[Job]) -> type[Job]:
        override = get_daemon_settings().job_overrides.get(key) or {}

        resolved_description = description
        if not resolved_description:
            doc = getattr(job_class, "__doc__", None)
            if isinstance(doc, str):
                for line in doc.strip().splitlines():
                    line = line.strip()
                    if line:
                        resolved_description = line[:500]
                        break

        resolved_enabled = enabled
        if "enabled" in override:
            resolved_enabled = bool(override.get("enabled"))

        resolved_interval = int(interval_minutes)
        if override.get("interval_minutes") is not None:
            resolved_interval = int(override["interval_minutes"])
        resolved_interval = max(0, resolved_interval)

        descriptor = JobDescriptor(
            key=key,
            name=name,
            description=resolved_description or "",
            interval_minutes=resolved_interval,
            job_class=job_class,
            enabled=resolved_enabled,
        )
        job_class.descriptor = descriptor
        _job_kinds[key] = descriptor
        return job_class

    return decorator


def get_job_kinds() -> dict[str, JobDescriptor]:
    """Return a copy of all registered job kinds."""
    return _job_kinds.copy()


def get_job_kind(key: str) -> JobDescriptor | None:
    """Return a specific job kind by key, or None if not found."""
    return _job_kinds.get(key)


def get_enabled_job_kinds() -> list[JobDescriptor]:
    """Return enabled job kinds in registration order, honoring DAEMON_JOBS when set."""
    selected = get_daemon_settings().jobs
    descriptors = [d for d in _job_kinds.values() if d.enabled]
    if selected is None:
        return descriptors
    by_key = {d.key: d for d in descriptors}
    return [by_key[key] for key in selected if key in by_key]


def get_job_logger(key: str) -> logging.Logger:
    return logging.getLogger(f"{JOB_LOGGER_PREFIX}.{key}")


def build_job(
    descriptor: JobDescriptor,
    resources: MutableMapping[str, Any],
    logger: logging.Logger | None = None,
) -> Job:
    """Construct a job instance for a registered kind."""
    return descriptor.job_class(resources, logger or get_job_logger(descriptor.key))
