from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from django.conf import settings

DEFAULT_SLEEP_MINUTES = 5
MIN_SLEEP_MINUTES = 1
PID_FILE_NAME = "daemon.pid"


def _as_dict(value: object) -> dict[str, Any]:
    """Coerce a value into a dict, returning {} for non-dicts."""
    if isinstance(value, dict):
        return value
    return {}


@dataclass(frozen=True)
class DaemonSettings:
    daemon_dir: Path
    sleep_minutes: int
    jobs: list[str] | None
    job_overrides: dict[str, dict[str, Any]] = field(default_factory=dict)

    @property
    def pid_file_path(self) -> Path:
        return self.daemon_dir / PID_FILE_NAME


def _default_daemon_dir() -> Path:
    base_dir = getattr(settings, "BASE_DIR", None) or Path.cwd()
    return Path(base_dir) / "var" / "daemon"


def get_daemon_settings() -> DaemonSettings:
    """Read and normalize the DAEMON_* Django settings into a typed `DaemonSettings`."""
    raw_dir = getattr(settings, "DAEMON_DIR", None)
    daemon_dir = Path(str(raw_dir)).expanduser() if raw_dir else _default_daemon_dir()

    sleep_raw = getattr(settings, "DAEMON_SLEEP_MINUTES", DEFAULT_SLEEP_MINUTES)
    try:
        sleep_minutes = int(sleep_raw)
    except (TypeError, ValueError):
        sleep_minutes = DEFAULT_SLEEP_MINUTES
    if sleep_minutes < 0:
        sleep_minutes = DEFAULT_SLEEP_MINUTES
    # 0 would turn the daemon loop into a busy loop hitting the database.
    sleep_minutes = max(MIN_SLEEP_MINUTES, sleep_minutes)

    jobs_raw = getattr(settings, "DAEMON_JOBS", None)
    jobs: list[str] | None = None
    if isinstance(jobs_raw, (list, tuple)):
        jobs = [str(k).strip() for k in jobs_raw if isinstance(k, str) and str(k).strip()]

    overrides_raw = _as_dict(getattr(settings, "DAEMON_JOB_OVERRIDES", None))
    job_overrides = {str(k): _as_dict(v) for k, v in overrides_raw.items()}

    return DaemonSettings(
        daemon_dir=daemon_dir,
        sleep_minutes=sleep_minutes,
        jobs=jobs,
        job_overrides=job_overrides,
    )
