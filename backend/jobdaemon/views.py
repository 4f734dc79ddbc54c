from __future__ import annotations

from django.utils import timezone
from rest_framework import status
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response
from rest_framework.views import APIView

from config.domain_exceptions import NotFoundError

from .conf import get_daemon_settings
from .models import JobState
from .process import build_daemon_process
from .registry import get_enabled_job_kinds, get_job_kind, get_job_kinds
from .scheduler import is_due


def _to_iso(dt):
    return dt.isoformat() if dt else None


def _serialize_job(descriptor, row: JobState | None, *, enabled: bool, now) -> dict:
    last_run_at = row.last_run_at if row is not None else None
    return {
        "key": descriptor.key,
        "name": descriptor.name,
        "description": descriptor.description,
        "interval_minutes": descriptor.interval_minutes,
        "enabled": enabled,
        "last_run_at": _to_iso(last_run_at),
        "run_count": row.run_count if row is not None else 0,
        "state": row.state if row is not None else None,
        "due": enabled and is_due(last_run_at, descriptor.interval_minutes, now),
    }


class DaemonStatusView(APIView):
    """GET /api/daemon/status/ - Daemon liveness + per-job state (admin-only)."""

    permission_classes = [IsAdminUser]

    def get(self, request):
        daemon_settings = get_daemon_settings()
        daemon_status = build_daemon_process().status()
        now = timezone.now()

        active_keys = {d.key for d in get_enabled_job_kinds()}
        rows = {row.job_key: row for row in JobState.objects.all()}

        jobs = [
            _serialize_job(descriptor, rows.get(key), enabled=key in active_keys, now=now)
            for key, descriptor in sorted(get_job_kinds().items())
        ]

        return Response(
            {
                "running": daemon_status.running,
                "pid": daemon_status.pid,
                "pid_file": daemon_status.pid_file,
                "sleep_minutes": daemon_settings.sleep_minutes,
                "jobs": jobs,
            },
            status=status.HTTP_200_OK,
        )


class DaemonJobDetailView(APIView):
    """GET /api/daemon/jobs/<job_key>/ - One job kind with its stored state (admin-only)."""

    permission_classes = [IsAdminUser]

    def get(self, request, job_key: str):
        descriptor = get_job_kind(job_key)
        if descriptor is None:
            raise NotFoundError(f"Job '{job_key}' is not registered.")

        enabled = any(d.key == job_key for d in get_enabled_job_kinds())
        row = JobState.objects.filter(job_key=job_key).first()
        return Response(
            _serialize_job(descriptor, row, enabled=enabled, now=timezone.now()),
            status=status.HTTP_200_OK,
        )
