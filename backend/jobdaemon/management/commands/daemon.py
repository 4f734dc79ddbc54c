"""Management command to start, stop or inspect the background daemon."""

from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from config.domain_exceptions import ConfigurationError
from jobdaemon.process import build_daemon_process


def _parse_params(raw_params: list[str] | None) -> dict[str, str]:
    params: dict[str, str] = {}
    for item in raw_params or []:
        key, sep, value = item.partition("=")
        key = key.strip()
        if not sep or not key:
            raise CommandError(f"Invalid --param '{item}', expected key=value")
        params[key] = value
    return params


class Command(BaseCommand):
    """Control the background job daemon."""

    help = "Start, stop or show the status of the background job daemon"

    def add_arguments(self, parser) -> None:
        parser.add_argument(
            "action",
            choices=["start", "stop", "status"],
            help="What to do with the daemon",
        )
        parser.add_argument(
            "--param",
            action="append",
            dest="params",
            metavar="KEY=VALUE",
            help="Parameter handed to the daemon bootstrap step (repeatable, start only)",
        )

    def handle(self, *args, **options) -> None:
        action = options["action"]
        try:
            daemon = build_daemon_process()
        except ConfigurationError as exc:
            raise CommandError(str(exc)) from exc

        if action == "start":
            params = _parse_params(options.get("params"))
            pid = daemon.start(params)
            if pid is None:
                status = daemon.status()
                if status.running:
                    self.stdout.write(self.style.WARNING(f"Daemon already running (pid {status.pid})."))
                    return
                raise CommandError("Daemon could not be started; see the log for details.")
            self.stdout.write(self.style.SUCCESS(f"Daemon started (pid {pid})."))
            self.stdout.write(f"PID file: {daemon.pid_file_path}")
            return

        if action == "stop":
            if not daemon.stop():
                raise CommandError(f"Could not stop daemon (PID file kept at {daemon.pid_file_path}).")
            self.stdout.write(self.style.SUCCESS("Daemon stopped."))
            return

        status = daemon.status()
        if status.running:
            self.stdout.write(self.style.SUCCESS(f"Daemon running (pid {status.pid})."))
        else:
            self.stdout.write(self.style.WARNING("Daemon not running."))
        self.stdout.write(f"PID file: {status.pid_file}")
