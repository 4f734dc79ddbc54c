"""Daemon process lifecycle: fork, detach, PID file, signals, shutdown.

The parent process forks, records the child PID and returns. The child
detaches from its session, installs signal handlers, runs the application's
bootstrap step and then the scheduler loop until a termination signal asks it
to stop, at which point it removes the PID file and exits.

Usage:
    daemon = DaemonProcess("/var/run/myapp", application=InMemoryApplication())
    daemon.start({"verbose": True})
    daemon.is_running()
    daemon.stop()
"""

from __future__ import annotations

import logging
import os
import signal
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Any, Mapping

from .application import DaemonApplication
from .conf import PID_FILE_NAME, get_daemon_settings
from .pidfile import PidFile
from .scheduler import SchedulerLoop, StopFlag

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM, signal.SIGQUIT)
RESTART_SIGNALS = (signal.SIGHUP,)


@dataclass(frozen=True)
class DaemonStatus:
    running: bool
    pid: int | None
    pid_file: str


class DaemonProcess:
    """Own the PID file and the shared resources of one daemon."""

    def __init__(
        self,
        daemon_dir: str | Path,
        application: DaemonApplication,
        *,
        sleep_minutes: int = 5,
        resources: dict[str, Any] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.daemon_dir = Path(daemon_dir)
        self.daemon_dir.mkdir(parents=True, exist_ok=True)
        self.pidfile = PidFile(self.daemon_dir / PID_FILE_NAME)
        self.application = application
        self.sleep_interval = timedelta(minutes=sleep_minutes)
        self.resources: dict[str, Any] = resources if resources is not None else {}
        self.logger = logger or logging.getLogger(__name__)
        self.stop_flag = StopFlag()
        self.loop: SchedulerLoop | None = None

    @property
    def pid_file_path(self) -> Path:
        return self.pidfile.path

    # ------------------------------------------------------------------
    # Controller side (the process that runs `manage.py daemon ...`)
    # ------------------------------------------------------------------

    def start(self, params: Mapping[str, Any] | None = None) -> int | None:
        """Fork the daemon. Returns the child PID in the parent, None if nothing was started.

        Never returns in the child.
        """
        if self.is_running():
            self.logger.warning("Daemon did not run, already running.")
            return None

        try:
            pid = os.fork()
        except OSError:
            self.logger.exception("Daemon could not fork.")
            return None

        if pid:
            self.logger.info("Daemon spawned at pid %s", pid)
            self.pidfile.write(pid)
            return pid

        try:
            self._run_child(params or {})
        except BaseException:
            self.logger.exception("Daemon terminated by unhandled error.")
            os._exit(1)
        os._exit(0)

    def is_running(self) -> bool:
        """Return True if the PID file names a live process.

        A PID file naming a dead process means the daemon crashed: the stale
        file is removed.
        """
        pid = self.pidfile.read()
        if pid is None:
            return False

        try:
            os.kill(pid, 0)
        except ProcessLookupError:
            self.logger.error("Daemon crashed")
            self.pidfile.remove()
            return False
        except PermissionError:
            # The process exists but belongs to another user.
            return True
        return True

    def stop(self) -> bool:
        """Send SIGTERM to the daemon. Stopping a stopped daemon succeeds."""
        self.logger.info("Stopping daemon...")
        if not self.is_running():
            self.logger.info("Daemon already stopped.")
            return True

        pid = self.pidfile.read()
        if pid is None:
            self.logger.info("Daemon already stopped.")
            return True

        try:
            os.kill(pid, signal.SIGTERM)
        except OSError:
            self.logger.critical("Could not stop daemon.", exc_info=True)
            return False

        self.logger.info("Stopped daemon.")
        self.pidfile.remove()
        return True

    def status(self) -> DaemonStatus:
        running = self.is_running()
        return DaemonStatus(
            running=running,
            pid=self.pidfile.read() if running else None,
            pid_file=str(self.pidfile),
        )

    # ------------------------------------------------------------------
    # Daemon side (the forked child)
    # ------------------------------------------------------------------

    def _run_child(self, params: Mapping[str, Any]) -> None:
        self.logger.info("Daemon Running.")
        try:
            os.setsid()
        except OSError:
            self.logger.error("Daemon could not detach.")
            os._exit(1)

        self.register_signal_handlers()
        self.application.bootstrap(params, self.resources)
        self.run_tasks()
        self.shutdown()

    def build_loop(self) -> SchedulerLoop:
        return SchedulerLoop(
            self.application,
            self.resources,
            sleep_seconds=self.sleep_interval.total_seconds(),
            stop_flag=self.stop_flag,
        )

    def run_tasks(self) -> None:
        """Run the scheduler loop until a shutdown signal is handled."""
        self.loop = self.build_loop()
        self.loop.run_forever()

    def register_signal_handlers(self) -> None:
        for signum in SHUTDOWN_SIGNALS + RESTART_SIGNALS:
            signal.signal(signum, self.handle_signal)

    def handle_signal(self, signum: int, frame: Any) -> None:
        # Runs on the main thread, possibly in the middle of the loop's sleep.
        if signum in SHUTDOWN_SIGNALS:
            self.stop_flag.set()
            self.logger.debug("Daemon shut down.")
        elif signum in RESTART_SIGNALS:
            self.logger.debug("Daemon wants to restart.")
        else:
            self.logger.debug("Daemon received unknown signal.")

    def shutdown(self) -> None:
        """Remove the PID file if it still names this process, then end the daemon process.

        After `stop()` the controller may already have started a new daemon
        whose PID is in the file; that file must survive this process exiting.
        """
        if self.pidfile.read() == os.getpid():
            self.pidfile.remove()
        os._exit(0)


def build_daemon_process(application: DaemonApplication | None = None) -> DaemonProcess:
    """Build a `DaemonProcess` from the DAEMON_* settings."""
    from config.domain_exceptions import ConfigurationError

    daemon_settings = get_daemon_settings()
    if application is None:
        from .store import DatabaseApplication

        application = DatabaseApplication()
    try:
        return DaemonProcess(
            daemon_settings.daemon_dir,
            application,
            sleep_minutes=daemon_settings.sleep_minutes,
        )
    except OSError as exc:
        raise ConfigurationError(
            f"DAEMON_DIR {daemon_settings.daemon_dir} is not usable: {exc.strerror or exc}"
        ) from exc
