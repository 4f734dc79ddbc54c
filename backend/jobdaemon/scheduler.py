"""Scheduling loop that drives registered jobs inside the daemon process."""

from __future__ import annotations

import logging
import select
import socket
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, MutableMapping

from django.utils import timezone

from .application import DaemonApplication, JobRecord

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def is_due(last_run_at: datetime | None, interval_minutes: int, now: datetime) -> bool:
    """Return True when strictly more than `interval_minutes` have elapsed since the last run.

    A job that never ran, or whose interval is 0, is always due.
    """
    if last_run_at is None:
        return True
    if interval_minutes <= 0:
        return True
    elapsed = (now - last_run_at).total_seconds()
    return elapsed > interval_minutes * 60


@dataclass
class CycleResult:
    ran: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    interrupted: bool = False


class StopFlag:
    """A stop request that can be raised from a signal handler.

    `set()` assigns an attribute and writes one byte to a socketpair. Neither
    takes a lock, so a handler that interrupts `wait()` on the same thread
    cannot deadlock on it (unlike `threading.Event.set()`). `wait()` sleeps in
    `select()` on the read end.
    """

    def __init__(self) -> None:
        self._requested = False
        self._reader: socket.socket | None = None
        self._writer: socket.socket | None = None

    def is_set(self) -> bool:
        return self._requested

    def set(self) -> None:
        self._requested = True
        writer = self._writer
        if writer is None:
            return
        try:
            writer.send(b"\0")
        except BlockingIOError:
            # Buffer full: a wakeup is already pending.
            pass

    def clear(self) -> None:
        self._requested = False
        self._drain()

    def wait(self, timeout: float | None = None) -> bool:
        """Sleep up to `timeout` seconds. Returns True if a stop was requested."""
        if self._reader is None:
            self._open()
        if self._requested:
            return True
        select.select([self._reader], [], [], timeout)
        self._drain()
        return self._requested

    def close(self) -> None:
        for sock in (self._reader, self._writer):
            if sock is not None:
                sock.close()
        self._reader = self._writer = None

    def _open(self) -> None:
        reader, writer = socket.socketpair()
        reader.setblocking(False)
        writer.setblocking(False)
        self._reader = reader
        self._writer = writer

    def _drain(self) -> None:
        if self._reader is None:
            return
        while True:
            try:
                if not self._reader.recv(4096):
                    return
            except BlockingIOError:
                return


class SchedulerLoop:
    """Run due jobs sequentially, then sleep, until a stop is requested.

    Stop requests are cooperative: they are honored between jobs and during the
    sleep, never in the middle of `Job.run()`. Exceptions raised by a job are
    not caught and end the loop.
    """

    def __init__(
        self,
        application: DaemonApplication,
        resources: MutableMapping[str, Any],
        *,
        sleep_seconds: float,
        stop_flag: StopFlag | None = None,
        clock: Clock = timezone.now,
    ) -> None:
        self.application = application
        self.resources = resources
        self.sleep_seconds = max(0.0, float(sleep_seconds))
        self.stop_flag = stop_flag if stop_flag is not None else StopFlag()
        self.clock = clock
        self.cycle_count = 0

    @property
    def stop_requested(self) -> bool:
        return self.stop_flag.is_set()

    def request_stop(self) -> None:
        self.stop_flag.set()

    def run_cycle(self) -> CycleResult:
        """Evaluate every job once, running the ones that are due."""
        result = CycleResult()
        logger.debug("Starting loop %s", self.cycle_count)

        for record in self.application.get_jobs(self.resources):
            if self.stop_requested:
                result.interrupted = True
                break
            if self._run_if_due(record):
                result.ran.append(record.key)
            else:
                result.skipped.append(record.key)

        logger.debug("Completed loop %s", self.cycle_count)
        self.cycle_count += 1
        return result

    def _run_if_due(self, record: JobRecord) -> bool:
        descriptor = record.descriptor
        now = self.clock()
        if not is_due(record.last_run_at, descriptor.interval_minutes, now):
            logger.debug("Skipping %s (too soon)...", descriptor.name)
            return False

        logger.debug("Running %s (%s)...", descriptor.name, type(record.job).__name__)
        start_time = time.monotonic()
        record.job.run()
        record.finished_at = self.clock()
        self.application.job_finished(record)
        logger.debug(
            "Finished %s in %.2fs",
            descriptor.name,
            time.monotonic() - start_time,
        )
        return True

    def sleep(self) -> bool:
        """Wait out the sleep interval. Returns True if woken by a stop request."""
        return self.stop_flag.wait(timeout=self.sleep_seconds)

    def run_forever(self) -> None:
        """Cycle until a stop is requested."""
        while not self.stop_requested:
            self.run_cycle()
            if self.stop_requested:
                break
            if self.sleep():
                break
        logger.info("Scheduler loop stopped after %s loop(s)", self.cycle_count)
