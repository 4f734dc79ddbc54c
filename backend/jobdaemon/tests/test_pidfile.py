from __future__ import annotations

import tempfile
from pathlib import Path

from django.test import SimpleTestCase

from jobdaemon.pidfile import PidFile


class PidFileTests(SimpleTestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "daemon.pid"
        self.pidfile = PidFile(self.path)

    def tearDown(self):
        self._tmp.cleanup()

    def test_read_missing_file_returns_none(self):
        self.assertIsNone(self.pidfile.read())
        self.assertFalse(self.pidfile.exists())

    def test_write_then_read(self):
        self.pidfile.write(4321)

        self.assertEqual(self.path.read_text(), "4321")
        self.assertEqual(self.pidfile.read(), 4321)

    def test_read_tolerates_trailing_newline(self):
        self.path.write_text("99\n")
        self.assertEqual(self.pidfile.read(), 99)

    def test_empty_file_reads_as_none(self):
        self.path.write_text("")
        self.assertIsNone(self.pidfile.read())

    def test_garbage_reads_as_none(self):
        self.path.write_text("not-a-pid")
        self.assertIsNone(self.pidfile.read())

    def test_non_positive_pid_reads_as_none(self):
        """PID 0 would signal the whole process group, never accept it."""
        self.path.write_text("0")
        self.assertIsNone(self.pidfile.read())

    def test_write_creates_parent_directory(self):
        nested = PidFile(Path(self._tmp.name) / "a" / "b" / "daemon.pid")
        nested.write(12)
        self.assertEqual(nested.read(), 12)

    def test_remove_is_best_effort(self):
        self.pidfile.remove()
        self.pidfile.write(1)
        self.pidfile.remove()
        self.assertFalse(self.path.exists())
