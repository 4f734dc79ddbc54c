"""Tests for built-in daemon jobs."""

from __future__ import annotations

import logging

from django.test import SimpleTestCase

from jobdaemon.jobs import EchoToLogJob
from jobdaemon.registry import get_job_kind


class EchoToLogJobTests(SimpleTestCase):
    def setUp(self):
        self.logger = logging.getLogger("jobdaemon.jobs.echo_to_log")
        self.job = EchoToLogJob({}, self.logger)

    def test_registered_metadata(self):
        descriptor = get_job_kind("echo_to_log")
        self.assertIsNotNone(descriptor)
        self.assertIs(descriptor.job_class, EchoToLogJob)
        self.assertEqual(EchoToLogJob.get_interval(), 0)
        self.assertEqual(EchoToLogJob.details()["name"], "Echo To Log")

    def test_run_logs_and_counts(self):
        with self.assertLogs("jobdaemon.jobs.echo_to_log", level="INFO") as logs:
            self.job.run()
            self.job.run()

        self.assertEqual(self.job.get_state(), {"runcount": 2})
        self.assertIn("ECHO (0)", logs.output[0])
        self.assertIn("ECHO (1)", logs.output[1])

    def test_state_round_trip_is_idempotent(self):
        self.job.set_state({"runcount": 7})
        snapshot = self.job.get_state()

        self.job.set_state(snapshot)

        self.assertEqual(self.job.get_state(), snapshot)

    def test_restored_state_continues_counting(self):
        self.job.set_state({"runcount": 41})
        with self.assertLogs("jobdaemon.jobs.echo_to_log", level="INFO") as logs:
            self.job.run()
        self.assertIn("ECHO (41)", logs.output[0])
        self.assertEqual(self.job.get_state(), {"runcount": 42})

    def test_malformed_state_leaves_prior_state(self):
        self.job.set_state({"runcount": 3})

        for bad in (None, "garbage", 12, [], {}, {"other": 1}, {"runcount": "NaN"}, {"runcount": None}):
            with self.subTest(state=bad):
                self.job.set_state(bad)
                self.assertEqual(self.job.get_state(), {"runcount": 3})

    def test_numeric_string_state_is_accepted(self):
        self.job.set_state({"runcount": "5"})
        self.assertEqual(self.job.get_state(), {"runcount": 5})
