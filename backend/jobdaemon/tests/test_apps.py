from __future__ import annotations

from django.apps import apps
from django.test import SimpleTestCase

from jobdaemon.jobs import EchoToLogJob
from jobdaemon.registry import get_enabled_job_kinds, get_job_kind


class JobDaemonAppTests(SimpleTestCase):
    def test_app_is_installed(self):
        self.assertEqual(apps.get_app_config("jobdaemon").verbose_name, "Job Daemon")

    def test_builtin_jobs_registered_on_ready(self):
        descriptor = get_job_kind("echo_to_log")
        self.assertIsNotNone(descriptor)
        self.assertIs(descriptor.job_class, EchoToLogJob)
        self.assertIn("echo_to_log", [d.key for d in get_enabled_job_kinds()])
