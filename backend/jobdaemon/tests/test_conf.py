from __future__ import annotations

from pathlib import Path

from django.test import SimpleTestCase, override_settings

from jobdaemon.conf import DEFAULT_SLEEP_MINUTES, MIN_SLEEP_MINUTES, get_daemon_settings


class DaemonSettingsTests(SimpleTestCase):
    @override_settings(DAEMON_DIR="/tmp/jobdaemon-test", DAEMON_SLEEP_MINUTES="7")
    def test_reads_settings(self):
        daemon_settings = get_daemon_settings()
        self.assertEqual(daemon_settings.daemon_dir, Path("/tmp/jobdaemon-test"))
        self.assertEqual(daemon_settings.pid_file_path, Path("/tmp/jobdaemon-test/daemon.pid"))
        self.assertEqual(daemon_settings.sleep_minutes, 7)

    @override_settings(DAEMON_SLEEP_MINUTES="soon")
    def test_invalid_sleep_falls_back_to_default(self):
        self.assertEqual(get_daemon_settings().sleep_minutes, DEFAULT_SLEEP_MINUTES)

    @override_settings(DAEMON_SLEEP_MINUTES=-1)
    def test_negative_sleep_falls_back_to_default(self):
        self.assertEqual(get_daemon_settings().sleep_minutes, DEFAULT_SLEEP_MINUTES)

    @override_settings(DAEMON_SLEEP_MINUTES=0)
    def test_zero_sleep_is_raised_to_minimum(self):
        self.assertEqual(get_daemon_settings().sleep_minutes, MIN_SLEEP_MINUTES)

    @override_settings(DAEMON_JOBS=None)
    def test_jobs_none_means_all(self):
        self.assertIsNone(get_daemon_settings().jobs)

    @override_settings(DAEMON_JOBS=[" echo_to_log ", "", 5, "other"])
    def test_jobs_list_is_cleaned(self):
        self.assertEqual(get_daemon_settings().jobs, ["echo_to_log", "other"])

    @override_settings(DAEMON_JOB_OVERRIDES={"a": {"enabled": False}, "b": "bad"})
    def test_overrides_normalized(self):
        self.assertEqual(get_daemon_settings().job_overrides, {"a": {"enabled": False}, "b": {}})

    @override_settings(DAEMON_DIR=None)
    def test_default_dir_under_base_dir(self):
        self.assertEqual(get_daemon_settings().daemon_dir.parts[-2:], ("var", "daemon"))
