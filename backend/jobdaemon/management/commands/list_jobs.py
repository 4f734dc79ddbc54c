"""Management command to list registered daemon jobs."""

from __future__ import annotations

from django.core.management.base import BaseCommand

from jobdaemon.registry import get_enabled_job_kinds, get_job_kinds


def format_interval(interval_minutes: int) -> str:
    if interval_minutes <= 0:
        return "Every loop"
    if interval_minutes >= 60:
        hours = interval_minutes / 60
        return f"Every {hours:.1f} hours" if hours != int(hours) else f"Every {int(hours)} hours"
    return f"Every {interval_minutes} minutes"


class Command(BaseCommand):
    """List all registered daemon jobs."""

    help = "List all registered daemon jobs"

    def handle(self, *args, **options) -> None:
        job_kinds = get_job_kinds()

        if not job_kinds:
            self.stdout.write(self.style.WARNING("No jobs registered."))
            return

        active_keys = {d.key for d in get_enabled_job_kinds()}

        self.stdout.write(self.style.SUCCESS(f"Registered jobs ({len(job_kinds)}):"))
        self.stdout.write("")

        for key, descriptor in sorted(job_kinds.items()):
            status = self.style.SUCCESS("enabled") if key in active_keys else self.style.ERROR("disabled")

            self.stdout.write(f"  {key}")
            self.stdout.write(f"    Name:     {descriptor.name}")
            self.stdout.write(f"    Interval: {format_interval(descriptor.interval_minutes)}")
            self.stdout.write(f"    Status:   {status}")
            self.stdout.write(f"    Class:    {descriptor.job_class.__module__}.{descriptor.job_class.__name__}")
            if descriptor.description:
                self.stdout.write(f"    About:    {descriptor.description}")
            self.stdout.write("")
