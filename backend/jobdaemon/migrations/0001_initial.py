from __future__ import annotations

from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="JobState",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("job_key", models.CharField(max_length=128, unique=True)),
                ("last_run_at", models.DateTimeField(blank=True, null=True)),
                ("state", models.JSONField(blank=True, null=True)),
                ("run_count", models.PositiveIntegerField(default=0)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "indexes": [
                    models.Index(fields=["last_run_at"], name="jobdaemon_jobstate_lastrun_idx"),
                ],
            },
        ),
    ]
