from __future__ import annotations

from django.urls import path

from . import views

urlpatterns = [
    path("status/", views.DaemonStatusView.as_view(), name="daemon-status"),
    path("jobs/<str:job_key>/", views.DaemonJobDetailView.as_view(), name="daemon-job-detail"),
]
