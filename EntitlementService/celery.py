"""
Celery application.

Runs the periodic download token sweep scheduled in ``CELERY_BEAT_SCHEDULE``.
"""
import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "EntitlementService.settings.base")

app = Celery("EntitlementService")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()
