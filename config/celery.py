"""Celery application bootstrap for this Django project.

Celery only runs housekeeping here: periodic flushing of the PagerDuty spool
directory. Ticket transactions are submitted synchronously on commit.

Run a worker with beat embedded with something like:
- celery -A config worker -B -l info

Broker/result backend are configured via Django settings (see config/settings.py).
"""

from __future__ import annotations

import os

from celery import Celery

from config.env import load_env

load_env()

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("ticket-pagerduty")

# Load Celery config from Django settings using CELERY_* namespace.
app.config_from_object("django.conf:settings", namespace="CELERY")

app.autodiscover_tasks()
