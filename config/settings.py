"""Django settings for the ticket-pagerduty project.

Values come from the process environment, optionally populated from .env
files by config.env.load_env().
"""

from __future__ import annotations

import os
from pathlib import Path

from config.env import env_bool, load_env

BASE_DIR = Path(__file__).resolve().parent.parent

load_env(BASE_DIR)

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "insecure-dev-key-change-me")
DEBUG = env_bool("DJANGO_DEBUG", default=False)
ALLOWED_HOSTS = [h for h in os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost").split(",") if h]

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "django_object_actions",
    "django_json_widget",
    "apps.tickets",
    "apps.pagerduty",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "config.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "config.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("DJANGO_DB_PATH", str(BASE_DIR / "db.sqlite3")),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"

# --- Logging ---
LOG_LEVEL = os.environ.get("DJANGO_LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{asctime} {levelname} {name} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "apps": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
    },
}

# --- Celery ---
CELERY_BROKER_URL = os.environ.get("CELERY_BROKER_URL", "redis://localhost:6379/0")
CELERY_RESULT_BACKEND = os.environ.get("CELERY_RESULT_BACKEND", CELERY_BROKER_URL)
CELERY_TASK_ALWAYS_EAGER = env_bool("CELERY_TASK_ALWAYS_EAGER", default=False)
CELERY_TASK_SERIALIZER = "json"
CELERY_RESULT_SERIALIZER = "json"
CELERY_ACCEPT_CONTENT = ["json"]

# --- Ticketing host ---
TICKETS_WEB_BASE_URL = os.environ.get("TICKETS_WEB_BASE_URL", "http://localhost:8000").rstrip("/")
TICKETS_RT_NAME = os.environ.get("TICKETS_RT_NAME", "example.com")
TICKETS_SYSTEM_USERNAME = os.environ.get("TICKETS_SYSTEM_USERNAME", "RT_System")
TICKETS_NOBODY_USERNAME = os.environ.get("TICKETS_NOBODY_USERNAME", "Nobody")

# --- PagerDuty ---
PAGERDUTY_ROUTING_KEY = os.environ.get("PAGERDUTY_ROUTING_KEY", "")
PAGERDUTY_SPOOL_DIR = os.environ.get("PAGERDUTY_SPOOL_DIR") or None
PAGERDUTY_ACKNOWLEDGE_ON_TAKE = env_bool("PAGERDUTY_ACKNOWLEDGE_ON_TAKE", default=True)
PAGERDUTY_QUEUE_CF_ACKNOWLEDGE_ON_TAKE = os.environ.get(
    "PAGERDUTY_QUEUE_CF_ACKNOWLEDGE_ON_TAKE", "Incident Acknowledge On Take"
)
PAGERDUTY_QUEUE_CF_PRIORITY = os.environ.get("PAGERDUTY_QUEUE_CF_PRIORITY", "Incident Priority")
PAGERDUTY_QUEUE_CF_SERVICE = os.environ.get("PAGERDUTY_QUEUE_CF_SERVICE", "Incident Service")
PAGERDUTY_INCLUDE_SUBJECT_TAG = env_bool("PAGERDUTY_INCLUDE_SUBJECT_TAG", default=False)
PAGERDUTY_TIMEOUT = int(os.environ.get("PAGERDUTY_TIMEOUT", "30"))
PAGERDUTY_FLUSH_INTERVAL = int(os.environ.get("PAGERDUTY_FLUSH_INTERVAL", "300"))

CELERY_BEAT_SCHEDULE = {}
if PAGERDUTY_SPOOL_DIR:
    CELERY_BEAT_SCHEDULE["flush-pagerduty-spool"] = {
        "task": "apps.pagerduty.tasks.flush_spool",
        "schedule": PAGERDUTY_FLUSH_INTERVAL,
    }
