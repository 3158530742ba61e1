"""Django app configuration for the PagerDuty integration."""

from django.apps import AppConfig


class PagerDutyAppConfig(AppConfig):
    """Configuration for the PagerDuty app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.pagerduty"
    verbose_name = "PagerDuty"

    def ready(self):
        # Register the transaction receiver and system checks
        from apps.pagerduty import checks, signals  # noqa: F401
