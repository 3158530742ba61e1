"""Django app configuration for the tickets app."""

from django.apps import AppConfig


class TicketsConfig(AppConfig):
    """Configuration for the ticketing core."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.tickets"
    verbose_name = "Tickets"
