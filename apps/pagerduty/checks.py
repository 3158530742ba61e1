"""
Django system checks for the PagerDuty integration.

Usage:
    python manage.py check                 # Run all checks
    python manage.py check --tag pagerduty # Run only PagerDuty checks
"""

import os

from django.core.checks import Error, Warning, register

from apps.pagerduty.client import SEVERITIES
from apps.pagerduty.conf import get_setting


@register("pagerduty")
def check_routing_key(app_configs, **kwargs):
    """Warn when no routing key is configured: every submission would fail."""
    if get_setting("PAGERDUTY_ROUTING_KEY"):
        return []
    return [
        Warning(
            "PAGERDUTY_ROUTING_KEY is not set",
            hint=(
                "Create an 'Events API v2' integration on a PagerDuty service and set "
                "PAGERDUTY_ROUTING_KEY to its routing key."
            ),
            id="pagerduty.W001",
        )
    ]


@register("pagerduty")
def check_spool_dir(app_configs, **kwargs):
    """Check that the spool directory, when set, exists and is writable."""
    spool_dir = get_setting("PAGERDUTY_SPOOL_DIR")
    if not spool_dir:
        return []

    if not os.path.isdir(spool_dir):
        return [
            Error(
                f"PagerDuty spool directory '{spool_dir}' does not exist",
                hint="Create it and make it writable by the web server user.",
                id="pagerduty.E001",
            )
        ]
    if not os.access(spool_dir, os.W_OK | os.X_OK):
        return [
            Error(
                f"PagerDuty spool directory '{spool_dir}' is not writable",
                hint="Deferred submissions cannot be spooled and will be lost.",
                id="pagerduty.E002",
            )
        ]
    return []


@register("pagerduty")
def check_default_severity(app_configs, **kwargs):
    severity = str(get_setting("PAGERDUTY_DEFAULT_SEVERITY") or "").lower()
    if severity in SEVERITIES:
        return []
    return [
        Error(
            f"PAGERDUTY_DEFAULT_SEVERITY '{severity}' is not a PagerDuty severity",
            hint=f"Use one of: {', '.join(SEVERITIES)}.",
            id="pagerduty.E003",
        )
    ]
