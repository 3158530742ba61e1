"""PagerDuty integration settings.

All values are read from Django settings with the defaults below, so a bare
install only needs PAGERDUTY_ROUTING_KEY.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from django.conf import settings

from apps.pagerduty.client import EVENTS_API_URL

DEFAULTS = {
    "PAGERDUTY_ROUTING_KEY": "",
    "PAGERDUTY_SPOOL_DIR": None,
    "PAGERDUTY_ACKNOWLEDGE_ON_TAKE": True,
    "PAGERDUTY_QUEUE_CF_ACKNOWLEDGE_ON_TAKE": "Incident Acknowledge On Take",
    "PAGERDUTY_QUEUE_CF_PRIORITY": "Incident Priority",
    "PAGERDUTY_QUEUE_CF_SERVICE": "Incident Service",
    "PAGERDUTY_INCLUDE_SUBJECT_TAG": False,
    "PAGERDUTY_DEFAULT_SOURCE": "RT",
    "PAGERDUTY_DEFAULT_SEVERITY": "critical",
    "PAGERDUTY_DEDUP_PREFIX": "rt#",
    "PAGERDUTY_EVENTS_API_URL": EVENTS_API_URL,
    "PAGERDUTY_TIMEOUT": 30,
}


def get_setting(name: str):
    return getattr(settings, name, DEFAULTS[name])


@dataclass(frozen=True)
class PagerDutyConfig:
    """Snapshot of the PagerDuty settings used for one submission."""

    routing_key: str = ""
    spool_dir: Optional[str] = None
    acknowledge_on_take: bool = True
    queue_cf_acknowledge_on_take: str = "Incident Acknowledge On Take"
    queue_cf_priority: str = "Incident Priority"
    queue_cf_service: str = "Incident Service"
    include_subject_tag: bool = False
    default_source: str = "RT"
    default_severity: str = "critical"
    dedup_prefix: str = "rt#"
    events_api_url: str = EVENTS_API_URL
    timeout: int = 30

    @classmethod
    def from_settings(cls) -> "PagerDutyConfig":
        # Empty strings for the field names mean "use the default name".
        return cls(
            routing_key=get_setting("PAGERDUTY_ROUTING_KEY") or "",
            spool_dir=get_setting("PAGERDUTY_SPOOL_DIR") or None,
            acknowledge_on_take=bool(get_setting("PAGERDUTY_ACKNOWLEDGE_ON_TAKE")),
            queue_cf_acknowledge_on_take=get_setting("PAGERDUTY_QUEUE_CF_ACKNOWLEDGE_ON_TAKE")
            or DEFAULTS["PAGERDUTY_QUEUE_CF_ACKNOWLEDGE_ON_TAKE"],
            queue_cf_priority=get_setting("PAGERDUTY_QUEUE_CF_PRIORITY")
            or DEFAULTS["PAGERDUTY_QUEUE_CF_PRIORITY"],
            queue_cf_service=get_setting("PAGERDUTY_QUEUE_CF_SERVICE")
            or DEFAULTS["PAGERDUTY_QUEUE_CF_SERVICE"],
            include_subject_tag=bool(get_setting("PAGERDUTY_INCLUDE_SUBJECT_TAG")),
            default_source=get_setting("PAGERDUTY_DEFAULT_SOURCE") or "RT",
            default_severity=str(get_setting("PAGERDUTY_DEFAULT_SEVERITY") or "critical")
            .strip()
            .lower(),
            dedup_prefix=get_setting("PAGERDUTY_DEDUP_PREFIX")
            or DEFAULTS["PAGERDUTY_DEDUP_PREFIX"],
            events_api_url=get_setting("PAGERDUTY_EVENTS_API_URL") or EVENTS_API_URL,
            timeout=int(get_setting("PAGERDUTY_TIMEOUT")),
        )
