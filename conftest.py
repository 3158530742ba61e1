"""Project-wide pytest configuration."""

import pytest


@pytest.fixture(autouse=True)
def _no_pagerduty_env(settings):
    """Keep tests independent of any PagerDuty settings in the local environment."""
    settings.PAGERDUTY_ROUTING_KEY = "r" * 32
    settings.PAGERDUTY_SPOOL_DIR = None
    settings.PAGERDUTY_ACKNOWLEDGE_ON_TAKE = True
    settings.PAGERDUTY_INCLUDE_SUBJECT_TAG = False
    settings.TICKETS_WEB_BASE_URL = "https://rt.example.com"
    settings.TICKETS_RT_NAME = "rt.example.com"
