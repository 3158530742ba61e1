"""Celery tasks for the PagerDuty integration."""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any

from celery import shared_task

logger = logging.getLogger(__name__)


def build_agent(spool_dir: str | None = None):
    from apps.pagerduty.client import EventsAgent
    from apps.pagerduty.conf import PagerDutyConfig

    config = PagerDutyConfig.from_settings()
    return EventsAgent(
        routing_key=config.routing_key,
        spool=spool_dir or config.spool_dir,
        api_url=config.events_api_url,
        timeout=config.timeout,
    )


@shared_task
def flush_spool(spool_dir: str | None = None) -> dict[str, Any]:
    """Resubmit events PagerDuty deferred earlier.

    Scheduled by Celery beat when PAGERDUTY_SPOOL_DIR is set.
    """
    agent = build_agent(spool_dir)
    if agent.spool is None:
        logger.debug("No PagerDuty spool directory configured, nothing to flush")
        return {"skipped": True}

    result = agent.flush()
    if result.submitted or result.failed or result.deferred:
        logger.info(
            f"Flushed PagerDuty spool {agent.spool}: {result.submitted} submitted, "
            f"{result.failed} failed, {result.deferred} still deferred"
        )
    return asdict(result)
