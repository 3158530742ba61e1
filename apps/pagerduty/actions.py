"""Map ticket transactions to PagerDuty incident actions.

- Create                                  -> trigger
- Status moving into resolved/rejected/deleted -> resolve
- Owner set to a real user (acknowledge-on-take) -> acknowledge
- anything else                            -> nothing to do

The outcome of every submission is recorded on the ticket as a PagerDuty
transaction so it shows up in the ticket history.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Optional

from apps.pagerduty.client import SEVERITIES, EventsAgent, SubmitResult, SubmitStatus
from apps.pagerduty.conf import PagerDutyConfig
from apps.tickets.models import INACTIVE_STATUSES, TransactionType

logger = logging.getLogger(__name__)

ACKNOWLEDGE_SUMMARY = "Ticket in RT has an owner"
FALSE_VALUES = frozenset({"", "0", "false", "no", "off"})


class IncidentAction(str, Enum):
    TRIGGER = "trigger"
    ACKNOWLEDGE = "acknowledge"
    RESOLVE = "resolve"

    @property
    def past_tense(self) -> str:
        return {
            IncidentAction.TRIGGER: "triggered",
            IncidentAction.ACKNOWLEDGE: "acknowledged",
            IncidentAction.RESOLVE: "resolved",
        }[self]

    @property
    def verb(self) -> str:
        return "creating" if self is IncidentAction.TRIGGER else "updating"


def select_action(
    txn, acknowledge_on_take: bool, ignored_owner_ids: Iterable[int] = ()
) -> Optional[IncidentAction]:
    """Pick the incident action for a ticket transaction, or None."""
    if txn.type == TransactionType.CREATE:
        return IncidentAction.TRIGGER

    if (
        txn.type == TransactionType.STATUS
        and txn.old_value not in INACTIVE_STATUSES
        and txn.new_value in INACTIVE_STATUSES
    ):
        return IncidentAction.RESOLVE

    if txn.type == TransactionType.SET and txn.field == "Owner" and acknowledge_on_take:
        try:
            owner_id = int(txn.new_value)
        except (TypeError, ValueError):
            return None
        if owner_id not in set(ignored_owner_ids):
            return IncidentAction.ACKNOWLEDGE

    return None


def normalize_severity(value: Optional[str], default: str = "critical") -> Optional[str]:
    """Lower-case a severity and replace values PagerDuty does not accept.

    Returns None for an empty value so callers can apply their own default.
    """
    if not value:
        return None
    severity = value.strip().lower()
    if severity not in SEVERITIES:
        logger.error(
            f"PagerDuty priority is {severity}, which isn't supported by PagerDuty, "
            f"changing to {default}"
        )
        return default
    return severity


def parse_flag(value) -> bool:
    return str(value).strip().lower() not in FALSE_VALUES


class NotifyPagerDuty:
    """Scrip action that creates or updates a PagerDuty incident for a ticket."""

    def __init__(self, ticket, transaction, config: PagerDutyConfig | None = None, agent=None):
        self.ticket = ticket
        self.transaction = transaction
        self.config = config or PagerDutyConfig.from_settings()
        self._agent = agent

    @property
    def agent(self) -> EventsAgent:
        if self._agent is None:
            self._agent = EventsAgent(
                routing_key=self.config.routing_key,
                spool=self.config.spool_dir,
                api_url=self.config.events_api_url,
                timeout=self.config.timeout,
            )
        return self._agent

    @property
    def dedup_key(self) -> str:
        return f"{self.config.dedup_prefix}{self.ticket.pk}"

    def prepare(self) -> bool:
        return True

    def acknowledge_on_take(self) -> bool:
        """Global acknowledge-on-take flag, overridden by the queue's custom field."""
        queue_value = self.ticket.queue.first_custom_field_value(
            self.config.queue_cf_acknowledge_on_take
        )
        if queue_value is not None:
            return parse_flag(queue_value)
        return self.config.acknowledge_on_take

    def select_action(self) -> Optional[IncidentAction]:
        from apps.tickets.users import get_pseudo_user_ids

        ignored: set[int] = set()
        if self.transaction.type == TransactionType.SET:
            ignored = get_pseudo_user_ids()
        return select_action(self.transaction, self.acknowledge_on_take(), ignored)

    def commit(self) -> bool:
        action = self.select_action()
        if action is None:
            return True

        try:
            result = self.submit(action)
        except Exception as e:
            logger.exception(f"Unexpected error {action.verb} incident in PagerDuty: {e}")
            result = SubmitResult(SubmitStatus.FAILED, message=str(e))

        self.record_outcome(action, result)
        return True

    def submit(self, action: IncidentAction) -> SubmitResult:
        if action is IncidentAction.ACKNOWLEDGE:
            return self.agent.acknowledge_event(self.dedup_key, summary=ACKNOWLEDGE_SUMMARY)
        if action is IncidentAction.RESOLVE:
            return self.agent.resolve_event(self.dedup_key)
        return self.trigger_event()

    def build_summary(self) -> str:
        prefix = f"{self.ticket.subject_tag} " if self.config.include_subject_tag else ""
        return f"{prefix}{self.ticket.subject}"

    def severity(self) -> str:
        queue = self.ticket.queue
        severity = normalize_severity(
            queue.first_custom_field_value(self.config.queue_cf_priority),
            default=self.config.default_severity,
        )
        return severity or self.config.default_severity

    def source(self) -> str:
        queue = self.ticket.queue
        return (
            queue.first_custom_field_value(self.config.queue_cf_service)
            or self.config.default_source
        )

    def trigger_event(self) -> SubmitResult:
        return self.agent.trigger_event(
            dedup_key=self.dedup_key,
            summary=self.build_summary(),
            source=self.source(),
            severity=self.severity(),
            event_class="Ticket",
            links=[{"href": self.ticket.web_url, "text": "RT Ticket"}],
        )

    def record_outcome(self, action: IncidentAction, result: SubmitResult):
        """Log the submission outcome and record it as a PagerDuty transaction."""
        from apps.tickets.users import get_system_user

        if result.ok:
            logger.info(
                f"Succeeded in {action.verb} incident in PagerDuty, dedup_key: {result.dedup_key}"
            )
            new_value = action.past_tense
            content = f"Succeeded in {action.verb} incident in PagerDuty"
        elif result.deferred:
            logger.info(f"PagerDuty deferred {action.verb} incident: {result.message}")
            new_value = "deferred"
            content = f"Response from PagerDuty: {result.message}"
        else:
            logger.error(f"Failed {action.verb} incident in PagerDuty, error: {result.message}")
            new_value = "rejected"
            content = f"Failed {action.verb} incident in PagerDuty: {result.message}"

        return self.ticket.record_transaction(
            TransactionType.PAGERDUTY,
            new_value=new_value,
            content=content,
            creator=get_system_user(),
        )
