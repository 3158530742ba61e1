"""Run the Notify PagerDuty scrip when a ticket transaction is committed."""

from __future__ import annotations

import logging

from django.db import transaction as db_transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from apps.tickets.models import Transaction, TransactionType

logger = logging.getLogger(__name__)


def scrip_applies(queue) -> bool:
    from apps.pagerduty.models import PagerDutyScrip

    return any(s.applies_to(queue) for s in PagerDutyScrip.objects.filter(is_active=True))


def run_scrip(transaction_id: int) -> bool:
    """Run the PagerDuty action for one transaction."""
    from apps.pagerduty.actions import NotifyPagerDuty

    txn = Transaction.objects.select_related("ticket", "ticket__queue").filter(
        pk=transaction_id
    ).first()
    if txn is None:
        logger.warning(f"Transaction {transaction_id} vanished before PagerDuty scrip ran")
        return False

    action = NotifyPagerDuty(txn.ticket, txn)
    if not action.prepare():
        return False
    return action.commit()


@receiver(post_save, sender=Transaction, dispatch_uid="pagerduty_notify_on_transaction")
def notify_pagerduty_on_transaction(sender, instance, created, **kwargs):
    if not created or kwargs.get("raw"):
        return
    # Our own outcome records must not re-enter the scrip.
    if instance.type == TransactionType.PAGERDUTY:
        return
    if not scrip_applies(instance.ticket.queue):
        return

    transaction_id = instance.pk
    db_transaction.on_commit(lambda: run_scrip(transaction_id))
