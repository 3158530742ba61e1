"""Tests for the ticketing core models."""

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings

from apps.tickets.models import Queue, Ticket, TicketStatus, Transaction, TransactionType
from apps.tickets.users import get_nobody, get_pseudo_user_ids, get_system_user


class QueueCustomFieldTests(TestCase):
    def test_missing_field_is_none(self):
        queue = Queue.objects.create(name="General")
        self.assertIsNone(queue.first_custom_field_value("Incident Priority"))

    def test_scalar_value(self):
        queue = Queue.objects.create(name="Ops", custom_fields={"Incident Priority": "warning"})
        self.assertEqual(queue.first_custom_field_value("Incident Priority"), "warning")

    def test_list_returns_first_value(self):
        queue = Queue.objects.create(
            name="Ops", custom_fields={"Incident Service": ["Database", "Web"]}
        )
        self.assertEqual(queue.first_custom_field_value("Incident Service"), "Database")

    def test_empty_values_are_none(self):
        queue = Queue.objects.create(
            name="Ops", custom_fields={"Incident Service": [], "Incident Priority": ""}
        )
        self.assertIsNone(queue.first_custom_field_value("Incident Service"))
        self.assertIsNone(queue.first_custom_field_value("Incident Priority"))

    def test_numeric_value_is_stringified(self):
        queue = Queue.objects.create(
            name="Ops", custom_fields={"Incident Acknowledge On Take": 0}
        )
        self.assertEqual(queue.first_custom_field_value("Incident Acknowledge On Take"), "0")


@override_settings(TICKETS_RT_NAME="rt.example.com", TICKETS_WEB_BASE_URL="https://rt.example.com")
class TicketTests(TestCase):
    def setUp(self):
        self.queue = Queue.objects.create(name="Ops")
        self.user = get_user_model().objects.create_user(username="alice")

    def test_create_ticket_records_create_transaction(self):
        ticket = Ticket.objects.create_ticket(self.queue, "Disk full")

        txns = list(ticket.transactions.all())
        self.assertEqual(len(txns), 1)
        self.assertEqual(txns[0].type, TransactionType.CREATE)
        self.assertEqual(ticket.status, TicketStatus.NEW)

    def test_subject_tag_uses_rt_name(self):
        ticket = Ticket.objects.create(queue=self.queue, subject="x")
        self.assertEqual(ticket.subject_tag, f"[rt.example.com #{ticket.pk}]")

    def test_subject_tag_prefers_queue_tag(self):
        self.queue.subject_tag = "ops.example.com"
        self.queue.save()
        ticket = Ticket.objects.create(queue=self.queue, subject="x")
        self.assertEqual(ticket.subject_tag, f"[ops.example.com #{ticket.pk}]")

    def test_web_url(self):
        ticket = Ticket.objects.create(queue=self.queue, subject="x")
        self.assertEqual(ticket.web_url, f"https://rt.example.com/{ticket.pk}")

    def test_set_status_records_old_and_new(self):
        ticket = Ticket.objects.create(queue=self.queue, subject="x")
        txn = ticket.set_status(TicketStatus.RESOLVED)

        self.assertEqual(txn.type, TransactionType.STATUS)
        self.assertEqual(txn.old_value, "new")
        self.assertEqual(txn.new_value, "resolved")
        ticket.refresh_from_db()
        self.assertTrue(ticket.is_inactive)

    def test_set_status_unchanged_is_noop(self):
        ticket = Ticket.objects.create(queue=self.queue, subject="x", status=TicketStatus.OPEN)
        self.assertIsNone(ticket.set_status(TicketStatus.OPEN))
        self.assertEqual(ticket.transactions.count(), 0)

    def test_set_owner_records_user_ids(self):
        ticket = Ticket.objects.create(queue=self.queue, subject="x")
        txn = ticket.set_owner(self.user)

        self.assertEqual(txn.type, TransactionType.SET)
        self.assertEqual(txn.field, "Owner")
        self.assertEqual(txn.old_value, str(get_nobody().pk))
        self.assertEqual(txn.new_value, str(self.user.pk))

    def test_set_owner_to_nobody(self):
        ticket = Ticket.objects.create(queue=self.queue, subject="x", owner=self.user)
        txn = ticket.set_owner(None)

        self.assertEqual(txn.new_value, str(get_nobody().pk))
        ticket.refresh_from_db()
        self.assertIsNone(ticket.owner)

    def test_set_owner_unchanged_is_noop(self):
        ticket = Ticket.objects.create(queue=self.queue, subject="x", owner=self.user)
        self.assertIsNone(ticket.set_owner(self.user))


class TransactionDescriptionTests(TestCase):
    def setUp(self):
        queue = Queue.objects.create(name="Ops")
        self.ticket = Ticket.objects.create(queue=queue, subject="x")

    def test_pagerduty_description(self):
        txn = self.ticket.record_transaction(TransactionType.PAGERDUTY, new_value="triggered")
        self.assertEqual(txn.brief_description, "Incident triggered in PagerDuty")

    def test_status_description(self):
        txn = self.ticket.set_status(TicketStatus.OPEN)
        self.assertEqual(txn.brief_description, "Status changed from 'new' to 'open'")

    def test_comment_description_falls_back_to_label(self):
        txn = Transaction.objects.create(ticket=self.ticket, type=TransactionType.COMMENT)
        self.assertEqual(txn.brief_description, "Comment")


class PseudoUserTests(TestCase):
    def test_pseudo_users_are_created_once(self):
        system = get_system_user()
        nobody = get_nobody()

        self.assertEqual(get_system_user().pk, system.pk)
        self.assertEqual(get_pseudo_user_ids(), {system.pk, nobody.pk})
        self.assertFalse(system.is_active)

    @override_settings(TICKETS_SYSTEM_USERNAME="automation")
    def test_system_username_is_configurable(self):
        self.assertEqual(get_system_user().username, "automation")
