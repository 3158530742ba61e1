"""Tests for the PagerDuty scrip admin."""

from unittest.mock import MagicMock, patch

from django.contrib.admin.sites import AdminSite
from django.test import RequestFactory, TestCase, override_settings

from apps.pagerduty.admin import PagerDutyScripAdmin
from apps.pagerduty.client import FlushResult
from apps.pagerduty.models import PagerDutyScrip
from apps.tickets.models import Queue


class PagerDutyScripAdminTests(TestCase):
    """Tests for PagerDutyScripAdmin actions."""

    def setUp(self):
        self.admin = PagerDutyScripAdmin(PagerDutyScrip, AdminSite())
        self.admin.message_user = MagicMock()
        self.request = RequestFactory().get("/admin/pagerduty/pagerdutyscrip/")

    def test_queue_list(self):
        """The changelist shows bound queues, or all queues."""
        scrip = PagerDutyScrip.objects.create()
        self.assertEqual(self.admin.queue_list(scrip), "(all queues)")

        scrip.queues.add(Queue.objects.create(name="Ops"), Queue.objects.create(name="DBA"))
        self.assertEqual(self.admin.queue_list(scrip), "DBA, Ops")

    def test_disable_selected(self):
        """The bulk action should deactivate selected scrips."""
        PagerDutyScrip.objects.create()
        self.admin.disable_selected(self.request, PagerDutyScrip.objects.all())
        self.assertFalse(PagerDutyScrip.objects.filter(is_active=True).exists())

    def test_flush_without_spool_warns(self):
        """Flushing without a spool directory should warn."""
        self.admin.flush_spool(self.request, PagerDutyScrip.objects.none())

        args, kwargs = self.admin.message_user.call_args
        self.assertIn("No spool directory", args[1])
        self.assertEqual(kwargs["level"], "warning")

    @override_settings(PAGERDUTY_SPOOL_DIR="/var/spool/pagerduty")
    @patch("apps.pagerduty.client.EventsAgent.flush")
    def test_flush_reports_counts(self, mock_flush):
        """The admin action should report the flush counts."""
        mock_flush.return_value = FlushResult(submitted=3)

        self.admin.flush_spool(self.request, PagerDutyScrip.objects.none())

        args, kwargs = self.admin.message_user.call_args
        self.assertIn("3 submitted", args[1])
        self.assertEqual(kwargs["level"], "info")
