"""Tests for the flush_pagerduty command and the flush_spool task."""

import io
import json
import tempfile
from pathlib import Path
from unittest.mock import patch

from django.core.management import CommandError, call_command
from django.test import SimpleTestCase, override_settings

from apps.pagerduty.client import FlushResult
from apps.pagerduty.tasks import build_agent, flush_spool


def _spool_event(spool: Path, name: str, dedup_key: str = "rt#1"):
    spool.mkdir(parents=True, exist_ok=True)
    event = {"routing_key": "r" * 32, "event_action": "resolve", "dedup_key": dedup_key}
    (spool / f"{name}.json").write_text(json.dumps(event))


class FlushCommandTests(SimpleTestCase):
    """Tests for the flush_pagerduty management command."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.spool = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_requires_spool_dir(self):
        """The command should error when no spool directory is configured."""
        with self.assertRaises(CommandError):
            call_command("flush_pagerduty")

    def test_empty_spool(self):
        """An empty spool reports nothing to flush."""
        out = io.StringIO()
        call_command("flush_pagerduty", "--spool-dir", str(self.spool), stdout=out)
        self.assertIn("Nothing to flush", out.getvalue())

    @patch("apps.pagerduty.client.EventsAgent.flush")
    def test_flush_reports_counts(self, mock_flush):
        """The command should print per-outcome counts."""
        _spool_event(self.spool, "0001")
        mock_flush.return_value = FlushResult(submitted=1)

        out = io.StringIO()
        with override_settings(PAGERDUTY_SPOOL_DIR=str(self.spool)):
            call_command("flush_pagerduty", stdout=out)

        output = out.getvalue()
        self.assertIn("Submitted: 1", output)
        self.assertIn("Spool flushed", output)

    @patch("apps.pagerduty.client.EventsAgent.flush")
    def test_flush_reports_deferral(self, mock_flush):
        """A deferral during flush is reported as still deferring."""
        _spool_event(self.spool, "0001")
        mock_flush.return_value = FlushResult(deferred=1)

        out = io.StringIO()
        call_command("flush_pagerduty", "--spool-dir", str(self.spool), stdout=out)

        self.assertIn("still deferring", out.getvalue())


class FlushTaskTests(SimpleTestCase):
    """Tests for the flush_spool Celery task."""

    def test_skips_without_spool(self):
        """The task should skip when no spool directory is configured."""
        self.assertEqual(flush_spool(), {"skipped": True})

    @patch("apps.pagerduty.client.EventsAgent.flush")
    def test_returns_counts(self, mock_flush):
        """The task result should carry the flush counts."""
        mock_flush.return_value = FlushResult(submitted=2, failed=1, deferred=0)

        with tempfile.TemporaryDirectory() as spool:
            result = flush_spool(spool)

        self.assertEqual(result, {"submitted": 2, "failed": 1, "deferred": 0})

    @override_settings(PAGERDUTY_SPOOL_DIR="/var/spool/pagerduty", PAGERDUTY_TIMEOUT=7)
    def test_build_agent_uses_settings(self):
        """build_agent() should read spool and timeout from settings."""
        agent = build_agent()
        self.assertEqual(str(agent.spool), "/var/spool/pagerduty")
        self.assertEqual(agent.timeout, 7)
