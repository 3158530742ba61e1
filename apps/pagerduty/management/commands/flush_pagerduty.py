"""
Management command to resubmit spooled PagerDuty events.

Run it regularly (e.g. from cron) when PAGERDUTY_SPOOL_DIR is set.

Usage:
    python manage.py flush_pagerduty
    python manage.py flush_pagerduty --spool-dir /var/spool/pagerduty
"""

from django.core.management.base import BaseCommand, CommandError

from apps.pagerduty.tasks import build_agent


class Command(BaseCommand):
    help = "Resubmit PagerDuty events that were deferred and spooled"

    def add_arguments(self, parser):
        parser.add_argument(
            "--spool-dir",
            type=str,
            help="Spool directory to flush (default: PAGERDUTY_SPOOL_DIR)",
        )

    def handle(self, *args, **options):
        agent = build_agent(options.get("spool_dir"))
        if agent.spool is None:
            raise CommandError("No spool directory configured (set PAGERDUTY_SPOOL_DIR).")

        pending = len(agent.spooled_events())
        if not pending:
            self.stdout.write(f"Nothing to flush in {agent.spool}")
            return

        result = agent.flush()

        self.stdout.write(f"Spool: {agent.spool}")
        self.stdout.write(f"  Submitted: {result.submitted}")
        self.stdout.write(f"  Failed:    {result.failed}")
        self.stdout.write(f"  Deferred:  {result.deferred}")

        if result.deferred:
            self.stdout.write(self.style.WARNING("PagerDuty is still deferring submissions"))
        elif result.failed:
            self.stdout.write(self.style.ERROR("Some spooled events were rejected and dropped"))
        else:
            self.stdout.write(self.style.SUCCESS("Spool flushed"))
