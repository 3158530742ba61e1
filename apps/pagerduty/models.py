"""
Scrip model: which queues notify PagerDuty on ticket transactions.
"""

from django.db import models


class PagerDutyScrip(models.Model):
    """
    Runs the Notify PagerDuty action for transactions on the selected queues.

    A scrip with no queues selected applies to every queue.
    """

    description = models.CharField(
        max_length=255,
        default="Create or Update PagerDuty Incident",
    )
    is_active = models.BooleanField(
        default=True,
        db_index=True,
    )
    queues = models.ManyToManyField(
        "tickets.Queue",
        blank=True,
        related_name="pagerduty_scrips",
        help_text="Queues this scrip applies to. Leave empty to apply globally.",
    )

    created_at = models.DateTimeField(
        auto_now_add=True,
    )
    updated_at = models.DateTimeField(
        auto_now=True,
    )

    class Meta:
        ordering = ["description"]
        verbose_name = "PagerDuty scrip"

    def __str__(self):
        status = "active" if self.is_active else "inactive"
        return f"{self.description} [{status}]"

    @property
    def is_global(self) -> bool:
        return not self.queues.exists()

    def applies_to(self, queue) -> bool:
        if not self.is_active:
            return False
        return self.is_global or self.queues.filter(pk=queue.pk).exists()
