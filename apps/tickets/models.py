"""
Ticket, queue and transaction models.

A deliberately small ticketing core: queues hold custom field values,
tickets belong to queues, and every change to a ticket is appended to its
transaction log. Integrations (see apps.pagerduty) hook into transactions.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models


class TicketStatus(models.TextChoices):
    """Lifecycle status of a ticket."""

    NEW = "new", "New"
    OPEN = "open", "Open"
    STALLED = "stalled", "Stalled"
    RESOLVED = "resolved", "Resolved"
    REJECTED = "rejected", "Rejected"
    DELETED = "deleted", "Deleted"


INACTIVE_STATUSES = frozenset(
    {TicketStatus.RESOLVED.value, TicketStatus.REJECTED.value, TicketStatus.DELETED.value}
)


class TransactionType(models.TextChoices):
    """Kinds of ticket transaction."""

    CREATE = "Create", "Create"
    STATUS = "Status", "Status"
    SET = "Set", "Set"
    CORRESPOND = "Correspond", "Correspond"
    COMMENT = "Comment", "Comment"
    PAGERDUTY = "PagerDuty", "PagerDuty"


class Queue(models.Model):
    """A ticket queue.

    Custom field values are stored as a JSON object mapping the field name to a
    single value or a list of values.
    """

    name = models.CharField(
        max_length=200,
        unique=True,
    )
    description = models.TextField(
        blank=True,
        default="",
    )
    subject_tag = models.CharField(
        max_length=120,
        blank=True,
        default="",
        help_text="Tag used in email subjects. Defaults to TICKETS_RT_NAME.",
    )
    custom_fields = models.JSONField(
        default=dict,
        blank=True,
        help_text='Custom field values, e.g. {"Incident Priority": "warning"}.',
    )

    created_at = models.DateTimeField(
        auto_now_add=True,
    )
    updated_at = models.DateTimeField(
        auto_now=True,
    )

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name

    def first_custom_field_value(self, name: str):
        """Return the first value of the named custom field, or None."""
        value = (self.custom_fields or {}).get(name)
        if isinstance(value, (list, tuple)):
            value = value[0] if value else None
        if value is None or value == "":
            return None
        return str(value)


class TicketManager(models.Manager):
    def create_ticket(self, queue: Queue, subject: str, creator=None, **fields) -> "Ticket":
        """Create a ticket and record its Create transaction."""
        ticket = self.create(queue=queue, subject=subject, **fields)
        ticket.record_transaction(TransactionType.CREATE, creator=creator)
        return ticket


class Ticket(models.Model):
    """A ticket in a queue."""

    queue = models.ForeignKey(
        Queue,
        on_delete=models.PROTECT,
        related_name="tickets",
    )
    subject = models.CharField(
        max_length=255,
        blank=True,
        default="",
    )
    status = models.CharField(
        max_length=20,
        choices=TicketStatus.choices,
        default=TicketStatus.NEW,
        db_index=True,
    )
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="owned_tickets",
        help_text="Ticket owner. Empty means Nobody.",
    )

    created_at = models.DateTimeField(
        auto_now_add=True,
    )
    updated_at = models.DateTimeField(
        auto_now=True,
    )

    objects = TicketManager()

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["queue", "status"], name="tickets_queue_status_idx"),
        ]

    def __str__(self):
        return f"#{self.pk}: {self.subject}"

    @property
    def subject_tag(self) -> str:
        tag = self.queue.subject_tag or settings.TICKETS_RT_NAME
        return f"[{tag} #{self.pk}]"

    @property
    def web_url(self) -> str:
        return f"{settings.TICKETS_WEB_BASE_URL}/{self.pk}"

    @property
    def is_inactive(self) -> bool:
        return self.status in INACTIVE_STATUSES

    def record_transaction(
        self,
        type: str,
        field: str = "",
        old_value: str = "",
        new_value: str = "",
        content: str = "",
        creator=None,
    ) -> "Transaction":
        """Append a transaction to this ticket's history."""
        return Transaction.objects.create(
            ticket=self,
            type=type,
            field=field,
            old_value=old_value,
            new_value=new_value,
            content=content,
            creator=creator,
        )

    def set_status(self, status: str, actor=None) -> "Transaction | None":
        """Change the status and record a Status transaction."""
        old = self.status
        if old == status:
            return None
        self.status = status
        self.save(update_fields=["status", "updated_at"])
        return self.record_transaction(
            TransactionType.STATUS,
            field="Status",
            old_value=old,
            new_value=status,
            creator=actor,
        )

    def set_owner(self, user, actor=None) -> "Transaction | None":
        """Change the owner and record a Set/Owner transaction.

        Owner values are stored as user ids; no owner is recorded as the
        Nobody user's id.
        """
        from apps.tickets.users import get_nobody

        nobody_id = get_nobody().pk
        old_id = self.owner_id or nobody_id
        new_id = user.pk if user is not None else nobody_id
        if old_id == new_id:
            return None
        self.owner = None if new_id == nobody_id else user
        self.save(update_fields=["owner", "updated_at"])
        return self.record_transaction(
            TransactionType.SET,
            field="Owner",
            old_value=str(old_id),
            new_value=str(new_id),
            creator=actor,
        )


class Transaction(models.Model):
    """A single change recorded against a ticket."""

    ticket = models.ForeignKey(
        Ticket,
        on_delete=models.CASCADE,
        related_name="transactions",
    )
    type = models.CharField(
        max_length=30,
        choices=TransactionType.choices,
        db_index=True,
    )
    field = models.CharField(
        max_length=100,
        blank=True,
        default="",
    )
    old_value = models.CharField(
        max_length=255,
        blank=True,
        default="",
    )
    new_value = models.CharField(
        max_length=255,
        blank=True,
        default="",
    )
    content = models.TextField(
        blank=True,
        default="",
    )
    creator = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
    )

    class Meta:
        ordering = ["created_at", "id"]

    def __str__(self):
        return f"#{self.ticket_id} {self.brief_description}"

    @property
    def brief_description(self) -> str:
        if self.type == TransactionType.CREATE:
            return "Ticket created"
        if self.type == TransactionType.STATUS:
            return f"Status changed from '{self.old_value}' to '{self.new_value}'"
        if self.type == TransactionType.SET:
            return f"{self.field} changed from '{self.old_value}' to '{self.new_value}'"
        if self.type == TransactionType.PAGERDUTY:
            return f"Incident {self.new_value} in PagerDuty"
        return self.get_type_display()
