"""Admin configuration for ticket models."""

from django.contrib import admin
from django.db import models as db_models
from django.utils.html import format_html
from django_json_widget.widgets import JSONEditorWidget

from apps.tickets.models import Queue, Ticket, Transaction


class TransactionInline(admin.TabularInline):
    """Read-only ticket history."""

    model = Transaction
    extra = 0
    fields = ["created_at", "type", "brief_description", "content", "creator"]
    readonly_fields = fields
    can_delete = False
    show_change_link = True

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Queue)
class QueueAdmin(admin.ModelAdmin):
    """Admin for Queue model."""

    list_display = ["name", "subject_tag", "created_at"]
    search_fields = ["name", "description"]
    readonly_fields = ["created_at", "updated_at"]
    formfield_overrides = {db_models.JSONField: {"widget": JSONEditorWidget}}

    fieldsets = [
        (
            None,
            {
                "fields": ["name", "description", "subject_tag"],
            },
        ),
        (
            "Custom Fields",
            {
                "fields": ["custom_fields"],
            },
        ),
        (
            "Timestamps",
            {
                "fields": ["created_at", "updated_at"],
                "classes": ["collapse"],
            },
        ),
    ]


@admin.register(Ticket)
class TicketAdmin(admin.ModelAdmin):
    """Admin for Ticket model."""

    list_display = ["id", "subject", "queue", "status_badge", "owner", "created_at"]
    list_filter = ["status", "queue"]
    search_fields = ["subject"]
    readonly_fields = ["created_at", "updated_at"]
    date_hierarchy = "created_at"
    inlines = [TransactionInline]

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("queue", "owner")

    @admin.display(description="Status")
    def status_badge(self, obj):
        colors = {
            "new": "#17a2b8",
            "open": "#dc3545",
            "stalled": "#ffc107",
            "resolved": "#28a745",
            "rejected": "#6c757d",
            "deleted": "#6c757d",
        }
        color = colors.get(obj.status, "#6c757d")
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 8px; '
            'border-radius: 3px; font-size: 11px;">{}</span>',
            color,
            obj.status.upper(),
        )


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    """Admin for Transaction model."""

    list_display = ["ticket", "type", "brief_description", "created_at"]
    list_filter = ["type"]
    search_fields = ["ticket__subject", "content"]
    readonly_fields = [
        "ticket",
        "type",
        "field",
        "old_value",
        "new_value",
        "content",
        "creator",
        "created_at",
    ]
    date_hierarchy = "created_at"

    def has_add_permission(self, request):
        """Transactions are recorded by ticket changes, never by hand."""
        return False

    def has_change_permission(self, request, obj=None):
        """Transactions are audit records."""
        return False
