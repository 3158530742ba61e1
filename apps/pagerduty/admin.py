"""Admin configuration for PagerDuty models."""

from django.contrib import admin
from django_object_actions import DjangoObjectActions
from django_object_actions import action as object_action

from apps.pagerduty.models import PagerDutyScrip
from apps.pagerduty.tasks import build_agent


@admin.register(PagerDutyScrip)
class PagerDutyScripAdmin(DjangoObjectActions, admin.ModelAdmin):
    """Admin for PagerDutyScrip model."""

    list_display = ["description", "is_active", "queue_list", "updated_at"]
    list_filter = ["is_active"]
    search_fields = ["description"]
    filter_horizontal = ["queues"]
    readonly_fields = ["created_at", "updated_at"]
    actions = ["enable_selected", "disable_selected"]
    changelist_actions = ["flush_spool"]

    def get_queryset(self, request):
        return super().get_queryset(request).prefetch_related("queues")

    @admin.display(description="Queues")
    def queue_list(self, obj):
        names = [q.name for q in obj.queues.all()]
        return ", ".join(names) if names else "(all queues)"

    @admin.action(description="Enable selected scrips")
    def enable_selected(self, request, queryset):
        count = queryset.update(is_active=True)
        self.message_user(request, f"{count} scrip(s) enabled.")

    @admin.action(description="Disable selected scrips")
    def disable_selected(self, request, queryset):
        count = queryset.update(is_active=False)
        self.message_user(request, f"{count} scrip(s) disabled.")

    @object_action(label="Flush spool", description="Resubmit deferred PagerDuty events")
    def flush_spool(self, request, queryset):
        agent = build_agent()
        if agent.spool is None:
            self.message_user(request, "No spool directory configured.", level="warning")
            return
        result = agent.flush()
        level = "warning" if result.deferred or result.failed else "info"
        self.message_user(
            request,
            f"{result.submitted} submitted, {result.failed} failed, "
            f"{result.deferred} still deferred.",
            level=level,
        )
