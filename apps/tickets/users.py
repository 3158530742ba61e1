"""Well-known users of the ticketing core.

The system user performs automated changes; Nobody is the owner of unowned
tickets. Neither counts as a person taking a ticket.
"""

from __future__ import annotations

from django.conf import settings
from django.contrib.auth import get_user_model


def _get_or_create_user(username: str):
    user_model = get_user_model()
    user, _ = user_model.objects.get_or_create(
        username=username,
        defaults={"is_active": False},
    )
    return user


def get_system_user():
    """Return the system user, creating it on first use."""
    return _get_or_create_user(settings.TICKETS_SYSTEM_USERNAME)


def get_nobody():
    """Return the Nobody user, creating it on first use."""
    return _get_or_create_user(settings.TICKETS_NOBODY_USERNAME)


def get_pseudo_user_ids() -> set[int]:
    """Ids of users that never count as a real owner."""
    return {get_system_user().pk, get_nobody().pk}
