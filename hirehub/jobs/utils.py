import logging

from django.db import transaction

logger = logging.getLogger(__name__)


def record_application_event(application, status: str, note: str | None = None, *, actor=None):
    """Create a timeline event for an application."""
    from .models import ApplicationEvent
    try:
        # own savepoint: a failed insert must not poison the caller's transaction
        with transaction.atomic():
            return ApplicationEvent.objects.create(application=application, status=status, note=note, actor=actor)
    except Exception:
        logger.exception("Failed to record application event: app_id=%s status=%s", application.id, status)
        return None


def application_status_counts(queryset) -> dict[str, int]:
    """Counts per status plus "all", the way the HR and seeker lists show them."""
    from .models import ApplicationStatus

    counts = {"all": queryset.count()}
    for status in ApplicationStatus.values:
        counts[status] = queryset.filter(status=status).count()
    return counts
