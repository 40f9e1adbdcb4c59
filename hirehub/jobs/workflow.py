"""Application status workflow.

Every function here takes the acting user explicitly and raises Django
exceptions (``PermissionDenied``, ``ValidationError``, ``DoesNotExist``) or
``DuplicateApplication``; views translate them into responses.
"""
from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, field

from django.core.exceptions import ObjectDoesNotExist, PermissionDenied, ValidationError
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Q
from django.utils import timezone

from hirehub.api import Conflict

from .constants import ASSESSMENT_TOKEN_BYTES, BULK_STATUS_TARGETS, STATUS_TRANSITIONS
from .forms import ScheduleInterviewForm
from .models import ApplicationStatus, Interviewer, JobApplication, JobStatus
from .scoring import clean_skills, match_skills
from .utils import record_application_event

logger = logging.getLogger(__name__)


class DuplicateApplication(Conflict):
    pass


class InvalidTransition(ValidationError):
    pass


def allowed_transitions(current: str) -> frozenset[str]:
    return STATUS_TRANSITIONS.get(current, frozenset())


def check_transition(current: str, target: str) -> None:
    if current not in STATUS_TRANSITIONS:
        raise InvalidTransition(f"Application has unsupported status '{current}'; it cannot be changed here.")
    if target not in allowed_transitions(current):
        raise InvalidTransition(f"Cannot move an application from '{current}' to '{target}'.")


def _require_hr(actor) -> None:
    if actor is None or not actor.is_authenticated or not getattr(actor, "is_hr_or_admin", False):
        raise PermissionDenied("Only HR or admin users can change applications.")


def _check_can_manage(actor, application) -> None:
    if actor.role != "admin" and not application.job.is_owned_by(actor):
        raise PermissionDenied("You can only manage applications for your own job postings.")


def _get_for_update(application_id) -> JobApplication:
    try:
        return JobApplication.objects.select_for_update().select_related("job").get(pk=application_id)
    except (JobApplication.DoesNotExist, ValueError, TypeError):
        raise JobApplication.DoesNotExist(f"Application {application_id} not found.")


def set_status(application_id, status: str, *, actor) -> JobApplication:
    """Move an application to ``status``; re-applying its current status is a no-op."""
    _require_hr(actor)
    if status not in ApplicationStatus.values:
        raise ValidationError(f"Invalid status '{status}'.")

    with transaction.atomic():
        application = _get_for_update(application_id)
        _check_can_manage(actor, application)
        if application.status == status:
            return application
        check_transition(application.status, status)
        if status == ApplicationStatus.INTERVIEWING:
            raise ValidationError("Moving to interviewing needs a schedule; use schedule interview.")

        previous = application.status
        application.status = status
        application.save(update_fields=["status", "updated_at"])
        record_application_event(application, status, f"Status changed from {previous} to {status}", actor=actor)

    logger.info("Application status updated: app_id=%s %s->%s by=%s", application.id, previous, status, actor.username)
    return application


def schedule_interview(application_id, payload, *, actor) -> JobApplication:
    """Set status to interviewing and write the scheduling fields in one update."""
    _require_hr(actor)
    form = ScheduleInterviewForm(payload)
    if not form.is_valid():
        raise ValidationError(form.errors.as_data())
    data = form.cleaned_data
    now = timezone.now()

    with transaction.atomic():
        application = _get_for_update(application_id)
        _check_can_manage(actor, application)
        check_transition(application.status, ApplicationStatus.INTERVIEWING)

        changes = {
            "status": ApplicationStatus.INTERVIEWING,
            "scheduled_at": data["scheduled_at"],
            "interview_duration_minutes": data["interview_duration_minutes"],
            "interview_sent_at": now,
            "interview_sent_by": actor,
            "updated_at": now,
        }
        # A reschedule replaces every optional field; omitted ones are cleared
        interviewer = data.get("interviewer")
        changes["interviewer"] = interviewer
        for name in ("meeting_link", "interview_mode", "interviewer_notes"):
            changes[name] = data.get(name) or ""
        if data.get("send_assessment"):
            changes["test_token"] = secrets.token_hex(ASSESSMENT_TOKEN_BYTES)
            changes["test_sent_at"] = now

        for name, value in changes.items():
            setattr(application, name, value)
        application.save(update_fields=list(changes))

        if interviewer:
            Interviewer.objects.filter(pk=interviewer.pk).update(
                last_scheduled_at=data["scheduled_at"],
                last_scheduled_timezone=interviewer.timezone,
            )

        when = timezone.localtime(data["scheduled_at"]).strftime("%Y-%m-%d %H:%M")
        record_application_event(application, ApplicationStatus.INTERVIEWING, f"Interview scheduled: {when}", actor=actor)

    logger.info(
        "Interview scheduled: app_id=%s when=%s interviewer=%s assessment=%s",
        application.id,
        when,
        getattr(interviewer, "id", None),
        bool(data.get("send_assessment")),
    )
    return application


@dataclass
class BulkResult:
    status: str
    updated: list = field(default_factory=list)
    failed: dict = field(default_factory=dict)

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    @property
    def updated_count(self) -> int:
        return len(self.updated)

    @property
    def outcome(self) -> str:
        if not self.failed:
            return "all"
        return "some" if self.updated else "none"

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "outcome": self.outcome,
            "updated": list(self.updated),
            "updated_count": self.updated_count,
            "failed": {str(k): v for k, v in self.failed.items()},
            "failed_count": self.failed_count,
        }


def _failure_reason(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        return " ".join(exc.messages)
    return str(exc) or exc.__class__.__name__


def bulk_set_status(application_ids, status: str, *, actor) -> BulkResult:
    """Best-effort batch: each id is updated on its own; successes are kept when others fail."""
    _require_hr(actor)
    if status not in BULK_STATUS_TARGETS:
        raise ValidationError(f"Bulk updates only support: {', '.join(sorted(BULK_STATUS_TARGETS))}.")
    if not application_ids:
        raise ValidationError("Select at least one application.")

    result = BulkResult(status=status)
    for application_id in application_ids:
        try:
            set_status(application_id, status, actor=actor)
        except (ValidationError, PermissionDenied, ObjectDoesNotExist, DatabaseError) as exc:
            result.failed[application_id] = _failure_reason(exc)
            logger.warning("Bulk status update failed: app_id=%s status=%s reason=%s", application_id, status, exc)
        else:
            result.updated.append(application_id)

    logger.info(
        "Bulk status update: status=%s outcome=%s updated=%s failed=%s by=%s",
        status,
        result.outcome,
        result.updated_count,
        result.failed_count,
        actor.username,
    )
    return result


def submit_application(
    job,
    *,
    name: str,
    email: str,
    phone: str = "",
    skills=None,
    resume=None,
    cover_letter: str | None = None,
    applicant=None,
):
    """Create an application and store its match score.

    Returns ``(application, match)``. One application per (job, email); a
    logged-in applicant is also limited to one application per job.
    """
    if job.status != JobStatus.ACTIVE:
        raise ValidationError("This job is no longer accepting applications.")

    email = (email or "").strip().lower()
    existing = Q(email=email)
    if applicant is not None:
        existing |= Q(applicant=applicant)
    if JobApplication.objects.filter(job=job).filter(existing).exists():
        raise DuplicateApplication("You have already applied to this job.")

    skills = clean_skills(skills)
    match = match_skills(job.required_skills, skills)

    try:
        with transaction.atomic():
            application = JobApplication.objects.create(
                job=job,
                applicant=applicant,
                name=name,
                email=email,
                phone=phone or "",
                skills=skills,
                resume=resume or "",
                cover_letter=cover_letter or None,
                resume_match_score=match.score,
                status=ApplicationStatus.SUBMITTED,
            )
    except IntegrityError as exc:
        # the unique (job, email) constraint caught a concurrent submission
        logger.warning("Duplicate application rejected at insert: job_id=%s email=%s", job.id, email)
        raise DuplicateApplication("You have already applied to this job.") from exc

    record_application_event(application, ApplicationStatus.SUBMITTED, "Application submitted", actor=applicant)
    logger.info(
        "Application submitted: app_id=%s job_id=%s score=%s",
        application.id,
        job.id,
        match.score,
    )
    return application, match
