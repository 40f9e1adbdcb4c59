import logging
import re

from django.core.exceptions import PermissionDenied
from django.core.paginator import Paginator
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.csrf import ensure_csrf_cookie
from django.views.decorators.http import require_GET, require_POST

from accounts.decorators import hr_required, jobseeker_required, get_jobseeker_profile
from hirehub.api import json_api, json_body

from .forms import (
    JobForm,
    JobApplicationForm,
    MatchPreviewForm,
    StatusForm,
    BulkStatusForm,
    job_form_data,
)
from .models import Job, JobApplication, JobType, ApplicationStatus, Interviewer, SavedJob
from .scoring import match_skills
from .utils import application_status_counts
from . import workflow

logger = logging.getLogger(__name__)


def _paginate(request, queryset, per_page=20):
    paginator = Paginator(queryset, per_page)
    page_number = request.GET.get("page") or 1
    page_obj = paginator.get_page(page_number)
    return page_obj


def _page_meta(page_obj) -> dict:
    return {
        "page": page_obj.number,
        "pages": page_obj.paginator.num_pages,
        "total": page_obj.paginator.count,
    }


def _safe_int(v):
    try:
        if v is None or v == "":
            return None
        return int(v)
    except (TypeError, ValueError):
        return None


def _normalize_space(v: str | None) -> str:
    return re.sub(r"\s+", " ", (v or "")).strip()


def _form_errors(form) -> JsonResponse:
    return JsonResponse({"error": "Validation failed.", "fields": form.errors}, status=400)


def _get_job_for_editor(user, job_id) -> Job:
    job = get_object_or_404(Job, id=job_id)
    if user.role != "admin" and not job.is_owned_by(user):
        raise PermissionDenied("This is not your job posting.")
    return job


# -----------------------------
# Jobs: browse / create / edit
# -----------------------------
@require_GET
@ensure_csrf_cookie
def job_list(request):
    q = _normalize_space(request.GET.get("q"))
    location = _normalize_space(request.GET.get("location"))
    job_type = (request.GET.get("job_type") or "").strip()
    if job_type and job_type not in JobType.values:
        job_type = ""

    qs = Job.objects.visible_to(request.user).search(q=q, location=location, job_type=job_type or None)
    status = (request.GET.get("status") or "").strip()
    if status and getattr(request.user, "role", None) in {"hr", "admin"}:
        qs = qs.filter(status=status)

    page_obj = _paginate(request, qs.recent())
    return JsonResponse({"jobs": [job.to_dict() for job in page_obj.object_list], **_page_meta(page_obj)})


@require_GET
def job_detail(request, job_id):
    job = get_object_or_404(Job.objects.visible_to(request.user), id=job_id)
    return JsonResponse({"job": job.to_dict()})


@require_POST
@hr_required
@json_api
def create_job(request):
    form = JobForm(json_body(request))
    if not form.is_valid():
        return _form_errors(form)
    job = form.save(commit=False)
    job.created_by = request.user
    job.save()
    logger.info("Job created: job_id=%s by=%s", job.id, request.user.username)
    return JsonResponse({"job": job.to_dict()}, status=201)


@require_POST
@hr_required
@json_api
def edit_job(request, job_id):
    job = _get_job_for_editor(request.user, job_id)
    data = job_form_data(job)
    data.update(json_body(request))
    form = JobForm(data, instance=job)
    if not form.is_valid():
        logger.warning("Job update rejected: job_id=%s errors=%s", job.id, form.errors.as_json())
        return _form_errors(form)
    form.save()
    logger.info("Job updated: job_id=%s by=%s", job.id, request.user.username)
    return JsonResponse({"job": job.to_dict()})


@require_POST
@json_api
def match_preview(request, job_id):
    """Live match preview while a candidate fills in the application form."""
    job = get_object_or_404(Job.objects.active(), id=job_id)
    form = MatchPreviewForm(json_body(request))
    if not form.is_valid():
        return _form_errors(form)
    return JsonResponse(match_skills(job.required_skills, form.cleaned_data["skills"]).to_dict())


# -----------------------------
# Candidates: apply + own applications
# -----------------------------
@require_POST
@json_api
def apply_job(request, job_id):
    job = get_object_or_404(Job, id=job_id)
    form = JobApplicationForm(request.POST, request.FILES)
    if not form.is_valid():
        return _form_errors(form)

    applicant = request.user if getattr(request.user, "role", None) == "job_seeker" else None
    data = form.cleaned_data
    application, match = workflow.submit_application(
        job,
        name=data["name"],
        email=data["email"],
        phone=data["phone"],
        skills=data["skills"],
        resume=data["resume"],
        cover_letter=(data.get("cover_letter") or "").strip(),
        applicant=applicant,
    )
    return JsonResponse(
        {
            "message": "Application submitted successfully! We'll contact you via email.",
            "application": {
                "id": application.id,
                "token": str(application.application_token),
                "email": application.email,
                "job_title": job.title,
                "match_score": application.resume_match_score,
            },
            "match": match.to_dict(),
        },
        status=201,
    )


@require_GET
@jobseeker_required
def my_applications(request):
    base_qs = JobApplication.objects.for_applicant(request.user).select_related("job")

    status = (request.GET.get("status") or "all").lower()
    if status != "all" and status not in ApplicationStatus.values:
        status = "all"
    applications = base_qs if status == "all" else base_qs.filter(status=status)

    return JsonResponse(
        {
            "applications": [
                {**app.to_dict(), "job_title": app.job.title} for app in applications.order_by("-created_at")
            ],
            "status": status,
            "counts": application_status_counts(base_qs),
        }
    )


@require_GET
@jobseeker_required
def my_interviews(request):
    """Upcoming and past interviews: the caller's applications currently in interviewing."""
    applications = (
        JobApplication.objects.for_applicant(request.user)
        .filter(status=ApplicationStatus.INTERVIEWING)
        .select_related("job")
        .order_by("-created_at", "-id")
    )
    interviews = [{**app.to_dict(), "job": app.job.to_dict()} for app in applications]
    return JsonResponse({"interviews": interviews, "total": len(interviews)})


@require_POST
@jobseeker_required
@json_api
def toggle_saved_job(request, job_id: int):
    seeker = get_jobseeker_profile(request.user)
    job = get_object_or_404(Job.objects.active(), id=job_id)
    obj, created = SavedJob.objects.get_or_create(job=job, jobseeker=seeker)
    if not created:
        obj.delete()
    logger.info("Saved job toggled: job_id=%s user=%s saved=%s", job.id, request.user.username, created)
    return JsonResponse({"job_id": job.id, "saved": created})


@require_GET
@jobseeker_required
def saved_jobs(request):
    seeker = get_jobseeker_profile(request.user)
    qs = SavedJob.objects.filter(jobseeker=seeker).select_related("job")
    page_obj = _paginate(request, qs, per_page=10)
    return JsonResponse(
        {
            "saved_jobs": [
                {"saved_at": s.created_at.isoformat(), "job": s.job.to_dict()} for s in page_obj.object_list
            ],
            **_page_meta(page_obj),
        }
    )


@require_GET
def application_status_lookup(request, token):
    """Candidate-facing status page keyed by the token sent after applying."""
    application = get_object_or_404(JobApplication.objects.select_related("job"), application_token=token)
    return JsonResponse(
        {
            "job_title": application.job.title,
            "name": application.name,
            "status": application.status,
            "status_label": application.status_label(),
            "submitted_at": application.created_at.isoformat(),
            "scheduled_at": application.scheduled_at.isoformat() if application.scheduled_at else None,
            "interview_mode": application.interview_mode,
            "meeting_link": application.meeting_link,
        }
    )


# -----------------------------
# HR: candidate review
# -----------------------------
@require_GET
@hr_required
def application_list(request):
    """All candidates across the caller's jobs, best match first."""
    base_qs = JobApplication.objects.manageable_by(request.user).select_related("job")
    job_id = _safe_int(request.GET.get("job"))
    if job_id:
        base_qs = base_qs.filter(job_id=job_id)

    status = (request.GET.get("status") or "all").lower()
    applications = base_qs
    if status != "all":
        applications = applications.filter(status=status)

    page_obj = _paginate(request, applications.ranked())
    return JsonResponse(
        {
            "applications": [{**app.to_dict(), "job_title": app.job.title} for app in page_obj.object_list],
            "status": status,
            "counts": application_status_counts(base_qs),
            **_page_meta(page_obj),
        }
    )


@require_GET
@json_api
def application_detail(request, application_id):
    if not request.user.is_authenticated:
        return JsonResponse({"error": "Authentication required."}, status=401)
    application = get_object_or_404(JobApplication.objects.select_related("job"), id=application_id)

    user = request.user
    can_manage = user.role == "admin" or (user.role == "hr" and application.job.is_owned_by(user))
    if not can_manage and application.applicant_id != user.pk:
        raise PermissionDenied("Access denied.")

    data = {**application.to_dict(), "job_title": application.job.title}
    if can_manage:
        data["events"] = [
            {"status": e.status, "note": e.note, "created_at": e.created_at.isoformat()}
            for e in application.events.all()
        ]
    return JsonResponse({"application": data, "can_manage": can_manage})


@require_POST
@hr_required
@json_api
def update_application_status(request, application_id):
    form = StatusForm(json_body(request))
    if not form.is_valid():
        return _form_errors(form)
    application = workflow.set_status(application_id, form.cleaned_data["status"], actor=request.user)
    return JsonResponse({"application": application.to_dict()})


@require_POST
@hr_required
@json_api
def schedule_interview(request, application_id):
    application = workflow.schedule_interview(application_id, json_body(request), actor=request.user)
    return JsonResponse({"application": application.to_dict()})


@require_POST
@hr_required
@json_api
def bulk_update_status(request):
    form = BulkStatusForm(json_body(request))
    if not form.is_valid():
        return _form_errors(form)
    result = workflow.bulk_set_status(
        form.cleaned_data["application_ids"], form.cleaned_data["status"], actor=request.user
    )
    return JsonResponse(result.to_dict())


@require_GET
@hr_required
def interviewer_list(request):
    interviewers = Interviewer.objects.filter(is_active=True)
    return JsonResponse({"interviewers": [i.to_dict() for i in interviewers]})
