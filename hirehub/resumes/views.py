import logging

from django.db import transaction
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_GET, require_POST

from accounts.decorators import jobseeker_required, get_jobseeker_profile
from hirehub.api import json_api, json_error
from jobs.models import Job
from jobs.scoring import clean_skills, match_skills

from .extraction import ResumeParseError, ResumeServiceUnavailable, extract_resume
from .forms import ResumeUploadForm, ResumeParseForm
from .models import Resume

logger = logging.getLogger(__name__)


def _parse_error_response(exc: ResumeParseError) -> JsonResponse:
    status = 503 if isinstance(exc, ResumeServiceUnavailable) else 400
    return json_error(exc.user_message, status=status, code=exc.code)


def _delete_files(storage, names) -> None:
    for name in names:
        storage.delete(name)
        logger.info("Replaced resume file removed: %s", name)


@require_POST
@jobseeker_required
def upload_resume(request):
    """Store the seeker's resume (latest replaces older ones) and pull skills from it."""
    seeker_profile = get_jobseeker_profile(request.user)
    form = ResumeUploadForm(request.POST, request.FILES)
    if not form.is_valid():
        logger.warning("Resume upload failed: user=%s errors=%s", request.user.username, form.errors)
        return JsonResponse({"error": "Validation failed.", "fields": form.errors}, status=400)

    resume = form.save(commit=False)
    resume.jobseeker = seeker_profile

    parse_error = None
    try:
        parsed = extract_resume(form.cleaned_data["file"])
    except ResumeParseError as exc:
        parse_error = {"error": exc.user_message, "code": exc.code}
        logger.warning("Resume stored without parsed fields: user=%s code=%s", request.user.username, exc.code)
    else:
        resume.skills = parsed.skills
        resume.parsed_data = parsed.to_dict()
        degrees = [e.get("degree") or e.get("school") for e in parsed.education if e.get("degree") or e.get("school")]
        resume.education = ", ".join(str(d) for d in degrees)[:255]

    # Only one resume is kept per job seeker
    previous = dict(Resume.objects.filter(jobseeker=seeker_profile).values_list("pk", "file"))
    with transaction.atomic():
        Resume.objects.filter(pk__in=previous).delete()
        resume.save()
        seeker_profile.resume = resume.file.name
        seeker_profile.save(update_fields=["resume", "updated_at"])
        stale = [name for name in previous.values() if name and name != resume.file.name]
        transaction.on_commit(lambda: _delete_files(resume.file.storage, stale))
    logger.info("Resume uploaded: resume_id=%s user=%s", resume.id, request.user.username)

    return JsonResponse({"resume": resume.to_dict(), "parse_error": parse_error}, status=201)


@require_GET
@jobseeker_required
def resume_list(request):
    seeker_profile = get_jobseeker_profile(request.user)
    resumes = Resume.objects.filter(jobseeker=seeker_profile).order_by("-created_at")
    return JsonResponse({"resumes": [r.to_dict() for r in resumes]})


@require_POST
@json_api
def parse_resume(request):
    """Extract fields from an uploaded resume for form auto-fill.

    With ``job_id`` the response also carries the match preview for that job,
    computed from the parsed skills, or from the declared ``skills`` when the
    parser found none.
    """
    form = ResumeParseForm(request.POST, request.FILES)
    if not form.is_valid():
        return JsonResponse({"error": "No file uploaded.", "fields": form.errors}, status=400)

    try:
        parsed = extract_resume(form.cleaned_data["resume"])
    except ResumeParseError as exc:
        return _parse_error_response(exc)

    payload = {"parsed": parsed.to_dict()}
    job_id = form.cleaned_data.get("job_id")
    if job_id:
        job = get_object_or_404(Job.objects.active(), pk=job_id)
        candidate_skills = parsed.skills or clean_skills(form.cleaned_data.get("skills"))
        payload["match"] = match_skills(job.required_skills, candidate_skills).to_dict()
    return JsonResponse(payload)
