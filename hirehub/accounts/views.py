import logging

from django.conf import settings
from django.contrib.auth import login, logout, get_user_model
from django.db import IntegrityError, transaction
from django.forms.models import model_to_dict
from django.http import JsonResponse
from django.middleware.csrf import get_token
from django.shortcuts import get_object_or_404
from django.views.decorators.csrf import ensure_csrf_cookie
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from hirehub.api import Conflict, json_api, json_body

from .decorators import jobseeker_required, get_jobseeker_profile
from .forms import (
    JobSeekerRegistrationForm,
    LoginForm,
    ProfileForm,
    SkillForm,
    ExperienceForm,
    EducationForm,
)
from .models import JobSeekerProfile, Skill, Experience, Education
from .utils import PROFILE_COMPLETENESS_FIELDS, profile_completeness

logger = logging.getLogger(__name__)
User = get_user_model()


def _form_errors(form) -> JsonResponse:
    return JsonResponse({"error": "Validation failed.", "fields": form.errors}, status=400)


def _user_payload(user) -> dict:
    return {"id": user.pk, "username": user.username, "email": user.email, "role": user.role}


def _profile_payload(profile: JobSeekerProfile) -> dict:
    skills = list(profile.skills.all())
    data = {name: getattr(profile, name) for name in PROFILE_COMPLETENESS_FIELDS}
    data.update(
        {
            "resume": profile.resume.url if profile.resume else None,
            "skills": [{"id": s.id, "name": s.name, "proficiency_level": s.proficiency_level} for s in skills],
            "experience": [
                {
                    "id": e.id,
                    "title": e.title,
                    "company": e.company,
                    "location": e.location,
                    "start_date": e.start_date.isoformat() if e.start_date else None,
                    "end_date": e.end_date.isoformat() if e.end_date else None,
                    "is_current": e.is_current,
                    "description": e.description,
                }
                for e in profile.experience.all()
            ],
            "education": [
                {
                    "id": e.id,
                    "school": e.school,
                    "degree": e.degree,
                    "field_of_study": e.field_of_study,
                    "start_year": e.start_year,
                    "end_year": e.end_year,
                }
                for e in profile.education.all()
            ],
            "completeness": profile_completeness(profile, skills=[s.name for s in skills]),
        }
    )
    return data


# -----------------------------
# Register / login / logout
# -----------------------------
@require_GET
@ensure_csrf_cookie
def csrf_token(request):
    """Hand out the CSRF cookie; clients echo it back in the X-CSRFToken header on POSTs."""
    return JsonResponse({"csrfToken": get_token(request)})


@require_POST
@json_api
def register_jobseeker(request):
    """Self-service signup for job seekers; HR accounts are created by an admin."""
    form = JobSeekerRegistrationForm(json_body(request))
    if not form.is_valid():
        logger.warning("JobSeeker registration failed: errors=%s", form.errors.as_json())
        return _form_errors(form)

    with transaction.atomic():
        user = form.save(commit=False)
        user.set_password(form.cleaned_data["password"])
        user.role = User.Role.JOB_SEEKER
        user.save()
        JobSeekerProfile.objects.create(user=user, full_name=form.cleaned_data.get("full_name") or "")

    logger.info("JobSeeker registered: username=%s email=%s", user.username, user.email)
    return JsonResponse({"user": _user_payload(user)}, status=201)


@require_POST
@json_api
def user_login(request):
    form = LoginForm(request, data=json_body(request))
    if not form.is_valid():
        logger.info("Login failed: username=%s", form.data.get("username"))
        return JsonResponse({"error": "Invalid username or password."}, status=400)

    user = form.get_user()
    login(request, user)
    # Session management: explicit expiry (1 hour by default)
    request.session.set_expiry(getattr(settings, "SESSION_COOKIE_AGE", 3600))
    logger.info("Login success: username=%s role=%s", user.username, user.role)
    return JsonResponse({"user": _user_payload(user)})


@require_POST
def user_logout(request):
    username = request.user.username if request.user.is_authenticated else None
    logout(request)
    if username:
        logger.info("Logout: username=%s", username)
    return JsonResponse({"ok": True})


# -----------------------------
# Job seeker profile
# -----------------------------
@require_http_methods(["GET", "POST"])
@jobseeker_required
@json_api
def profile(request):
    seeker_profile = get_jobseeker_profile(request.user)
    if request.method == "POST":
        # partial update: fields left out keep their current value
        data = model_to_dict(seeker_profile, fields=PROFILE_COMPLETENESS_FIELDS)
        data.update(json_body(request))
        form = ProfileForm(data, instance=seeker_profile)
        if not form.is_valid():
            return _form_errors(form)
        form.save()
        logger.info("Profile updated: user=%s", request.user.username)
    return JsonResponse({"profile": _profile_payload(seeker_profile)})


@require_POST
@jobseeker_required
@json_api
def add_skill(request):
    seeker_profile = get_jobseeker_profile(request.user)
    data = json_body(request)
    data.setdefault("proficiency_level", Skill.Proficiency.INTERMEDIATE)
    form = SkillForm(data)
    if not form.is_valid():
        return _form_errors(form)

    name = form.cleaned_data["name"]
    if seeker_profile.skills.filter(name__iexact=name).exists():
        raise Conflict(f"Skill '{name}' is already on your profile.")
    skill = form.save(commit=False)
    skill.profile = seeker_profile
    try:
        with transaction.atomic():
            skill.save()
    except IntegrityError as exc:
        raise Conflict(f"Skill '{name}' is already on your profile.") from exc

    logger.info("Skill added: user=%s skill=%s", request.user.username, skill.name)
    return JsonResponse(
        {"skill": {"id": skill.id, "name": skill.name, "proficiency_level": skill.proficiency_level},
         "completeness": profile_completeness(seeker_profile)},
        status=201,
    )


@require_POST
@jobseeker_required
@json_api
def add_experience(request):
    seeker_profile = get_jobseeker_profile(request.user)
    form = ExperienceForm(json_body(request))
    if not form.is_valid():
        return _form_errors(form)
    experience = form.save(commit=False)
    experience.profile = seeker_profile
    experience.save()
    logger.info("Experience added: user=%s id=%s", request.user.username, experience.id)
    return JsonResponse({"id": experience.id}, status=201)


@require_POST
@jobseeker_required
@json_api
def add_education(request):
    seeker_profile = get_jobseeker_profile(request.user)
    form = EducationForm(json_body(request))
    if not form.is_valid():
        return _form_errors(form)
    education = form.save(commit=False)
    education.profile = seeker_profile
    education.save()
    logger.info("Education added: user=%s id=%s", request.user.username, education.id)
    return JsonResponse({"id": education.id}, status=201)


def _delete_owned(request, model, item_id):
    seeker_profile = get_jobseeker_profile(request.user)
    item = get_object_or_404(model, id=item_id, profile=seeker_profile)
    item.delete()
    logger.info("%s deleted: user=%s id=%s", model.__name__, request.user.username, item_id)
    return JsonResponse({"ok": True, "completeness": profile_completeness(seeker_profile)})


@require_POST
@jobseeker_required
@json_api
def delete_skill(request, skill_id):
    return _delete_owned(request, Skill, skill_id)


@require_POST
@jobseeker_required
@json_api
def delete_experience(request, experience_id):
    return _delete_owned(request, Experience, experience_id)


@require_POST
@jobseeker_required
@json_api
def delete_education(request, education_id):
    return _delete_owned(request, Education, education_id)
