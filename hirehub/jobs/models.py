import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q, Value
from django.db.models.functions import Coalesce

from .scoring import clean_skills


class JobType(models.TextChoices):
    FULL_TIME = "full_time", "Full-time"
    PART_TIME = "part_time", "Part-time"
    CONTRACT = "contract", "Contract"
    INTERNSHIP = "internship", "Internship"
    REMOTE = "remote", "Remote"


class JobStatus(models.TextChoices):
    ACTIVE = "active", "Active"
    CLOSED = "closed", "Closed"
    DRAFT = "draft", "Draft"


class ApplicationStatus(models.TextChoices):
    SUBMITTED = "submitted", "Submitted"
    SHORTLISTED = "shortlisted", "Shortlisted"
    INTERVIEWING = "interviewing", "Interviewing"
    OFFERED = "offered", "Offered"
    REJECTED = "rejected", "Rejected"


class InterviewMode(models.TextChoices):
    VIDEO = "video", "Video call"
    PHONE = "phone", "Phone"
    ONSITE = "onsite", "On-site"


class JobQuerySet(models.QuerySet):
    def recent(self):
        return self.order_by("-created_at", "-id")

    def active(self):
        return self.filter(status=JobStatus.ACTIVE)

    def visible_to(self, user):
        """Public callers see active jobs, HR sees their own postings, admins see everything."""
        role = getattr(user, "role", None) if getattr(user, "is_authenticated", False) else None
        if role == "admin":
            return self
        if role == "hr":
            return self.filter(created_by=user)
        return self.active()

    def search(self, *, q=None, location=None, job_type=None):
        qs = self
        if q:
            qs = qs.filter(Q(title__icontains=q) | Q(description__icontains=q))
        if location:
            qs = qs.filter(location__icontains=location)
        if job_type:
            qs = qs.filter(job_type=job_type)
        return qs


class Job(models.Model):
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="jobs")
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    location = models.CharField(max_length=255, blank=True)
    job_type = models.CharField(max_length=20, choices=JobType.choices, default=JobType.FULL_TIME)
    required_skills = models.JSONField(default=list, blank=True)
    experience_min = models.PositiveIntegerField(blank=True, null=True)
    experience_max = models.PositiveIntegerField(blank=True, null=True)
    salary_min = models.PositiveIntegerField(blank=True, null=True)
    salary_max = models.PositiveIntegerField(blank=True, null=True)
    status = models.CharField(max_length=20, choices=JobStatus.choices, default=JobStatus.ACTIVE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = JobQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return self.title

    def clean(self):
        errors = {}
        if (
            self.experience_min is not None
            and self.experience_max is not None
            and self.experience_min > self.experience_max
        ):
            errors["experience_max"] = "Maximum experience must be greater than or equal to minimum experience."
        if self.salary_min is not None and self.salary_max is not None and self.salary_min > self.salary_max:
            errors["salary_max"] = "Maximum salary must be greater than or equal to minimum salary."
        if errors:
            raise ValidationError(errors)

    def skills_list(self) -> list[str]:
        return clean_skills(self.required_skills)

    def is_owned_by(self, user) -> bool:
        return self.created_by_id == getattr(user, "pk", None)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "location": self.location,
            "job_type": self.job_type,
            "required_skills": self.skills_list(),
            "experience_min": self.experience_min,
            "experience_max": self.experience_max,
            "salary_min": self.salary_min,
            "salary_max": self.salary_max,
            "status": self.status,
            "created_by": self.created_by_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class Interviewer(models.Model):
    name = models.CharField(max_length=150)
    email = models.EmailField(unique=True)
    timezone = models.CharField(max_length=64, blank=True)
    is_active = models.BooleanField(default=True)
    last_scheduled_at = models.DateTimeField(blank=True, null=True)
    last_scheduled_timezone = models.CharField(max_length=64, blank=True)

    class Meta:
        ordering = ["name", "id"]

    def __str__(self):
        return self.name

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "timezone": self.timezone,
            "last_scheduled_at": self.last_scheduled_at.isoformat() if self.last_scheduled_at else None,
        }


class JobApplicationQuerySet(models.QuerySet):
    def for_applicant(self, user):
        """Applications made while logged in, plus earlier ones sent with the same email."""
        return self.filter(Q(applicant=user) | Q(email__iexact=user.email))

    def manageable_by(self, user):
        if getattr(user, "role", None) == "admin":
            return self
        return self.filter(job__created_by=user)

    def ranked(self):
        """Best match first (missing score counts as 0), newest first on ties."""
        return self.order_by(
            Coalesce("resume_match_score", Value(0)).desc(),
            "-created_at",
            "-id",
        )


class JobApplication(models.Model):
    job = models.ForeignKey(Job, on_delete=models.CASCADE, related_name="applications")
    applicant = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="applications",
        blank=True,
        null=True,
    )
    name = models.CharField(max_length=150)
    email = models.EmailField()
    phone = models.CharField(max_length=30, blank=True)
    skills = models.JSONField(default=list, blank=True)
    resume = models.FileField(upload_to="applications/", blank=True)
    cover_letter = models.TextField(blank=True, null=True)
    resume_match_score = models.PositiveSmallIntegerField(blank=True, null=True)
    status = models.CharField(max_length=20, choices=ApplicationStatus.choices, default=ApplicationStatus.SUBMITTED)
    application_token = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Interview scheduling
    scheduled_at = models.DateTimeField(blank=True, null=True)
    interviewer = models.ForeignKey(
        Interviewer, on_delete=models.SET_NULL, related_name="applications", blank=True, null=True
    )
    meeting_link = models.URLField(blank=True)
    interview_mode = models.CharField(max_length=20, choices=InterviewMode.choices, blank=True)
    interview_duration_minutes = models.PositiveIntegerField(blank=True, null=True)
    interviewer_notes = models.TextField(blank=True)
    interview_sent_at = models.DateTimeField(blank=True, null=True)
    interview_sent_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="scheduled_interviews",
        blank=True,
        null=True,
    )

    # Assessment link
    test_token = models.CharField(max_length=64, blank=True)
    test_sent_at = models.DateTimeField(blank=True, null=True)

    objects = JobApplicationQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.UniqueConstraint(fields=["job", "email"], name="uniq_application_per_job_email"),
        ]

    def __str__(self):
        return f"{self.name} → {self.job.title}"

    def status_label(self) -> str:
        """Human label; unknown stored values are shown verbatim."""
        try:
            return ApplicationStatus(self.status).label
        except ValueError:
            return self.status

    def to_dict(self, *, include_interview: bool = True) -> dict:
        data = {
            "id": self.id,
            "job_id": self.job_id,
            "applicant_id": self.applicant_id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "skills": list(self.skills or []),
            "resume": self.resume.url if self.resume else None,
            "cover_letter": self.cover_letter,
            "resume_match_score": self.resume_match_score,
            "status": self.status,
            "status_label": self.status_label(),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_interview:
            data.update(
                {
                    "scheduled_at": self.scheduled_at.isoformat() if self.scheduled_at else None,
                    "interviewer_id": self.interviewer_id,
                    "meeting_link": self.meeting_link,
                    "interview_mode": self.interview_mode,
                    "interview_duration_minutes": self.interview_duration_minutes,
                    "interviewer_notes": self.interviewer_notes,
                    "test_sent_at": self.test_sent_at.isoformat() if self.test_sent_at else None,
                }
            )
        return data


class ApplicationEvent(models.Model):
    application = models.ForeignKey(JobApplication, on_delete=models.CASCADE, related_name="events")
    status = models.CharField(max_length=20)
    note = models.CharField(max_length=255, blank=True, null=True)
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, related_name="+", blank=True, null=True
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]

    def __str__(self):
        return f"{self.application_id}: {self.status}"


class SavedJob(models.Model):
    jobseeker = models.ForeignKey("accounts.JobSeekerProfile", on_delete=models.CASCADE, related_name="saved_jobs")
    job = models.ForeignKey(Job, on_delete=models.CASCADE, related_name="saved_by")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.UniqueConstraint(fields=["jobseeker", "job"], name="uniq_saved_job_per_seeker"),
        ]

    def __str__(self):
        return f"{self.jobseeker} saved {self.job}"
