import re

from django import forms

from resumes.extraction import validate_resume_upload, ResumeParseError

from .constants import BULK_STATUS_TARGETS, DEFAULT_INTERVIEW_DURATION_MINUTES
from .models import Job, Interviewer, ApplicationStatus, InterviewMode
from .scoring import clean_skills

_PHONE_RE = re.compile(r"^[\d\s\-\+\(\)]+$")


class SkillListField(forms.Field):
    """Accepts a list of strings or a comma-separated string."""

    def to_python(self, value):
        if value in self.empty_values:
            return []
        if not isinstance(value, (str, list, tuple)):
            raise forms.ValidationError("Enter skills as a list or a comma-separated string.")
        return clean_skills(value)


class IdListField(forms.Field):
    def to_python(self, value):
        if value in self.empty_values:
            return []
        if isinstance(value, str):
            value = [v for v in value.split(",") if v.strip()]
        if not isinstance(value, (list, tuple)):
            raise forms.ValidationError("Enter a list of ids.")
        ids = []
        for raw in value:
            try:
                ids.append(int(raw))
            except (TypeError, ValueError):
                raise forms.ValidationError(f"Invalid id: {raw!r}")
        # keep caller order, drop repeats
        return list(dict.fromkeys(ids))


class JobForm(forms.ModelForm):
    required_skills = SkillListField(required=False)

    class Meta:
        model = Job
        fields = [
            "title",
            "description",
            "location",
            "job_type",
            "required_skills",
            "experience_min",
            "experience_max",
            "salary_min",
            "salary_max",
            "status",
        ]


def job_form_data(job: Job) -> dict:
    """Current values of a job in JobForm input shape, for partial edits."""
    return {
        "title": job.title,
        "description": job.description,
        "location": job.location,
        "job_type": job.job_type,
        "required_skills": job.skills_list(),
        "experience_min": job.experience_min,
        "experience_max": job.experience_max,
        "salary_min": job.salary_min,
        "salary_max": job.salary_max,
        "status": job.status,
    }


class JobApplicationForm(forms.Form):
    name = forms.CharField(max_length=150)
    email = forms.EmailField()
    phone = forms.CharField(max_length=30)
    skills = SkillListField(required=False)
    cover_letter = forms.CharField(required=False, widget=forms.Textarea)
    resume = forms.FileField()

    def clean_name(self):
        return self.cleaned_data["name"].strip()

    def clean_email(self):
        return self.cleaned_data["email"].strip().lower()

    def clean_phone(self):
        phone = (self.cleaned_data.get("phone") or "").strip()
        if not _PHONE_RE.match(phone) or len(phone) < 10:
            raise forms.ValidationError("Please provide a valid phone number.")
        return phone

    def clean_resume(self):
        resume = self.cleaned_data["resume"]
        try:
            validate_resume_upload(resume)
        except ResumeParseError as exc:
            raise forms.ValidationError(exc.user_message, code=exc.code)
        return resume


class MatchPreviewForm(forms.Form):
    skills = SkillListField(required=False)


class StatusForm(forms.Form):
    status = forms.ChoiceField(choices=ApplicationStatus.choices)


class BulkStatusForm(forms.Form):
    application_ids = IdListField()
    status = forms.ChoiceField(
        choices=[(s.value, s.label) for s in ApplicationStatus if s.value in BULK_STATUS_TARGETS]
    )


class ScheduleInterviewForm(forms.Form):
    scheduled_at = forms.DateTimeField(
        error_messages={
            "required": "Please pick an interview date and time.",
            "invalid": "Invalid interview date/time.",
        }
    )
    interviewer = forms.ModelChoiceField(queryset=Interviewer.objects.filter(is_active=True), required=False)
    meeting_link = forms.URLField(required=False, assume_scheme="https")
    interview_mode = forms.ChoiceField(choices=[("", "---")] + InterviewMode.choices, required=False)
    interview_duration_minutes = forms.IntegerField(min_value=1, max_value=8 * 60, required=False)
    interviewer_notes = forms.CharField(required=False, widget=forms.Textarea)
    send_assessment = forms.BooleanField(required=False)

    def clean_interview_duration_minutes(self):
        value = self.cleaned_data.get("interview_duration_minutes")
        return DEFAULT_INTERVIEW_DURATION_MINUTES if value is None else value
