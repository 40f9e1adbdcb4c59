from django.db import models
from accounts.models import JobSeekerProfile


class Resume(models.Model):
    jobseeker = models.ForeignKey(JobSeekerProfile, on_delete=models.CASCADE, related_name="resumes")
    file = models.FileField(upload_to="resumes/")
    title = models.CharField(max_length=200, blank=True)  # optional title for the resume
    skills = models.JSONField(default=list, blank=True)
    education = models.CharField(max_length=255, blank=True)
    parsed_data = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        name = getattr(self.jobseeker, "full_name", None) or self.jobseeker.user.username
        return f"{name} - {self.title or 'Resume'}"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "file": self.file.url if self.file else None,
            "skills": list(self.skills or []),
            "education": self.education,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
