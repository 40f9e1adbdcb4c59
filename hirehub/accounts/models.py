from django.contrib.auth.models import AbstractUser
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models.functions import Lower


class User(AbstractUser):
    class Role(models.TextChoices):
        HR = "hr", "HR"
        ADMIN = "admin", "Admin"
        JOB_SEEKER = "job_seeker", "Job Seeker"

    email = models.EmailField(unique=True)
    role = models.CharField(max_length=20, choices=Role.choices, blank=True)

    @property
    def is_hr_or_admin(self) -> bool:
        return self.role in {self.Role.HR, self.Role.ADMIN}


class JobSeekerProfile(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="seeker_profile")
    full_name = models.CharField(max_length=150, blank=True)
    phone = models.CharField(max_length=30, blank=True)
    location = models.CharField(max_length=255, blank=True)
    bio = models.TextField(blank=True)
    job_title = models.CharField(max_length=255, blank=True)  # current job title
    company_name = models.CharField(max_length=255, blank=True)  # current company
    school_name = models.CharField(max_length=255, blank=True)
    degree = models.CharField(max_length=255, blank=True)
    resume = models.FileField(upload_to="resumes/", blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.full_name or self.user.username

    def skill_names(self) -> list[str]:
        return [s.name for s in self.skills.all()]


class Skill(models.Model):
    class Proficiency(models.TextChoices):
        BEGINNER = "beginner", "Beginner"
        INTERMEDIATE = "intermediate", "Intermediate"
        ADVANCED = "advanced", "Advanced"
        EXPERT = "expert", "Expert"

    profile = models.ForeignKey(JobSeekerProfile, on_delete=models.CASCADE, related_name="skills")
    name = models.CharField(max_length=100)
    proficiency_level = models.CharField(
        max_length=20, choices=Proficiency.choices, default=Proficiency.INTERMEDIATE
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        constraints = [
            models.UniqueConstraint(Lower("name"), "profile", name="uniq_skill_per_profile_ci"),
        ]

    def __str__(self):
        return self.name


class Experience(models.Model):
    profile = models.ForeignKey(JobSeekerProfile, on_delete=models.CASCADE, related_name="experience")
    title = models.CharField(max_length=255)
    company = models.CharField(max_length=255)
    location = models.CharField(max_length=255, blank=True)
    start_date = models.DateField(blank=True, null=True)
    end_date = models.DateField(blank=True, null=True)
    is_current = models.BooleanField(default=False)
    description = models.TextField(blank=True)

    class Meta:
        ordering = ["-start_date", "-id"]

    def clean(self):
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValidationError({"end_date": "End date cannot be before start date."})

    def __str__(self):
        return f"{self.title} @ {self.company}"


class Education(models.Model):
    profile = models.ForeignKey(JobSeekerProfile, on_delete=models.CASCADE, related_name="education")
    school = models.CharField(max_length=255)
    degree = models.CharField(max_length=255, blank=True)
    field_of_study = models.CharField(max_length=255, blank=True)
    start_year = models.PositiveIntegerField(blank=True, null=True)
    end_year = models.PositiveIntegerField(blank=True, null=True)

    class Meta:
        ordering = ["-end_year", "-id"]

    def clean(self):
        if self.start_year and self.end_year and self.start_year > self.end_year:
            raise ValidationError({"end_year": "End year cannot be before start year."})

    def __str__(self):
        return f"{self.degree or 'Study'} - {self.school}"
