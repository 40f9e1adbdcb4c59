# Generated manually (jobs, applications, interview scheduling, timeline)
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Job",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                ("location", models.CharField(blank=True, max_length=255)),
                ("job_type", models.CharField(choices=[("full_time", "Full-time"), ("part_time", "Part-time"), ("contract", "Contract"), ("internship", "Internship"), ("remote", "Remote")], default="full_time", max_length=20)),
                ("required_skills", models.JSONField(blank=True, default=list)),
                ("experience_min", models.PositiveIntegerField(blank=True, null=True)),
                ("experience_max", models.PositiveIntegerField(blank=True, null=True)),
                ("salary_min", models.PositiveIntegerField(blank=True, null=True)),
                ("salary_max", models.PositiveIntegerField(blank=True, null=True)),
                ("status", models.CharField(choices=[("active", "Active"), ("closed", "Closed"), ("draft", "Draft")], default="active", max_length=20)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("created_by", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="jobs", to=settings.AUTH_USER_MODEL)),
            ],
            options={"ordering": ["-created_at", "-id"]},
        ),
        migrations.CreateModel(
            name="Interviewer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=150)),
                ("email", models.EmailField(max_length=254, unique=True)),
                ("timezone", models.CharField(blank=True, max_length=64)),
                ("is_active", models.BooleanField(default=True)),
                ("last_scheduled_at", models.DateTimeField(blank=True, null=True)),
                ("last_scheduled_timezone", models.CharField(blank=True, max_length=64)),
            ],
            options={"ordering": ["name", "id"]},
        ),
        migrations.CreateModel(
            name="JobApplication",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=150)),
                ("email", models.EmailField(max_length=254)),
                ("phone", models.CharField(blank=True, max_length=30)),
                ("skills", models.JSONField(blank=True, default=list)),
                ("resume", models.FileField(blank=True, upload_to="applications/")),
                ("cover_letter", models.TextField(blank=True, null=True)),
                ("resume_match_score", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("status", models.CharField(choices=[("submitted", "Submitted"), ("shortlisted", "Shortlisted"), ("interviewing", "Interviewing"), ("offered", "Offered"), ("rejected", "Rejected")], default="submitted", max_length=20)),
                ("application_token", models.UUIDField(default=uuid.uuid4, editable=False, unique=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("scheduled_at", models.DateTimeField(blank=True, null=True)),
                ("meeting_link", models.URLField(blank=True)),
                ("interview_mode", models.CharField(blank=True, choices=[("video", "Video call"), ("phone", "Phone"), ("onsite", "On-site")], max_length=20)),
                ("interview_duration_minutes", models.PositiveIntegerField(blank=True, null=True)),
                ("interviewer_notes", models.TextField(blank=True)),
                ("interview_sent_at", models.DateTimeField(blank=True, null=True)),
                ("test_token", models.CharField(blank=True, max_length=64)),
                ("test_sent_at", models.DateTimeField(blank=True, null=True)),
                ("applicant", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="applications", to=settings.AUTH_USER_MODEL)),
                ("interview_sent_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="scheduled_interviews", to=settings.AUTH_USER_MODEL)),
                ("interviewer", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="applications", to="jobs.interviewer")),
                ("job", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="applications", to="jobs.job")),
            ],
            options={"ordering": ["-created_at", "-id"]},
        ),
        migrations.AddConstraint(
            model_name="jobapplication",
            constraint=models.UniqueConstraint(fields=("job", "email"), name="uniq_application_per_job_email"),
        ),
        migrations.CreateModel(
            name="ApplicationEvent",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("status", models.CharField(max_length=20)),
                ("note", models.CharField(blank=True, max_length=255, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("actor", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("application", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="events", to="jobs.jobapplication")),
            ],
            options={"ordering": ["created_at", "id"]},
        ),
    ]
