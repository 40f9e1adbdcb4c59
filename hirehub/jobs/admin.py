from django.contrib import admin

from .models import Job, JobApplication, Interviewer, ApplicationEvent, SavedJob


@admin.register(Job)
class JobAdmin(admin.ModelAdmin):
    list_display = ("title", "created_by", "job_type", "status", "created_at")
    list_filter = ("status", "job_type")
    search_fields = ("title", "description", "location")


@admin.register(JobApplication)
class JobApplicationAdmin(admin.ModelAdmin):
    list_display = ("name", "email", "job", "status", "resume_match_score", "created_at")
    list_filter = ("status",)
    search_fields = ("name", "email", "job__title")
    readonly_fields = ("application_token", "test_token", "test_sent_at", "interview_sent_at")


admin.site.register(Interviewer)
admin.site.register(ApplicationEvent)


@admin.register(SavedJob)
class SavedJobAdmin(admin.ModelAdmin):
    list_display = ("jobseeker", "job", "created_at")
    search_fields = ("job__title", "jobseeker__user__username")
