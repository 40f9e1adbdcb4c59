from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from .models import User, JobSeekerProfile, Skill, Experience, Education


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    # show extra fields in admin
    fieldsets = DjangoUserAdmin.fieldsets + (
        ("HireHub", {"fields": ("role",)}),
    )
    add_fieldsets = DjangoUserAdmin.add_fieldsets + (
        ("HireHub", {"fields": ("email", "role")}),
    )
    list_display = ("username", "email", "role", "is_active", "is_staff")
    list_filter = ("role", "is_active", "is_staff")


class SkillInline(admin.TabularInline):
    model = Skill
    extra = 0


@admin.register(JobSeekerProfile)
class JobSeekerProfileAdmin(admin.ModelAdmin):
    list_display = ("full_name", "user", "location", "job_title", "updated_at")
    search_fields = ("full_name", "user__username", "user__email")
    inlines = [SkillInline]


admin.site.register(Experience)
admin.site.register(Education)
