import logging
from functools import wraps

from django.http import JsonResponse

from .models import User, JobSeekerProfile

logger = logging.getLogger(__name__)


def role_required(*roles: str):
    """Ensure the caller is logged in and has one of the given roles."""
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            user = request.user
            if not user.is_authenticated:
                return JsonResponse({"error": "Authentication required."}, status=401)
            if getattr(user, "role", None) not in roles:
                logger.warning("Access denied: user=%s role=%s view=%s", user.username, user.role, view_func.__name__)
                return JsonResponse({"error": "Access denied."}, status=403)
            return view_func(request, *args, **kwargs)
        return _wrapped
    return decorator


hr_required = role_required(User.Role.HR, User.Role.ADMIN)
jobseeker_required = role_required(User.Role.JOB_SEEKER)


def get_jobseeker_profile(user):
    profile, created = JobSeekerProfile.objects.get_or_create(
        user=user,
        defaults={"full_name": user.get_full_name() or user.username},
    )
    if created:
        logger.info("Job seeker profile created: user=%s", user.username)
    return profile
