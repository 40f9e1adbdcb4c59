from django.urls import path
from . import views

urlpatterns = [
    path("csrf/", views.csrf_token, name="csrf_token"),
    path("register/", views.register_jobseeker, name="register_jobseeker"),
    path("login/", views.user_login, name="login"),
    path("logout/", views.user_logout, name="logout"),
    path("profile/", views.profile, name="profile"),
    path("profile/skills/", views.add_skill, name="add_skill"),
    path("profile/skills/<int:skill_id>/delete/", views.delete_skill, name="delete_skill"),
    path("profile/experience/", views.add_experience, name="add_experience"),
    path("profile/experience/<int:experience_id>/delete/", views.delete_experience, name="delete_experience"),
    path("profile/education/", views.add_education, name="add_education"),
    path("profile/education/<int:education_id>/delete/", views.delete_education, name="delete_education"),
]
