from django.urls import path
from . import views

urlpatterns = [
    path('', views.job_list, name='job_list'),
    path('create/', views.create_job, name='create_job'),
    path('<int:job_id>/', views.job_detail, name='job_detail'),
    path('<int:job_id>/edit/', views.edit_job, name='edit_job'),
    path('<int:job_id>/match-preview/', views.match_preview, name='match_preview'),
    path('<int:job_id>/apply/', views.apply_job, name='apply_job'),
    path('applications/', views.application_list, name='application_list'),
    path('applications/bulk-status/', views.bulk_update_status, name='bulk_update_status'),
    path('application/<int:application_id>/', views.application_detail, name='application_detail'),
    path('application/<int:application_id>/status/', views.update_application_status, name='update_application_status'),
    path('application/<int:application_id>/schedule/', views.schedule_interview, name='schedule_interview'),
    path('<int:job_id>/save/', views.toggle_saved_job, name='toggle_saved_job'),
    path('saved/', views.saved_jobs, name='saved_jobs'),
    path('my-applications/', views.my_applications, name='my_applications'),
    path('my-interviews/', views.my_interviews, name='my_interviews'),
    path('status/<uuid:token>/', views.application_status_lookup, name='application_status_lookup'),
    path('interviewers/', views.interviewer_list, name='interviewer_list'),
]
