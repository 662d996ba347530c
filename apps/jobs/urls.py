from django.urls import path
from .views import (
    JobCreateView, JobListView, JobDetailView, JobUpdateView, JobCloseView,
    JobCompleteView, PostedJobsView, MyApplicationsView, AvailableJobsView, JobApplyView
)

urlpatterns = [
    path('job/create/', JobCreateView.as_view(), name='job_create'),
    path('job/all/', JobListView.as_view(), name='job_list'),
    path('job/posted/me/', PostedJobsView.as_view(), name='job_posted_me'),
    path('job/applications/me/', MyApplicationsView.as_view(), name='job_applications_me'),
    path('job/update/<int:id>/', JobUpdateView.as_view(), name='job_update'),
    path('job/<int:id>/', JobDetailView.as_view(), name='job_details'),
    path('job/<int:id>/close/', JobCloseView.as_view(), name='job_close'),
    path('job/<int:id>/complete/', JobCompleteView.as_view(), name='job_complete'),
    path('job/<int:id>/apply/', JobApplyView.as_view(), name='job_apply'),
    path('jobs/open/apply/', AvailableJobsView.as_view(), name='jobs_open_apply'),
]
