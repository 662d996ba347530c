from django.urls import path
from .views import BidCreateView, JobBidsView, MyBidsView, BidAcceptView, BidRejectView

urlpatterns = [
    path('bids/', BidCreateView.as_view(), name='bid_create'),
    path('bids/job/<int:job_id>/bids/', JobBidsView.as_view(), name='job_bids'),
    path('bids/my-bids/', MyBidsView.as_view(), name='my_bids'),
    path('bids/<int:id>/accept/', BidAcceptView.as_view(), name='bid_accept'),
    path('bids/<int:id>/reject/', BidRejectView.as_view(), name='bid_reject'),
]
