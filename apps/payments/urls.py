from django.urls import path
from .views import MyPaymentsView

urlpatterns = [
    path('payments/me/', MyPaymentsView.as_view(), name='my_payments'),
]
