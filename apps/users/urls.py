from django.urls import path
from rest_framework.authtoken.views import obtain_auth_token
from .views import CurrentUserView

urlpatterns = [
    path('user/token/', obtain_auth_token, name='user_token'),
    path('user/profile/', CurrentUserView.as_view(), name='user_profile'),
]
