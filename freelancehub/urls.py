from django.contrib import admin
from django.urls import path, include
from drf_yasg.views import get_schema_view
from drf_yasg import openapi
from rest_framework import permissions

schema_view = get_schema_view(
    openapi.Info(
        title="FreelanceHub API",
        default_version='v1',
        description="API for the FreelanceHub marketplace: jobs, bids, payments and chats",
    ),
    public=True,
    permission_classes=[permissions.AllowAny],
)

urlpatterns = [
    path('', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('admin/', admin.site.urls),
    path('', include('apps.users.urls')),
    path('', include('apps.jobs.urls')),
    path('', include('apps.jobs.bid_urls')),
    path('', include('apps.payments.urls')),
    path('', include('apps.chats.urls')),
]
