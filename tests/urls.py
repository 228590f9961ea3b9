"""
URL configuration for testing django-techblog.
"""
from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("blogs/", include("techblog.urls")),
]
