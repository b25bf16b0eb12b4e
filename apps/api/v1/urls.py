# apps/api/v1/urls.py
from django.urls import path, include

urlpatterns = [
    # =========================
    # Domain APIs
    # =========================
    path("exams/", include("apps.domains.exams.urls")),
    path("results/", include("apps.domains.results.urls")),
]
