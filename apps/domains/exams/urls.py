# apps/domains/exams/urls.py
from django.urls import path
from rest_framework.routers import SimpleRouter

from .views.exam_view import ExamViewSet
from .views.question_view import ExamQuestionsView

router = SimpleRouter()
router.register("", ExamViewSet, basename="exam")

urlpatterns = [
    path("<int:exam_id>/questions/", ExamQuestionsView.as_view(), name="exam-questions"),
] + router.urls
