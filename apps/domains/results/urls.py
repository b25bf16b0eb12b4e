# PATH: apps/domains/results/urls.py

from django.urls import path

from apps.domains.results.views.assessment_views import (
    AttemptAnswerView,
    AttemptDeleteView,
    AttemptResultView,
    AttemptStateView,
    AttemptSubmitView,
    ExamAttemptStartView,
    MyExamAttemptStateView,
    ProctoringEventView,
    ResultListView,
    SessionReportView,
)

urlpatterns = [
    # ======================================================
    # 결과 목록 (역할 scope)
    # ======================================================
    path("", ResultListView.as_view(), name="result-list"),

    # ======================================================
    # 응시 시작/재개
    # ======================================================
    path(
        "exams/<int:exam_id>/attempts/",
        ExamAttemptStartView.as_view(),
        name="exam-attempt-start",
    ),
    path(
        "exams/<int:exam_id>/attempts/me/state/",
        MyExamAttemptStateView.as_view(),
        name="exam-attempt-my-state",
    ),

    # ======================================================
    # Attempt 단위
    # ======================================================
    path("attempts/<int:attempt_id>/", AttemptDeleteView.as_view(), name="attempt-delete"),
    path("attempts/<int:attempt_id>/state/", AttemptStateView.as_view(), name="attempt-state"),
    path("attempts/<int:attempt_id>/answers/", AttemptAnswerView.as_view(), name="attempt-answer"),
    path(
        "attempts/<int:attempt_id>/proctoring-events/",
        ProctoringEventView.as_view(),
        name="attempt-proctoring-event",
    ),
    path("attempts/<int:attempt_id>/submit/", AttemptSubmitView.as_view(), name="attempt-submit"),
    path("attempts/<int:attempt_id>/result/", AttemptResultView.as_view(), name="attempt-result"),
    path(
        "attempts/<int:attempt_id>/session-report/",
        SessionReportView.as_view(),
        name="attempt-session-report",
    ),
]
