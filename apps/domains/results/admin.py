from django.contrib import admin

from apps.domains.results.models import AttemptAnswer, ExamAttempt, SessionReport


@admin.register(ExamAttempt)
class ExamAttemptAdmin(admin.ModelAdmin):
    list_display = ("id", "exam", "student", "attempt_index", "completed", "score", "started_at", "submitted_at")
    list_filter = ("completed",)
    search_fields = ("student__username", "exam__title")
    readonly_fields = ("started_at", "submitted_at", "score", "completed", "attempt_index")


@admin.register(AttemptAnswer)
class AttemptAnswerAdmin(admin.ModelAdmin):
    list_display = ("id", "attempt", "question", "answer_text", "is_correct", "updated_at")


@admin.register(SessionReport)
class SessionReportAdmin(admin.ModelAdmin):
    list_display = ("id", "attempt", "is_valid_test", "tab_switches", "window_switches", "finalized_at")
    list_filter = ("is_valid_test",)
