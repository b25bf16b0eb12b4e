from django.contrib import admin

from apps.domains.exams.models import Exam, ExamQuestion


class ExamQuestionInline(admin.TabularInline):
    model = ExamQuestion
    extra = 0
    fields = (
        "number",
        "question_type",
        "text",
        "marks",
        "negative_marks",
        "option_a",
        "option_b",
        "option_c",
        "option_d",
        "correct_option",
        "correct_options",
        "reference_answer",
    )


@admin.register(Exam)
class ExamAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "college", "start_time", "end_time", "max_attempts", "proctored", "published")
    list_filter = ("published", "proctored", "college")
    search_fields = ("title",)
    inlines = [ExamQuestionInline]
