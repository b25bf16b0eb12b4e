from rest_framework import serializers

from apps.domains.exams.models import Exam


class ExamSerializer(serializers.ModelSerializer):
    question_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Exam
        fields = [
            "id",
            "title",
            "description",
            "college",
            "created_by",
            "total_marks",
            "start_time",
            "end_time",
            "duration_minutes",
            "max_attempts",
            "proctored",
            "published",
            "max_violations",
            "question_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
