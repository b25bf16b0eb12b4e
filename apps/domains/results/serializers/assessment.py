# PATH: apps/domains/results/serializers/assessment.py
"""
응시 / 결과 응답 serializer - 도메인 dataclass (academy.*) 를 그대로 직렬화

입력 serializer 는 형태만 검사하고, 의미 검사(답안 형태/이벤트 타입)는 도메인에서.
"""
from __future__ import annotations

from rest_framework import serializers


# ======================================================
# Input
# ======================================================

class AnswerInputSerializer(serializers.Serializer):
    question_id = serializers.IntegerField()
    # "B" / ["A", "C"] / "A,C" / 자유 텍스트
    value = serializers.JSONField()


class ProctoringEventInputSerializer(serializers.Serializer):
    event_type = serializers.CharField()
    # 음수/0 은 도메인에서 ValidationError
    count = serializers.IntegerField(required=False, default=1)


# ======================================================
# Output
# ======================================================

class AttemptSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    exam_id = serializers.IntegerField()
    student_id = serializers.IntegerField()
    attempt_number = serializers.IntegerField()
    started_at = serializers.DateTimeField()
    submitted_at = serializers.DateTimeField(allow_null=True)
    updated_at = serializers.DateTimeField(allow_null=True)
    completed = serializers.BooleanField()


class ResolutionSerializer(serializers.Serializer):
    status = serializers.CharField(source="decision.value")
    reason = serializers.SerializerMethodField()
    message = serializers.CharField()
    details = serializers.DictField()
    attempt = AttemptSerializer(allow_null=True)

    def get_reason(self, obj):
        return obj.reason.value if obj.reason is not None else None


class QuestionViewSerializer(serializers.Serializer):
    """학생용 문항 (정답 키 없음)."""
    id = serializers.IntegerField()
    number = serializers.IntegerField()
    type = serializers.CharField(source="type.value")
    text = serializers.CharField()
    marks = serializers.IntegerField()
    negative_marks = serializers.IntegerField()
    options = serializers.ListField(child=serializers.CharField())


class AttemptStateSerializer(serializers.Serializer):
    attempt = AttemptSerializer()
    proctored = serializers.BooleanField(source="exam.proctored")
    duration_minutes = serializers.IntegerField(source="exam.duration_minutes", allow_null=True)
    max_violations = serializers.IntegerField(source="exam.max_violations")
    questions = QuestionViewSerializer(many=True)
    answers = serializers.SerializerMethodField()

    def get_answers(self, obj):
        # JSON object key 는 문자열
        return {str(qid): text for qid, text in obj.answers.items()}


class AnswerSerializer(serializers.Serializer):
    attempt_id = serializers.IntegerField()
    question_id = serializers.IntegerField()
    answer_text = serializers.CharField(allow_blank=True)
    updated_at = serializers.DateTimeField(allow_null=True)


class LiveCountersSerializer(serializers.Serializer):
    attempt_id = serializers.IntegerField()
    counters = serializers.DictField(child=serializers.IntegerField())
    total = serializers.IntegerField()
    max_violations = serializers.IntegerField()
    max_violations_reached = serializers.BooleanField()


class ResultSerializer(serializers.Serializer):
    attempt_id = serializers.IntegerField()
    exam_id = serializers.IntegerField(source="exam.id")
    exam_title = serializers.CharField(source="exam.title")
    student_id = serializers.IntegerField()
    attempt_number = serializers.IntegerField()
    score = serializers.IntegerField()
    total_marks = serializers.IntegerField()
    percentage = serializers.FloatField()
    display_percentage = serializers.FloatField()
    started_at = serializers.DateTimeField(allow_null=True)
    submitted_at = serializers.DateTimeField(allow_null=True)
    completed = serializers.BooleanField()
    status = serializers.CharField(source="status.value")
    is_valid_test = serializers.BooleanField()
    invalid_reason = serializers.CharField(allow_null=True)
    counters = serializers.DictField(child=serializers.IntegerField())


class SessionReportSerializer(serializers.Serializer):
    attempt_id = serializers.IntegerField()
    heads_turned = serializers.IntegerField()
    head_tilts = serializers.IntegerField()
    look_aways = serializers.IntegerField()
    face_visibility_issues = serializers.IntegerField()
    multiple_people = serializers.IntegerField()
    mobile_detected = serializers.IntegerField()
    audio_incidents = serializers.IntegerField()
    tab_switches = serializers.IntegerField()
    window_switches = serializers.IntegerField()
    total_violations = serializers.IntegerField()
    is_valid_test = serializers.BooleanField(allow_null=True)
    invalid_reason = serializers.CharField(allow_null=True)
    finalized_at = serializers.DateTimeField(allow_null=True)
