# PATH: apps/domains/exams/serializers/question.py
"""
문항 serializer (도메인 Question / QuestionView)

- QuestionStaffSerializer : 시험 관리자용 (정답 키 포함)
- QuestionPublicSerializer: 학생용 (정답 키 필드 자체가 없음)
"""
from rest_framework import serializers


class QuestionPublicSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    number = serializers.IntegerField()
    type = serializers.CharField(source="type.value")
    text = serializers.CharField()
    marks = serializers.IntegerField()
    negative_marks = serializers.IntegerField()
    options = serializers.ListField(child=serializers.CharField())


class QuestionStaffSerializer(QuestionPublicSerializer):
    correct_option = serializers.CharField(allow_null=True)
    correct_options = serializers.SerializerMethodField()
    reference_answer = serializers.CharField(allow_null=True)

    def get_correct_options(self, obj):
        return sorted(obj.correct_options)
