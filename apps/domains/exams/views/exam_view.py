from django.db.models import Count, Q
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.permissions import IsAuthenticated
from rest_framework.viewsets import ReadOnlyModelViewSet

from apps.core.permissions import CanViewQuestions, user_capabilities
from apps.domains.exams.filters import ExamFilter
from apps.domains.exams.models import Exam
from apps.domains.exams.serializers.exam import ExamSerializer


class ExamViewSet(ReadOnlyModelViewSet):
    """
    시험 목록/상세 (조회 전용)

    - 전체 조회 권한: 전체
    - 시험 관리 권한: 소속 대학 시험 + 본인이 만든 시험
    - 학생: 공개된 소속 대학 시험
    """

    serializer_class = ExamSerializer
    permission_classes = [IsAuthenticated, CanViewQuestions]

    filter_backends = (DjangoFilterBackend, SearchFilter, OrderingFilter)
    filterset_class = ExamFilter
    search_fields = ["title", "description"]
    ordering_fields = ["start_time", "end_time", "title", "created_at"]

    def get_queryset(self):
        user = self.request.user
        caps = user_capabilities(user)

        qs = Exam.objects.all().annotate(question_count=Count("questions"))

        if caps.can_view_all_results or caps.can_manage_colleges:
            return qs

        in_college = Q(college__isnull=True) | Q(college_id=user.college_id)
        if caps.can_manage_tests:
            return qs.filter(in_college | Q(created_by_id=user.id))

        return qs.filter(in_college, published=True)
