"""
GET /exams/{exam_id}/questions/

- 시험 관리자: 정답 키 포함
- 학생: 공개된 시험만, 정답 키 없음 (필드 자체를 내리지 않음)
"""
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from academy.domain.assessment.entities import Question
from apps.core.permissions import CanViewQuestions
from apps.core.session import SessionContextMixin
from apps.domains.exams.serializers.question import QuestionPublicSerializer, QuestionStaffSerializer
from apps.domains.results.services.assessment_service import get_assessment_service


class ExamQuestionsView(SessionContextMixin, APIView):
    permission_classes = [IsAuthenticated, CanViewQuestions]

    def get(self, request, exam_id: int):
        questions = get_assessment_service().list_questions(int(exam_id), self.session)

        if questions and isinstance(questions[0], Question):
            return Response(QuestionStaffSerializer(questions, many=True).data)
        return Response(QuestionPublicSerializer(questions, many=True).data)
