# PATH: apps/domains/results/views/assessment_views.py
"""
응시 생명주기 API (AssessmentService facade 만 호출)

POST   /results/exams/{exam_id}/attempts/               시작 또는 재개 (BLOCKED 는 200)
GET    /results/exams/{exam_id}/attempts/me/state/      재개용 상태
GET    /results/attempts/{attempt_id}/state/
POST   /results/attempts/{attempt_id}/answers/
POST   /results/attempts/{attempt_id}/proctoring-events/
POST   /results/attempts/{attempt_id}/submit/
GET    /results/attempts/{attempt_id}/result/
GET    /results/attempts/{attempt_id}/session-report/
GET    /results/?exam_id=
DELETE /results/attempts/{attempt_id}/

도메인 오류 → HTTP 변환은 apps.api.common.exceptions 에서.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from academy.application.use_cases.assessment import Decision, ReportStatus
from academy.domain.assessment.errors import ValidationError
from apps.core.permissions import CanDeleteResults, CanTakeTests, CanViewResults
from apps.core.session import SessionContextMixin
from apps.domains.results.serializers.assessment import (
    AnswerInputSerializer,
    AnswerSerializer,
    AttemptStateSerializer,
    LiveCountersSerializer,
    ProctoringEventInputSerializer,
    ResolutionSerializer,
    ResultSerializer,
    SessionReportSerializer,
)
from apps.domains.results.services.assessment_service import get_assessment_service


class AssessmentAPIView(SessionContextMixin, APIView):
    permission_classes = [IsAuthenticated]

    @property
    def service(self):
        if not hasattr(self, "_service"):
            self._service = get_assessment_service()
        return self._service


# ======================================================
# 응시
# ======================================================

class ExamAttemptStartView(AssessmentAPIView):
    permission_classes = [IsAuthenticated, CanTakeTests]

    def post(self, request, exam_id: int):
        resolution = self.service.start_or_resume_test(int(exam_id), self.session)
        data = ResolutionSerializer(resolution).data

        if resolution.decision == Decision.START_NEW and resolution.attempt is not None:
            return Response(data, status=status.HTTP_201_CREATED)
        return Response(data, status=status.HTTP_200_OK)


class MyExamAttemptStateView(AssessmentAPIView):
    permission_classes = [IsAuthenticated, CanTakeTests]

    def get(self, request, exam_id: int):
        state = self.service.get_attempt_state_for_exam(int(exam_id), self.session)
        return Response(AttemptStateSerializer(state).data)


class AttemptStateView(AssessmentAPIView):
    permission_classes = [IsAuthenticated, CanTakeTests]

    def get(self, request, attempt_id: int):
        state = self.service.get_attempt_state(int(attempt_id), self.session)
        return Response(AttemptStateSerializer(state).data)


class AttemptAnswerView(AssessmentAPIView):
    permission_classes = [IsAuthenticated, CanTakeTests]

    def post(self, request, attempt_id: int):
        ser = AnswerInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        answer = self.service.answer_question(
            int(attempt_id),
            ser.validated_data["question_id"],
            ser.validated_data["value"],
            self.session,
        )
        return Response(AnswerSerializer(answer).data)


class ProctoringEventView(AssessmentAPIView):
    permission_classes = [IsAuthenticated, CanTakeTests]

    def post(self, request, attempt_id: int):
        ser = ProctoringEventInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        event_type = ser.validated_data["event_type"]
        count = ser.validated_data["count"]

        if self.service.event_channel is not None:
            queued = self.service.enqueue_proctoring_event(int(attempt_id), event_type, self.session, count)
            return Response({"queued": queued}, status=status.HTTP_202_ACCEPTED)

        live = self.service.report_proctoring_event(int(attempt_id), event_type, self.session, count)
        return Response(LiveCountersSerializer(live).data)


class AttemptSubmitView(AssessmentAPIView):
    permission_classes = [IsAuthenticated, CanTakeTests]

    def post(self, request, attempt_id: int):
        result = self.service.submit_test(int(attempt_id), self.session)
        return Response(ResultSerializer(result).data)


# ======================================================
# 결과
# ======================================================

class AttemptResultView(AssessmentAPIView):
    permission_classes = [IsAuthenticated, CanViewResults]

    def get(self, request, attempt_id: int):
        result = self.service.fetch_result(int(attempt_id), self.session)
        return Response(ResultSerializer(result).data)


class SessionReportView(AssessmentAPIView):
    permission_classes = [IsAuthenticated, CanViewResults]

    def get(self, request, attempt_id: int):
        lookup = self.service.fetch_session_report(int(attempt_id), self.session)

        if lookup.status == ReportStatus.NOT_APPLICABLE:
            return Response({
                "status": "not_applicable",
                "attempt_id": lookup.attempt_id,
                "detail": "This test is not proctored.",
            })

        data = SessionReportSerializer(lookup.report).data
        data["status"] = "available"
        return Response(data)


class ResultListView(AssessmentAPIView):
    permission_classes = [IsAuthenticated, CanViewResults]

    def get(self, request):
        raw = request.query_params.get("exam_id")
        exam_id = None
        if raw not in (None, ""):
            try:
                exam_id = int(raw)
            except ValueError:
                raise ValidationError("exam_id must be an integer.", code="invalid_exam_id")

        results = self.service.list_results(self.session, exam_id=exam_id)
        return Response(ResultSerializer(results, many=True).data)


class AttemptDeleteView(AssessmentAPIView):
    permission_classes = [IsAuthenticated, CanDeleteResults]

    def delete(self, request, attempt_id: int):
        self.service.delete_result(int(attempt_id), self.session)
        return Response(status=status.HTTP_204_NO_CONTENT)
