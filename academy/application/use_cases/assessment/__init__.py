"""
Assessment use cases - 응시 생명주기 (Ledger / AnswerStore / Proctoring / Result)
"""
from academy.application.use_cases.assessment.attempt_ledger import (
    AttemptLedger,
    BlockReason,
    Decision,
    Resolution,
    resolve_attempt,
)
from academy.application.use_cases.assessment.answer_store import AnswerStore
from academy.application.use_cases.assessment.event_channel import ProctoringEvent, ProctoringEventChannel
from academy.application.use_cases.assessment.proctoring_aggregator import (
    LiveCounters,
    ProctoringAggregator,
    ReportStatus,
    SessionReportLookup,
)
from academy.application.use_cases.assessment.result_projection import project
from academy.application.use_cases.assessment.service import (
    AssessmentService,
    AttemptState,
    QuestionView,
    public_question,
)

__all__ = [
    "AttemptLedger",
    "BlockReason",
    "Decision",
    "Resolution",
    "resolve_attempt",
    "AnswerStore",
    "ProctoringEvent",
    "ProctoringEventChannel",
    "LiveCounters",
    "ProctoringAggregator",
    "ReportStatus",
    "SessionReportLookup",
    "project",
    "AssessmentService",
    "AttemptState",
    "QuestionView",
    "public_question",
]
