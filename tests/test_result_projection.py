from datetime import timedelta

from academy.application.use_cases.assessment import project
from academy.domain.assessment.entities import AttemptStatus, SessionReport
from tests.factories import BASE_TIME, make_attempt, make_exam


def _submitted(score, **overrides):
    return make_attempt(completed=True, score=score, submitted_at=BASE_TIME + timedelta(minutes=30), **overrides)


class TestPercentage:
    def test_percentage_of_total_marks(self):
        assert project(_submitted(7), make_exam(total_marks=10)).percentage == 70.0
        assert project(_submitted(1), make_exam(total_marks=3)).percentage == 33.33

    def test_zero_total_marks(self):
        result = project(_submitted(5), make_exam(total_marks=0))
        assert result.percentage == 0.0
        assert result.display_percentage == 0.0

    def test_display_is_clamped_but_score_is_kept(self):
        result = project(_submitted(12), make_exam(total_marks=10))
        assert result.score == 12
        assert result.percentage == 120.0
        assert result.display_percentage == 100.0


class TestValidity:
    def test_no_report_is_valid(self):
        result = project(_submitted(5), make_exam(proctored=True))
        assert result.is_valid_test is True
        assert result.counters == {}

    def test_unfinalized_report_counts_as_valid(self):
        report = SessionReport(attempt_id=1, tab_switches=9)
        result = project(_submitted(5), make_exam(proctored=True), report)
        assert result.is_valid_test is True
        assert result.counters["tab_switches"] == 9

    def test_invalid_verdict_is_carried(self):
        report = SessionReport(
            attempt_id=1,
            mobile_detected=1,
            is_valid_test=False,
            invalid_reason="mobile phone detected (1)",
            finalized_at=BASE_TIME,
        )
        result = project(_submitted(5), make_exam(proctored=True), report)
        assert result.is_valid_test is False
        assert result.invalid_reason == "mobile phone detected (1)"


class TestStatus:
    def test_submitted(self):
        assert project(_submitted(5), make_exam()).status is AttemptStatus.SUBMITTED

    def test_in_progress_and_abandoned(self):
        exam = make_exam(duration_minutes=60)
        attempt = make_attempt()
        assert project(attempt, exam, now=BASE_TIME + timedelta(minutes=10)).status is AttemptStatus.IN_PROGRESS
        assert project(attempt, exam, now=BASE_TIME + timedelta(minutes=61)).status is AttemptStatus.ABANDONED

    def test_abandoned_after_window_without_duration(self):
        exam = make_exam()
        attempt = make_attempt()
        assert project(attempt, exam, now=exam.end_time + timedelta(seconds=1)).status is AttemptStatus.ABANDONED
