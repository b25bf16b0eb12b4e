import pytest

from academy.application.use_cases.assessment import (
    AssessmentService,
    Decision,
    ProctoringEventChannel,
    QuestionView,
    ReportStatus,
)
from academy.domain.assessment.entities import AttemptStatus, Question
from academy.domain.assessment.errors import NotFoundError, ValidationError
from academy.domain.assessment.roles import Role
from tests.factories import session

COLLEGE = 1
OTHER_COLLEGE = 2
FACULTY_ID = 50

student = session(100, college_id=COLLEGE)
classmate = session(101, college_id=COLLEGE)
outsider = session(102, college_id=OTHER_COLLEGE)
faculty = session(FACULTY_ID, Role.FACULTY, college_id=COLLEGE)
other_faculty = session(51, Role.FACULTY, college_id=COLLEGE)
college_admin = session(60, Role.ADMIN, college_id=COLLEGE)
other_admin = session(61, Role.ADMIN, college_id=OTHER_COLLEGE)
root = session(1, Role.ROOTADMIN)


@pytest.fixture
def service(store, clock):
    return AssessmentService(store.uow_factory, clock)


@pytest.fixture
def exam(add_exam):
    return add_exam(college_id=COLLEGE, created_by_id=FACULTY_ID, proctored=True, max_attempts=2)


@pytest.fixture
def questions(add_questions, exam):
    return add_questions(exam)


@pytest.fixture
def submitted(service, exam, questions):
    sc, _, _ = questions
    attempt = service.start_or_resume_test(exam.id, student).attempt
    service.answer_question(attempt.id, sc.id, "B", student)
    service.submit_test(attempt.id, student)
    return attempt


class TestTakingTests:
    def test_start_resume_answer_submit(self, service, exam, questions):
        sc, mc, ft = questions
        res = service.start_or_resume_test(exam.id, student)
        assert res.decision is Decision.START_NEW

        attempt_id = res.attempt.id
        service.answer_question(attempt_id, sc.id, "B", student)
        service.answer_question(attempt_id, ft.id, "paris", student)

        state = service.get_attempt_state(attempt_id, student)
        assert state.answers == {sc.id: "B", ft.id: "paris"}

        result = service.submit_test(attempt_id, student)
        assert result.score == 6
        assert result.percentage == 60.0
        assert result.status is AttemptStatus.SUBMITTED
        assert result.is_valid_test is True

    def test_state_hides_answer_keys(self, service, exam, questions):
        attempt = service.start_or_resume_test(exam.id, student).attempt
        state = service.get_attempt_state(attempt.id, student)

        assert all(isinstance(q, QuestionView) for q in state.questions)
        assert not any(hasattr(q, "correct_option") for q in state.questions)
        assert [q.number for q in state.questions] == [1, 2, 3]

    def test_state_by_exam_prefers_active_attempt(self, service, exam, submitted):
        with pytest.raises(NotFoundError):
            service.get_attempt_state_for_exam(exam.id, classmate)

        assert service.get_attempt_state_for_exam(exam.id, student).attempt.id == submitted.id

        second = service.start_or_resume_test(exam.id, student).attempt
        assert service.get_attempt_state_for_exam(exam.id, student).attempt.id == second.id

    def test_other_students_attempt_is_invisible(self, service, exam, questions):
        sc, _, _ = questions
        attempt = service.start_or_resume_test(exam.id, student).attempt

        with pytest.raises(NotFoundError):
            service.get_attempt_state(attempt.id, classmate)
        with pytest.raises(NotFoundError):
            service.answer_question(attempt.id, sc.id, "A", classmate)
        with pytest.raises(NotFoundError):
            service.report_proctoring_event(attempt.id, "tab_switches", classmate)
        with pytest.raises(NotFoundError):
            service.submit_test(attempt.id, classmate)

    def test_exam_of_another_college_is_invisible(self, service, exam):
        with pytest.raises(NotFoundError):
            service.start_or_resume_test(exam.id, outsider)

    def test_student_without_college_sees_only_shared_exams(self, service, exam, add_exam):
        unaffiliated = session(103, college_id=None)
        with pytest.raises(NotFoundError):
            service.start_or_resume_test(exam.id, unaffiliated)
        with pytest.raises(NotFoundError):
            service.list_questions(exam.id, unaffiliated)

        shared = add_exam(college_id=None)
        assert service.start_or_resume_test(shared.id, unaffiliated).decision is Decision.START_NEW

    def test_unpublished_exam_blocks_students_not_staff(self, service, add_exam):
        draft = add_exam(college_id=COLLEGE, published=False)
        assert service.start_or_resume_test(draft.id, student).decision is Decision.BLOCKED
        assert service.start_or_resume_test(draft.id, faculty).decision is Decision.START_NEW

    def test_live_counters(self, service, exam):
        attempt = service.start_or_resume_test(exam.id, student).attempt
        live = service.report_proctoring_event(attempt.id, "TAB_SWITCH", student, 2)
        assert live.counters["tab_switches"] == 2


class TestEventChannel:
    def test_enqueue_requires_channel(self, service, exam):
        attempt = service.start_or_resume_test(exam.id, student).attempt
        with pytest.raises(RuntimeError):
            service.enqueue_proctoring_event(attempt.id, "tab_switches", student)

    def test_enqueue_then_drain(self, store, clock, exam):
        svc = AssessmentService(store.uow_factory, clock)
        svc.event_channel = ProctoringEventChannel(svc.proctoring, maxsize=10)
        attempt = svc.start_or_resume_test(exam.id, student).attempt

        assert svc.enqueue_proctoring_event(attempt.id, "tabSwitches", student) is True
        with pytest.raises(ValidationError):
            svc.enqueue_proctoring_event(attempt.id, "sneeze", student)

        svc.event_channel.drain()
        assert store.reports[attempt.id].tab_switches == 1


class TestResults:
    def test_overseers_by_scope(self, service, submitted):
        for who in (student, faculty, college_admin, root):
            assert service.fetch_result(submitted.id, who).attempt_id == submitted.id

        for who in (classmate, other_faculty, other_admin):
            with pytest.raises(NotFoundError):
                service.fetch_result(submitted.id, who)

    def test_session_report(self, service, submitted, add_exam):
        lookup = service.fetch_session_report(submitted.id, faculty)
        assert lookup.status is ReportStatus.AVAILABLE
        assert lookup.report.is_finalized

        plain = add_exam(college_id=COLLEGE)
        attempt = service.start_or_resume_test(plain.id, student).attempt
        lookup = service.fetch_session_report(attempt.id, student)
        assert lookup.status is ReportStatus.NOT_APPLICABLE

    def test_list_results_scoping(self, service, submitted, add_exam):
        foreign = add_exam(college_id=OTHER_COLLEGE, created_by_id=999)
        theirs = service.start_or_resume_test(foreign.id, outsider).attempt

        assert [r.attempt_id for r in service.list_results(student)] == [submitted.id]
        assert service.list_results(classmate) == []
        assert [r.attempt_id for r in service.list_results(faculty)] == [submitted.id]
        assert service.list_results(other_faculty) == []
        assert [r.attempt_id for r in service.list_results(college_admin)] == [submitted.id]
        assert [r.attempt_id for r in service.list_results(other_admin)] == [theirs.id]
        assert {r.attempt_id for r in service.list_results(root)} == {submitted.id, theirs.id}

    def test_list_results_exam_filter(self, service, submitted, exam):
        assert len(service.list_results(root, exam_id=exam.id)) == 1
        assert service.list_results(root, exam_id=exam.id + 1000) == []
        assert service.list_results(other_admin, exam_id=exam.id) == []

    def test_delete_result(self, service, submitted, store):
        for who in (faculty, other_admin, student):
            with pytest.raises(NotFoundError):
                service.delete_result(submitted.id, who)

        service.delete_result(submitted.id, college_admin)

        assert submitted.id not in store.attempts
        assert submitted.id not in store.reports
        assert not any(key[0] == submitted.id for key in store.answers)
        with pytest.raises(NotFoundError):
            service.fetch_result(submitted.id, student)


class TestQuestionBank:
    def test_students_see_masked_questions(self, service, exam, questions):
        views = service.list_questions(exam.id, student)
        assert all(isinstance(v, QuestionView) for v in views)

    def test_exam_owner_sees_answer_keys(self, service, exam, questions):
        full = service.list_questions(exam.id, faculty)
        assert all(isinstance(q, Question) for q in full)
        assert full[0].correct_option == "B"

    def test_unpublished_questions_hidden_from_students(self, service, add_exam, add_questions):
        draft = add_exam(college_id=COLLEGE, published=False)
        add_questions(draft)
        with pytest.raises(NotFoundError):
            service.list_questions(draft.id, student)
