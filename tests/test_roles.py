import pytest

from academy.domain.assessment.roles import Role, capabilities_for, is_staff_role


class TestRole:
    def test_legacy_user_role_is_student(self):
        assert Role.parse("user") is Role.STUDENT
        assert Role.parse(None) is Role.STUDENT

    def test_parse_is_case_insensitive(self):
        assert Role.parse(" faculty ") is Role.FACULTY

    def test_member_passes_through(self):
        for role in Role:
            assert Role.parse(role) is role

    def test_unknown_role(self):
        with pytest.raises(ValueError):
            Role.parse("janitor")


class TestCapabilities:
    def test_student_only_takes_tests(self):
        caps = capabilities_for(Role.STUDENT)
        assert caps.can_take_tests
        assert not caps.can_preview_tests
        assert not caps.can_view_session_reports
        assert not caps.can_delete_results

    def test_root_admin_oversees_but_does_not_take(self):
        caps = capabilities_for(Role.ROOTADMIN)
        assert caps.can_view_all_results
        assert caps.can_delete_results
        assert not caps.can_take_tests

    def test_college_admin_and_faculty_scopes(self):
        admin = capabilities_for(Role.ADMIN)
        faculty = capabilities_for(Role.FACULTY)
        assert admin.can_view_college_results and not admin.can_view_all_results
        assert faculty.can_view_own_test_results and not faculty.can_delete_results

    def test_staff_roles(self):
        assert not is_staff_role(Role.STUDENT)
        assert is_staff_role(Role.FACULTY)
        assert is_staff_role(Role.ROOTADMIN)
