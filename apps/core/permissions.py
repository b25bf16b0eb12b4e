# apps/core/permissions.py
"""
Capability 기반 Permission

역할 문자열을 직접 비교하지 않고 capabilities_for(role) 의 플래그만 본다.
"""
from rest_framework.permissions import BasePermission

from academy.domain.assessment.roles import Capabilities, Role, capabilities_for


def user_capabilities(user) -> Capabilities:
    if not user or not user.is_authenticated:
        return Capabilities()
    return capabilities_for(Role.parse(getattr(user, "role", None)))


class CapabilityPermission(BasePermission):
    """capabilities 중 하나라도 True 면 허용."""

    capabilities: tuple = ()
    message = "You do not have permission to perform this action."

    def has_permission(self, request, view):
        caps = user_capabilities(getattr(request, "user", None))
        return any(getattr(caps, name) for name in self.capabilities)


class CanTakeTests(CapabilityPermission):
    # 미리보기 권한자는 미공개/기간 외 시험도 응시
    capabilities = ("can_take_tests", "can_preview_tests")


class CanViewResults(CapabilityPermission):
    capabilities = (
        "can_take_tests",
        "can_view_all_results",
        "can_view_college_results",
        "can_view_own_test_results",
    )


class CanDeleteResults(CapabilityPermission):
    capabilities = ("can_delete_results",)


class CanViewQuestions(CapabilityPermission):
    capabilities = ("can_take_tests", "can_manage_tests", "can_preview_tests")
