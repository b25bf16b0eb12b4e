"""
역할(Role) → 권한(capability) 단일 매핑

뷰/서비스는 역할 문자열을 직접 비교하지 않고 capabilities_for(role) 만 본다.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Role(str, Enum):
    ROOTADMIN = "ROOTADMIN"
    SUPERADMIN = "SUPERADMIN"
    ADMIN = "ADMIN"  # 대학(college) 관리자
    FACULTY = "FACULTY"
    STUDENT = "STUDENT"

    @classmethod
    def parse(cls, raw: Any) -> "Role":
        if isinstance(raw, cls):
            return raw
        s = str(raw or "").strip().upper()
        # 레거시 표기: USER == 학생
        if s in ("USER", ""):
            return cls.STUDENT
        return cls(s)


@dataclass(frozen=True)
class Capabilities:
    can_manage_colleges: bool = False
    can_manage_users: bool = False
    can_manage_tests: bool = False
    can_take_tests: bool = False
    can_preview_tests: bool = False
    can_view_all_results: bool = False
    can_view_college_results: bool = False
    can_view_own_test_results: bool = False
    can_delete_results: bool = False
    can_view_session_reports: bool = False


_CAPABILITIES = {
    Role.ROOTADMIN: Capabilities(
        can_manage_colleges=True,
        can_manage_users=True,
        can_preview_tests=True,
        can_view_all_results=True,
        can_delete_results=True,
        can_view_session_reports=True,
    ),
    Role.SUPERADMIN: Capabilities(
        can_manage_colleges=True,
        can_manage_users=True,
        can_manage_tests=True,
        can_preview_tests=True,
        can_view_all_results=True,
        can_delete_results=True,
        can_view_session_reports=True,
    ),
    Role.ADMIN: Capabilities(
        can_manage_users=True,
        can_manage_tests=True,
        can_take_tests=True,
        can_preview_tests=True,
        can_view_college_results=True,
        can_delete_results=True,
        can_view_session_reports=True,
    ),
    Role.FACULTY: Capabilities(
        can_manage_tests=True,
        can_take_tests=True,
        can_preview_tests=True,
        can_view_own_test_results=True,
        can_view_session_reports=True,
    ),
    Role.STUDENT: Capabilities(
        can_take_tests=True,
    ),
}


def capabilities_for(role: Role) -> Capabilities:
    return _CAPABILITIES[Role.parse(role)]


def is_staff_role(role: Role) -> bool:
    c = capabilities_for(role)
    return bool(c.can_manage_tests or c.can_view_all_results)
