"""
요청 단위 세션 컨텍스트 - 코어에 명시적으로 전달

로그인 시 생성(인증 성공), 응답 종료/401 시 폐기.
전역 저장소에서 읽지 않는다.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from academy.domain.assessment.roles import Capabilities, Role, capabilities_for


@dataclass(frozen=True)
class SessionContext:
    user_id: int
    role: Role
    college_id: Optional[int] = None

    @property
    def capabilities(self) -> Capabilities:
        return capabilities_for(self.role)

    @property
    def is_student(self) -> bool:
        return self.role == Role.STUDENT
