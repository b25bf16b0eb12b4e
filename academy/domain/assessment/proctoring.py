"""
감독(proctoring) 위반 이벤트 타입 + 유효성 판정 정책

이벤트 타입은 SessionReport 카운터 9종과 1:1.
클라이언트 표기(camelCase / 감지기 이름)도 받아서 정규화한다.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Tuple

from academy.domain.assessment.entities import COUNTER_FIELDS
from academy.domain.assessment.errors import ValidationError


class ViolationType(str, Enum):
    HEADS_TURNED = "heads_turned"
    HEAD_TILTS = "head_tilts"
    LOOK_AWAYS = "look_aways"
    FACE_VISIBILITY_ISSUES = "face_visibility_issues"
    MULTIPLE_PEOPLE = "multiple_people"
    MOBILE_DETECTED = "mobile_detected"
    AUDIO_INCIDENTS = "audio_incidents"
    TAB_SWITCHES = "tab_switches"
    WINDOW_SWITCHES = "window_switches"

    @property
    def counter_field(self) -> str:
        return self.value


# 클라이언트 감지기(detector) 이름 → 카운터
_DETECTOR_ALIASES = {
    "head_turned": ViolationType.HEADS_TURNED,
    "head_tilt": ViolationType.HEAD_TILTS,
    "gaze_away": ViolationType.LOOK_AWAYS,
    "face_visibility": ViolationType.FACE_VISIBILITY_ISSUES,
    "multiple_faces": ViolationType.MULTIPLE_PEOPLE,
    "audio_detected": ViolationType.AUDIO_INCIDENTS,
    "tab_switch": ViolationType.TAB_SWITCHES,
    "window_switch": ViolationType.WINDOW_SWITCHES,
    "window_blur": ViolationType.WINDOW_SWITCHES,
}

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def parse_violation_type(raw: Any) -> ViolationType:
    """
    "tab_switches" / "tabSwitches" / "TAB_SWITCH" 모두 허용.
    모르는 타입은 ValidationError (상태 변경 없음).
    """
    if isinstance(raw, ViolationType):
        return raw

    s = str(raw or "").strip()
    key = _CAMEL_BOUNDARY.sub("_", s).lower()

    try:
        return ViolationType(key)
    except ValueError:
        pass

    alias = _DETECTOR_ALIASES.get(key)
    if alias is not None:
        return alias

    raise ValidationError(
        f"Unknown proctoring event type: {s!r}.",
        code="unknown_event_type",
        details={"event_type": s},
    )


@dataclass(frozen=True)
class ProctoringPolicy:
    """유효성 판정 임계값. 값은 설정(PROCTORING_POLICY)에서 주입."""
    tab_switch_limit: int = 3
    window_switch_limit: int = 3
    visibility_limit: int = 5

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "ProctoringPolicy":
        data = dict(data or {})
        default = cls()
        return cls(
            tab_switch_limit=int(data.get("tab_switch_limit", default.tab_switch_limit)),
            window_switch_limit=int(data.get("window_switch_limit", default.window_switch_limit)),
            visibility_limit=int(data.get("visibility_limit", default.visibility_limit)),
        )


def judge_validity(counters: Mapping[str, int], policy: ProctoringPolicy) -> Tuple[bool, Optional[str]]:
    """
    Returns: (is_valid_test, invalid_reason)
    초과한 규칙이 여러 개면 사유를 "; " 로 이어붙인다.
    """
    c = {name: int(counters.get(name, 0) or 0) for name in COUNTER_FIELDS}
    reasons = []

    if c["multiple_people"] > 0:
        reasons.append(f"multiple people detected ({c['multiple_people']})")
    if c["mobile_detected"] > 0:
        reasons.append(f"mobile phone detected ({c['mobile_detected']})")
    if c["tab_switches"] > policy.tab_switch_limit:
        reasons.append(f"tab switches exceeded limit ({c['tab_switches']} > {policy.tab_switch_limit})")
    if c["window_switches"] > policy.window_switch_limit:
        reasons.append(
            f"window switches exceeded limit ({c['window_switches']} > {policy.window_switch_limit})"
        )
    if c["face_visibility_issues"] > policy.visibility_limit:
        reasons.append(
            f"face visibility issues exceeded limit "
            f"({c['face_visibility_issues']} > {policy.visibility_limit})"
        )

    if reasons:
        return False, "; ".join(reasons)
    return True, None
