import pytest

from academy.domain.assessment.entities import COUNTER_FIELDS
from academy.domain.assessment.errors import ValidationError
from academy.domain.assessment.proctoring import (
    ProctoringPolicy,
    ViolationType,
    judge_validity,
    parse_violation_type,
)


class TestViolationType:
    def test_one_type_per_counter(self):
        assert tuple(v.value for v in ViolationType) == COUNTER_FIELDS

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("tab_switches", ViolationType.TAB_SWITCHES),
            ("tabSwitches", ViolationType.TAB_SWITCHES),
            ("TAB_SWITCH", ViolationType.TAB_SWITCHES),
            ("MOBILE_DETECTED", ViolationType.MOBILE_DETECTED),
            ("gazeAway", ViolationType.LOOK_AWAYS),
            ("window_blur", ViolationType.WINDOW_SWITCHES),
            ("multipleFaces", ViolationType.MULTIPLE_PEOPLE),
        ],
    )
    def test_client_spellings(self, raw, expected):
        assert parse_violation_type(raw) is expected

    def test_unknown_type(self):
        with pytest.raises(ValidationError) as e:
            parse_violation_type("blink")
        assert e.value.code == "unknown_event_type"
        assert e.value.details == {"event_type": "blink"}


class TestJudgeValidity:
    def test_no_violations_is_valid(self):
        assert judge_validity({}, ProctoringPolicy()) == (True, None)

    def test_limits_are_exclusive(self):
        policy = ProctoringPolicy()
        assert judge_validity({"tab_switches": 3, "face_visibility_issues": 5}, policy) == (True, None)

        ok, reason = judge_validity({"tab_switches": 4}, policy)
        assert ok is False
        assert "tab switches exceeded limit (4 > 3)" in reason

    def test_mobile_phone_invalidates(self):
        ok, reason = judge_validity({"mobile_detected": 1}, ProctoringPolicy())
        assert ok is False
        assert reason == "mobile phone detected (1)"

    def test_every_exceeded_rule_is_reported(self):
        ok, reason = judge_validity(
            {"multiple_people": 2, "window_switches": 9},
            ProctoringPolicy(),
        )
        assert ok is False
        assert reason.split("; ") == [
            "multiple people detected (2)",
            "window switches exceeded limit (9 > 3)",
        ]

    def test_policy_from_settings_mapping(self):
        policy = ProctoringPolicy.from_mapping({"tab_switch_limit": "5"})
        assert policy == ProctoringPolicy(tab_switch_limit=5, window_switch_limit=3, visibility_limit=5)
        assert ProctoringPolicy.from_mapping(None) == ProctoringPolicy()
