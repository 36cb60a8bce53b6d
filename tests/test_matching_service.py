from app.services.matching_service import (
    CompatibilityReason,
    check_mbti_compatibility,
    parse_mbti_preferences,
)


def test_no_assessment():
    result = check_mbti_compatibility(None, "INTJ,ENTP")
    assert result.compatible is False
    assert result.reason == CompatibilityReason.NO_ASSESSMENT


def test_no_preference_declared():
    result = check_mbti_compatibility("INTJ", None)
    assert result.compatible is False
    assert result.reason == CompatibilityReason.NO_PREFERENCE_DECLARED


def test_empty_preference_list_counts_as_undeclared():
    assert check_mbti_compatibility("INTJ", "").reason == CompatibilityReason.NO_PREFERENCE_DECLARED
    assert check_mbti_compatibility("INTJ", " , ").reason == CompatibilityReason.NO_PREFERENCE_DECLARED


def test_match_is_case_sensitive():
    result = check_mbti_compatibility("INTJ", "intj")
    assert result.compatible is False
    assert result.reason == CompatibilityReason.NO_MATCH


def test_tokens_are_trimmed():
    result = check_mbti_compatibility("INTJ", " INTJ , ENTP")
    assert result.compatible is True
    assert result.reason == CompatibilityReason.MATCH


def test_no_match():
    assert check_mbti_compatibility("ISFP", "INTJ,ENTP").to_dict() == {
        "compatible": False,
        "reason": "NO_MATCH",
    }


def test_parse_preferences():
    assert parse_mbti_preferences(" INTJ ,ENTP,, ") == ["INTJ", "ENTP"]
    assert parse_mbti_preferences(None) == []
