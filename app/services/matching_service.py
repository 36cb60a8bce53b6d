"""
MBTI compatibility between an applicant and a job posting.

Purely advisory: the result is shown next to an application to help the
person deciding on it, and is never consulted by any state transition.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class CompatibilityReason(str, Enum):
    NO_ASSESSMENT = "NO_ASSESSMENT"
    NO_PREFERENCE_DECLARED = "NO_PREFERENCE_DECLARED"
    MATCH = "MATCH"
    NO_MATCH = "NO_MATCH"


@dataclass(frozen=True)
class Compatibility:
    compatible: bool
    reason: CompatibilityReason

    def to_dict(self) -> dict:
        return {"compatible": self.compatible, "reason": self.reason.value}


def parse_mbti_preferences(mbti_types: Optional[str]) -> List[str]:
    """Split a comma-delimited preference list into trimmed, non-empty tokens."""
    if not mbti_types:
        return []
    return [token.strip() for token in mbti_types.split(",") if token.strip()]


def check_mbti_compatibility(
    applicant_mbti: Optional[str],
    job_mbti_types: Optional[str],
) -> Compatibility:
    """
    Compare an applicant's MBTI type with a job's preferred types.

    Matching is exact and case-sensitive after trimming each token:
    ``"INTJ"`` matches ``" INTJ , ENTP"`` but not ``"intj"``.

    Args:
        applicant_mbti: The applicant's 4-letter type, None until assessed
        job_mbti_types: Comma-delimited preference list, None/empty if none

    Returns:
        Compatibility with a reason explaining the verdict
    """
    if applicant_mbti is None:
        return Compatibility(False, CompatibilityReason.NO_ASSESSMENT)

    preferences = parse_mbti_preferences(job_mbti_types)
    if not preferences:
        return Compatibility(False, CompatibilityReason.NO_PREFERENCE_DECLARED)

    if applicant_mbti in preferences:
        return Compatibility(True, CompatibilityReason.MATCH)
    return Compatibility(False, CompatibilityReason.NO_MATCH)
