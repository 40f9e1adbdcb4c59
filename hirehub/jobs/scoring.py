"""Skill match scoring between a job's required skills and a candidate's skills.

Comparison is exact after trimming and lower-casing: no substring matching,
no synonyms. The score is the share of the job's skills found in the
candidate list, rounded half up to a whole percent.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from accounts.utils import round_percent


@dataclass(frozen=True)
class MatchResult:
    score: int = 0
    matched: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"score": self.score, "matched": list(self.matched), "missing": list(self.missing)}


def normalize_skill(value) -> str:
    return str(value).strip().lower()


def clean_skills(values) -> list[str]:
    """Trimmed, non-empty skills in their original order.

    Accepts a list or a comma-separated string (form input).
    """
    if not values:
        return []
    if isinstance(values, str):
        values = values.split(",")
    out = []
    for value in values:
        if value is None:
            continue
        value = str(value).strip()
        if value:
            out.append(value)
    return out


def match_skills(job_skills, candidate_skills) -> MatchResult:
    """Partition the job's skills into matched/missing and score the overlap.

    ``matched`` and ``missing`` keep the job's order and the job's spelling
    (trimmed). Duplicate job skills are counted as listed. A job with no
    skills scores 0.
    """
    required = clean_skills(job_skills)
    if not required:
        return MatchResult()

    have = {normalize_skill(s) for s in clean_skills(candidate_skills)}
    matched = [s for s in required if normalize_skill(s) in have]
    missing = [s for s in required if normalize_skill(s) not in have]
    return MatchResult(score=round_percent(len(matched), len(required)), matched=matched, missing=missing)

