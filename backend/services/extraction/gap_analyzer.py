"""Missing-critical and emerging skills from trending data and the job description."""

from collections.abc import Iterable, Sequence

from models.schemas.knowledge import TrendingSkill
from models.schemas.skill_match import SkillMatch
from services.extraction.text_normalizer import normalized_key

CRITICAL_DEMAND = 0.7
EMERGING_TREND = 0.8
EMERGING_GROWTH = 0.7
MAX_MISSING_SKILLS = 10


def find_missing_critical_skills(
    matches: list[SkillMatch],
    trending: Sequence[TrendingSkill],
    job_description_skills: Iterable[str] = (),
) -> list[str]:
    """High-demand trending skills and job-description skills the candidate lacks.

    Deduplicated, sorted alphabetically, at most MAX_MISSING_SKILLS entries.
    """
    present = {m.normalized_form for m in matches}

    # keyed by normalized form so "next.js" and "nextjs" count once; first spelling wins
    missing: dict[str, str] = {}
    candidates = [t.name for t in trending if t.demand_level > CRITICAL_DEMAND]
    candidates.extend(job_description_skills)
    for name in candidates:
        key = normalized_key(name)
        if key and key not in present:
            missing.setdefault(key, name)
    return sorted(missing.values())[:MAX_MISSING_SKILLS]


def find_emerging_skills(matches: list[SkillMatch], trending: Sequence[TrendingSkill]) -> list[str]:
    """Fast-growing trending skills the candidate already has, in trending-table order."""
    present = {m.normalized_form for m in matches}
    return [
        t.name for t in trending
        if t.trend_score > EMERGING_TREND
        and t.growth_rate > EMERGING_GROWTH
        and normalized_key(t.name) in present
    ]
