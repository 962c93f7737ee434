"""Merge the three candidate lists into one ranked, deduplicated list."""

import logging

from models.schemas.skill_match import SkillMatch

logger = logging.getLogger(__name__)

CORROBORATION_BOOST = 1.1


def fuse_matches(
    pattern_matches: list[SkillMatch],
    ai_matches: list[SkillMatch],
    ontology_matches: list[SkillMatch],
) -> list[SkillMatch]:
    """Deduplicate by normalized form and rank.

    Source priority is pattern > AI > ontology: the highest-priority entry
    for a normalized form is kept as-is. Its confidence is then multiplied
    by 1.1 for every *other* source list that independently produced the
    same form (capped at 1.0), so the boost depends only on how many sources
    agree, never on list order.

    Sorted by confidence * context relevance * weight, highest first; ties
    keep source-priority order.
    """
    kept: dict[str, SkillMatch] = {}
    sources: dict[str, int] = {}

    for source in (pattern_matches, ai_matches, ontology_matches):
        forms_in_source: set[str] = set()
        for match in source:
            key = match.normalized_form
            if key not in kept:
                kept[key] = match
            forms_in_source.add(key)
        for key in forms_in_source:
            sources[key] = sources.get(key, 0) + 1

    fused = []
    for key, match in kept.items():
        agreeing = sources[key]
        if agreeing > 1:
            boosted = min(1.0, match.confidence_score * CORROBORATION_BOOST ** (agreeing - 1))
            match = match.model_copy(update={"confidence_score": boosted})
        fused.append(match)

    fused.sort(key=lambda m: m.ranking_score, reverse=True)
    logger.debug(
        "Fused %d pattern + %d AI + %d ontology candidates into %d skills",
        len(pattern_matches), len(ai_matches), len(ontology_matches), len(fused),
    )
    return fused
