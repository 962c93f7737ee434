"""Context checks applied after fusion: negation and job-description corroboration."""

import logging
import re

from models.schemas.skill_match import SkillMatch
from services.extraction.text_normalizer import normalize_text

logger = logging.getLogger(__name__)

NEGATION_PENALTY = 0.3
JD_CONFIDENCE_BOOST = 1.2
JD_RELEVANCE_BOOST = 1.1

NEGATION_LOOKBEHIND = 30
NEGATION_LOOKAHEAD = 10

NEGATION_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"\b(?:no|not|without|lack(?:ing)?|never|absent)\s+(?:experience\s+(?:in|with))?\s*", re.IGNORECASE),
    re.compile(r"\b(?:unfamiliar|inexperienced|novice|beginner)\s+(?:with|in)\s*", re.IGNORECASE),
    re.compile(r"\b(?:limited|minimal|basic)\s+(?:experience\s+(?:in|with))?\s*", re.IGNORECASE),
)


class ContextValidator:
    def __init__(self, confidence_threshold: float = 0.6) -> None:
        if not 0.0 <= confidence_threshold <= 1.0:
            raise ValueError("confidence_threshold must be within [0, 1]")
        self.confidence_threshold = confidence_threshold

    @staticmethod
    def is_negated(text: str, position: int) -> bool:
        """True when a negation phrase sits just before (or at) ``position``."""
        window = text[max(0, position - NEGATION_LOOKBEHIND):position + NEGATION_LOOKAHEAD]
        return any(p.search(window) for p in NEGATION_PATTERNS)

    def validate(
        self,
        matches: list[SkillMatch],
        text: str,
        job_description: str | None = None,
    ) -> list[SkillMatch]:
        """Adjust confidences in context and drop matches below the threshold.

        ``text`` must be the normalized text the matches' positions refer to.
        Input order is preserved.
        """
        jd_text = normalize_text(job_description) if job_description else ""

        validated = []
        for match in matches:
            confidence = match.confidence_score
            relevance = match.context_relevance

            if self.is_negated(text, match.word_position):
                confidence *= NEGATION_PENALTY

            if jd_text and normalize_text(match.keyword) in jd_text:
                confidence = min(1.0, confidence * JD_CONFIDENCE_BOOST)
                relevance = min(1.0, relevance * JD_RELEVANCE_BOOST)

            if confidence < self.confidence_threshold:
                logger.debug("Dropping %s (confidence %.2f)", match.normalized_form, confidence)
                continue

            validated.append(match.model_copy(update={
                "confidence_score": confidence,
                "context_relevance": relevance,
            }))
        return validated
