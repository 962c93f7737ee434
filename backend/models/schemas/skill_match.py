"""A single skill mention produced by one of the extraction stages."""

from enum import Enum

from pydantic import BaseModel, Field


class MatchType(str, Enum):
    """How a skill mention was discovered."""
    EXACT = "exact"  # curated pattern rule
    SEMANTIC = "semantic"  # ontology synonym or AI inference
    CONTEXTUAL = "contextual"
    FUZZY = "fuzzy"  # near-miss spelling of a known skill
    COMPOUND = "compound"
    CERTIFICATION = "certification"
    FRAMEWORK = "framework"


class SkillLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"
    UNKNOWN = "unknown"


class SkillMatch(BaseModel):
    """One candidate (or final) skill mention.

    ``normalized_form`` is the dedup identity across all sources.
    ``word_position`` is an offset into the normalized text, only used for
    context windows and never serialized.
    """
    keyword: str
    normalized_form: str
    category: str = ""
    confidence_score: float = Field(default=0.0, ge=0.0, le=1.0)
    context_relevance: float = Field(default=0.5, ge=0.0, le=1.0)
    weight: float = 1.0
    skill_level: SkillLevel | None = None
    experience_years: int | None = None
    match_type: MatchType = MatchType.EXACT
    context_phrases: list[str] = []
    semantic_variations: list[str] = []  # unique, ordered
    industry_relevance: float = Field(default=0.5, ge=0.0, le=1.0)
    word_position: int = Field(default=0, exclude=True)

    @property
    def ranking_score(self) -> float:
        return self.confidence_score * self.context_relevance * self.weight
