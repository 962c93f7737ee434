"""Read-only knowledge records: industries, ontology nodes, trending skills."""

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Industry(str, Enum):
    TECHNOLOGY = "technology"
    HEALTHCARE = "healthcare"
    FINANCE = "finance"
    BUSINESS = "business"
    PROJECT_MANAGEMENT = "project_management"
    DATA_SCIENCE = "data_science"
    OTHER = "other"

    @classmethod
    def from_label(cls, label: "str | Industry | None") -> "Industry":
        """Map a free-text industry label to a known industry.

        Unknown or empty labels become ``Industry.OTHER``.
        """
        if isinstance(label, Industry):
            return label
        if not label:
            return cls.OTHER
        key = re.sub(r"[\s\-/]+", "_", str(label).strip().lower())
        key = _INDUSTRY_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            return cls.OTHER


_INDUSTRY_ALIASES: dict[str, str] = {
    "tech": "technology",
    "software": "technology",
    "it": "technology",
    "information_technology": "technology",
    "health": "healthcare",
    "medical": "healthcare",
    "banking": "finance",
    "financial_services": "finance",
    "pm": "project_management",
    "data": "data_science",
}


def _unique_lower(values: tuple[str, ...]) -> tuple[str, ...]:
    seen: list[str] = []
    for v in values:
        v = v.strip().lower()
        if v and v not in seen:
            seen.append(v)
    return tuple(seen)


class SkillNode(BaseModel):
    """One ontology entry. Immutable once loaded."""
    model_config = ConfigDict(frozen=True)

    name: str
    category: str = ""
    synonyms: tuple[str, ...] = ()
    prerequisites: tuple[str, ...] = ()
    related_skills: tuple[str, ...] = ()
    industry_relevance: dict[str, float] = {}  # Industry value -> 0.0-1.0
    difficulty_level: float = Field(default=0.5, ge=0.0, le=1.0)
    market_demand: float = Field(default=0.5, ge=0.0, le=1.0)

    @field_validator("synonyms", "prerequisites", "related_skills")
    @classmethod
    def _normalize_names(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return _unique_lower(v)

    @field_validator("industry_relevance")
    @classmethod
    def _clamp_relevance(cls, v: dict[str, float]) -> dict[str, float]:
        return {Industry.from_label(k).value: min(1.0, max(0.0, score)) for k, score in v.items()}


class TrendingSkill(BaseModel):
    """Market trend record for one skill within an industry."""
    model_config = ConfigDict(frozen=True)

    name: str
    trend_score: float = Field(default=0.0, ge=0.0, le=1.0)
    growth_rate: float = Field(default=0.0, ge=0.0, le=1.0)
    demand_level: float = Field(default=0.0, ge=0.0, le=1.0)
