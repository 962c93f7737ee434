"""AI extraction signal: one LLM call turned into candidate skill matches.

Never fails the pipeline. Timeouts, transport errors and malformed replies
all mean "no signal" and produce an empty list.
"""

import asyncio
import logging
from typing import Protocol

from pydantic import BaseModel, ValidationError, field_validator

from models.schemas.knowledge import Industry
from models.schemas.skill_match import MatchType, SkillMatch
from services.extraction.ontology import SkillOntology
from services.extraction.text_normalizer import normalize_text, normalized_key
from services.gemini_client import extract_json_array
from services.prompt_builder import build_skill_extraction_prompt

logger = logging.getLogger(__name__)

AI_CONTEXT_RELEVANCE = 0.8
AI_INDUSTRY_RELEVANCE = 0.9
AI_WEIGHT_DISCOUNT = 0.9  # model output is less verifiable than a regex hit


class LLMClient(Protocol):
    async def generate(self, model: str, prompt: str) -> str: ...


class CandidateSkill(BaseModel):
    """One item of the model's JSON reply."""
    skill: str
    category: str
    confidence: float
    context: str = ""

    @field_validator("skill", "category")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("context", mode="before")
    @classmethod
    def _context_text(cls, v: object) -> str:
        return v if isinstance(v, str) else ""


def parse_candidates(items: list) -> list[CandidateSkill]:
    """Validate reply items one by one; bad items are skipped, not fatal."""
    candidates = []
    for item in items:
        try:
            candidates.append(CandidateSkill.model_validate(item))
        except ValidationError:
            logger.debug("Skipping malformed AI skill entry: %r", item)
    return candidates


class AISkillExtractor:
    def __init__(
        self,
        client: LLMClient | None,
        model: str = "gemini-2.5-flash",
        timeout: float = 30.0,
    ) -> None:
        if timeout <= 0:
            raise ValueError("AI timeout must be positive")
        self.client = client
        self.model = model
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        return self.client is not None

    async def extract(self, text: str, industry: Industry, ontology: SkillOntology) -> list[SkillMatch]:
        if self.client is None or not text:
            return []

        prompt = build_skill_extraction_prompt(text, industry.value)
        try:
            raw = await asyncio.wait_for(self.client.generate(self.model, prompt), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning("AI skill extraction timed out after %.1fs", self.timeout)
            return []
        except Exception as e:
            logger.warning("AI skill extraction failed: %s", e)
            return []

        items = extract_json_array(raw) if isinstance(raw, str) else None
        if items is None:
            logger.info("AI reply contained no usable JSON array, ignoring AI signal")
            return []

        return self._to_matches(parse_candidates(items), text, ontology)

    def _to_matches(
        self, candidates: list[CandidateSkill], text: str, ontology: SkillOntology,
    ) -> list[SkillMatch]:
        matches: list[SkillMatch] = []
        seen: set[str] = set()
        for candidate in candidates:
            key = normalized_key(candidate.skill)
            if not key or key in seen:
                continue
            seen.add(key)

            confidence = min(1.0, max(0.0, candidate.confidence))
            position = text.find(normalize_text(candidate.skill))
            matches.append(SkillMatch(
                keyword=candidate.skill,
                normalized_form=key,
                category=candidate.category,
                confidence_score=confidence,
                context_relevance=AI_CONTEXT_RELEVANCE,
                weight=confidence * AI_WEIGHT_DISCOUNT,
                match_type=MatchType.SEMANTIC,
                context_phrases=[candidate.context] if candidate.context else [],
                semantic_variations=list(ontology.synonyms_of(key)),
                industry_relevance=AI_INDUSTRY_RELEVANCE,
                word_position=max(position, 0),
            ))
        logger.debug("AI extraction produced %d candidate skills", len(matches))
        return matches
