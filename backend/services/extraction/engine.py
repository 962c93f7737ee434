"""Skill extraction engine: wires all stages together.

Flow per call:
    text
      ├─ preprocess()                          → normalized text + tokens
      ├─ AISkillExtractor.extract()  (task)    → AI candidates
      ├─ PatternExtractor.extract()            → pattern candidates
      ├─ OntologyMatcher.match()               → ontology candidates
      │            ↓
      ├─ fuse_matches()                        → deduplicated, ranked
      ├─ ContextValidator.validate()           → negation / JD adjusted, thresholded
      │            ↓
      ├─ analyze_clusters()                    → SkillCluster list
      └─ find_missing_critical_skills() / find_emerging_skills()
                   ↓
             ExtractionResult

The knowledge snapshot is read once at the start of a call; a refresh only
affects calls that start afterwards.
"""

import asyncio
import logging
import time

from models.schemas.extraction_result import ExtractionMetadata, ExtractionResult
from models.schemas.knowledge import Industry
from services.extraction.ai_adapter import AISkillExtractor, LLMClient
from services.extraction.cluster_analyzer import analyze_clusters
from services.extraction.context_validator import ContextValidator
from services.extraction.fusion import fuse_matches
from services.extraction.gap_analyzer import find_emerging_skills, find_missing_critical_skills
from services.extraction.knowledge_base import KnowledgeSnapshot, build_default_snapshot
from services.extraction.ontology_matcher import OntologyMatcher
from services.extraction.pattern_extractor import PatternExtractor, PatternRuleSet
from services.extraction.text_normalizer import normalize_text, preprocess, technical_density

logger = logging.getLogger(__name__)

EXTRACTION_VERSION = "2024.1"


class SkillExtractionEngine:
    """Runs every extraction stage for one document.

    Holds only immutable configuration plus the current knowledge snapshot,
    so one instance can serve concurrent calls.
    """

    def __init__(
        self,
        llm_client: LLMClient | None = None,
        snapshot: KnowledgeSnapshot | None = None,
        rules: PatternRuleSet | None = None,
        confidence_threshold: float = 0.6,
        context_window_size: int = 50,
        ai_model: str = "gemini-2.5-flash",
        ai_timeout: float = 30.0,
    ) -> None:
        self._snapshot = snapshot or build_default_snapshot()
        self._patterns = PatternExtractor(rules, context_window=context_window_size)
        self._ontology_matcher = OntologyMatcher()
        self._ai = AISkillExtractor(llm_client, model=ai_model, timeout=ai_timeout)
        self._validator = ContextValidator(confidence_threshold)

    @classmethod
    def from_settings(cls, settings, llm_client: LLMClient | None = None,
                      snapshot: KnowledgeSnapshot | None = None) -> "SkillExtractionEngine":
        return cls(
            llm_client=llm_client,
            snapshot=snapshot,
            confidence_threshold=settings.confidence_threshold,
            context_window_size=settings.context_window_size,
            ai_model=settings.ai_model,
            ai_timeout=settings.ai_timeout_seconds,
        )

    @property
    def snapshot(self) -> KnowledgeSnapshot:
        return self._snapshot

    @property
    def confidence_threshold(self) -> float:
        return self._validator.confidence_threshold

    def refresh_snapshot(self, snapshot: KnowledgeSnapshot) -> None:
        """Swap in new knowledge data. Calls already running keep the old snapshot."""
        logger.info("Knowledge snapshot %s -> %s", self._snapshot.version, snapshot.version)
        self._snapshot = snapshot

    async def extract(
        self,
        text: str,
        industry: Industry | str,
        job_description: str | None = None,
    ) -> ExtractionResult:
        start_time = time.perf_counter()
        industry = Industry.from_label(industry)
        snapshot = self._snapshot
        ontology = snapshot.ontology

        logger.info("Starting skill extraction for industry: %s", industry.value)

        normalized, tokens = preprocess(text)

        # The AI call is the only blocking step; let it overlap with the regex work.
        # Yielding once lets the task send its request before the CPU-bound stages run.
        ai_task = asyncio.create_task(self._ai.extract(normalized, industry, ontology))
        try:
            await asyncio.sleep(0)
            pattern_matches = self._patterns.extract(normalized, industry, ontology)
            ontology_matches = self._ontology_matcher.match(normalized, industry, ontology)
        except BaseException:
            ai_task.cancel()
            raise
        ai_matches = await ai_task

        fused = fuse_matches(pattern_matches, ai_matches, ontology_matches)
        matches = self._validator.validate(fused, normalized, job_description)

        clusters = analyze_clusters(matches, ontology.compound_skills)

        jd_skills: list[str] = []
        if job_description:
            jd_matches = self._patterns.extract(normalize_text(job_description), industry, ontology)
            jd_skills = [m.keyword for m in jd_matches]
        trending = snapshot.trending_for(industry)
        missing = find_missing_critical_skills(matches, trending, jd_skills)
        emerging = find_emerging_skills(matches, trending)

        confidence = sum(m.confidence_score for m in matches) / len(matches) if matches else 0.0
        elapsed_ms = int((time.perf_counter() - start_time) * 1000)

        logger.info(
            "Skill extraction finished: %d skills, %d clusters in %dms",
            len(matches), len(clusters), elapsed_ms,
        )

        return ExtractionResult(
            matches=matches,
            skill_clusters=clusters,
            missing_critical_skills=missing,
            emerging_skills=emerging,
            confidence_score=confidence,
            metadata=ExtractionMetadata(
                total_words_processed=len(tokens),
                technical_density=technical_density(tokens, ontology.is_known),
                avg_confidence_score=confidence,
                processing_time_ms=elapsed_ms,
                ai_model_used=self._ai.model if self._ai.enabled else "",
                ai_signal_used=bool(ai_matches),
                extraction_version=EXTRACTION_VERSION,
                snapshot_version=snapshot.version,
            ),
        )
