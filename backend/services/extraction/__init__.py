"""Skill extraction: pattern, ontology and AI signals fused into one ranked result."""

from services.extraction.engine import SkillExtractionEngine
from services.extraction.knowledge_base import KnowledgeSnapshot, build_default_snapshot, load_snapshot
from services.extraction.ontology import OntologyError, SkillOntology
from services.extraction.pattern_extractor import PatternConfigError, PatternRuleSet

__all__ = [
    "KnowledgeSnapshot",
    "OntologyError",
    "PatternConfigError",
    "PatternRuleSet",
    "SkillExtractionEngine",
    "SkillOntology",
    "build_default_snapshot",
    "load_snapshot",
]
