"""Ontology lookups: synonym hits and near-miss spellings of known skills.

Lower confidence than the pattern rules because synonym containment and
edit-distance similarity are weaker evidence than a curated regex.
"""

import logging

from rapidfuzz import fuzz

from models.schemas.knowledge import Industry
from models.schemas.skill_match import MatchType, SkillMatch
from services.extraction.ontology import SkillOntology
from services.extraction.text_normalizer import normalize_text, raw_tokens

logger = logging.getLogger(__name__)

SEMANTIC_CONFIDENCE = 0.75
SEMANTIC_WEIGHT = 0.7
SEMANTIC_CONTEXT_RELEVANCE = 0.7

FUZZY_CONFIDENCE = 0.65
FUZZY_WEIGHT = 0.6
FUZZY_CONTEXT_RELEVANCE = 0.6

# Fuzzy match threshold (0-100). 90 catches "kubernates" -> "kubernetes"
FUZZY_THRESHOLD = 90
MIN_FUZZY_LENGTH = 6


class OntologyMatcher:
    def __init__(self, fuzzy_threshold: int = FUZZY_THRESHOLD, min_fuzzy_length: int = MIN_FUZZY_LENGTH) -> None:
        self.fuzzy_threshold = fuzzy_threshold
        self.min_fuzzy_length = min_fuzzy_length

    def match(self, text: str, industry: Industry, ontology: SkillOntology) -> list[SkillMatch]:
        """One match per ontology node found in normalized text, in ontology order."""
        if not text:
            return []

        matches: list[SkillMatch] = []
        found: set[str] = set()

        for key, node in ontology.nodes.items():
            for synonym, pattern in ontology.synonym_patterns(key):
                hit = pattern.search(text)
                if hit is None:
                    continue
                matches.append(SkillMatch(
                    keyword=normalize_text(node.name),
                    normalized_form=key,
                    category=node.category,
                    confidence_score=SEMANTIC_CONFIDENCE,
                    context_relevance=SEMANTIC_CONTEXT_RELEVANCE,
                    weight=SEMANTIC_WEIGHT,
                    match_type=MatchType.SEMANTIC,
                    context_phrases=[synonym],
                    semantic_variations=list(node.synonyms),
                    industry_relevance=node.industry_relevance.get(industry.value, 0.5),
                    word_position=hit.start(),
                ))
                found.add(key)
                break

        matches.extend(self._fuzzy_matches(text, industry, ontology, found))
        logger.debug("Ontology matching found %d skills", len(matches))
        return matches

    def _fuzzy_matches(
        self,
        text: str,
        industry: Industry,
        ontology: SkillOntology,
        found: set[str],
    ) -> list[SkillMatch]:
        tokens = [(t, pos) for t, pos in raw_tokens(text) if len(t) >= self.min_fuzzy_length]
        if not tokens:
            return []

        token_set = {t for t, _ in tokens}
        matches: list[SkillMatch] = []
        for key, node in ontology.nodes.items():
            name = normalize_text(node.name)
            # exact names belong to the pattern rules
            if key in found or name in token_set or " " in name or len(name) < self.min_fuzzy_length:
                continue
            for token, position in tokens:
                if fuzz.ratio(name, token) >= self.fuzzy_threshold:
                    matches.append(SkillMatch(
                        keyword=name,
                        normalized_form=key,
                        category=node.category,
                        confidence_score=FUZZY_CONFIDENCE,
                        context_relevance=FUZZY_CONTEXT_RELEVANCE,
                        weight=FUZZY_WEIGHT,
                        match_type=MatchType.FUZZY,
                        context_phrases=[token],
                        semantic_variations=list(node.synonyms),
                        industry_relevance=node.industry_relevance.get(industry.value, 0.5),
                        word_position=position,
                    ))
                    found.add(key)
                    break
        return matches
