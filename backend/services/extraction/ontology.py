"""Skill ontology: known skills, their synonyms and compound skill stacks.

Lookups never fail: unknown names fall back to neutral defaults so callers
do not need to special-case missing entries.
"""

import logging
import re
from collections.abc import Iterable, Mapping, Sequence
from types import MappingProxyType

from models.schemas.knowledge import Industry, SkillNode
from services.extraction.text_normalizer import normalize_text, normalized_key

logger = logging.getLogger(__name__)

DEFAULT_RELEVANCE = 0.5


class OntologyError(ValueError):
    """Raised when ontology or compound-skill data is malformed."""


def _synonym_pattern(synonym: str) -> re.Pattern:
    # Token boundaries keep "py" from firing inside "python"
    return re.compile(rf"(?<![a-z0-9.#]){re.escape(synonym)}(?![a-z0-9])")


class SkillOntology:
    """Read-only lookup table ``normalized name -> SkillNode``."""

    def __init__(
        self,
        nodes: Iterable[SkillNode],
        compound_skills: Mapping[str, Sequence[str]] | None = None,
    ) -> None:
        table: dict[str, SkillNode] = {}
        patterns: dict[str, tuple[tuple[str, re.Pattern], ...]] = {}
        for node in nodes:
            key = normalized_key(node.name)
            if not key:
                raise OntologyError("Skill node with blank name")
            if key in table:
                raise OntologyError(f"Duplicate skill node: {node.name!r}")
            table[key] = node
            synonyms = []
            for synonym in node.synonyms:
                text = normalize_text(synonym)
                if text:
                    synonyms.append((text, _synonym_pattern(text)))
            patterns[key] = tuple(synonyms)

        compounds: dict[str, tuple[str, ...]] = {}
        for cluster_name, required in (compound_skills or {}).items():
            if not cluster_name or not cluster_name.strip():
                raise OntologyError("Compound skill with blank name")
            if isinstance(required, str) or not required:
                raise OntologyError(f"Compound skill {cluster_name!r} needs a non-empty list")
            names = tuple(str(r).strip().lower() for r in required)
            if not all(names):
                raise OntologyError(f"Compound skill {cluster_name!r} has a blank member")
            # one entry per normalized form; the first spelling wins
            unique: dict[str, str] = {}
            for name in names:
                unique.setdefault(normalized_key(name), name)
            compounds[cluster_name] = tuple(unique.values())

        self._nodes = MappingProxyType(table)
        self._synonym_patterns = MappingProxyType(patterns)
        self._compound_skills = MappingProxyType(compounds)
        logger.debug("Ontology built: %d skills, %d compound stacks", len(table), len(compounds))

    @property
    def nodes(self) -> Mapping[str, SkillNode]:
        return self._nodes

    @property
    def compound_skills(self) -> Mapping[str, tuple[str, ...]]:
        return self._compound_skills

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.is_known(name)

    def get(self, name: str) -> SkillNode | None:
        """Look up by normalized key or by any spelling of the skill name."""
        node = self._nodes.get(name)
        return node if node is not None else self._nodes.get(normalized_key(name))

    def is_known(self, name: str) -> bool:
        return self.get(name) is not None

    def synonyms_of(self, name: str) -> tuple[str, ...]:
        node = self.get(name)
        return node.synonyms if node else ()

    def synonym_patterns(self, key: str) -> tuple[tuple[str, re.Pattern], ...]:
        """Compiled synonym matchers for an already-normalized node key."""
        return self._synonym_patterns.get(key, ())

    def industry_relevance(self, name: str, industry: Industry) -> float:
        node = self.get(name)
        if node is None:
            return DEFAULT_RELEVANCE
        return node.industry_relevance.get(industry.value, DEFAULT_RELEVANCE)

    @classmethod
    def from_dict(cls, data: Mapping) -> "SkillOntology":
        """Build from ``{"skills": [...], "compound_skills": {...}}``."""
        try:
            nodes = [SkillNode.model_validate(item) for item in data.get("skills", [])]
        except (TypeError, ValueError) as e:
            raise OntologyError(f"Invalid skill node data: {e}") from e
        compounds = data.get("compound_skills", {})
        if not isinstance(compounds, Mapping):
            raise OntologyError("compound_skills must be an object")
        return cls(nodes, compounds)
