"""Built-in knowledge data and the immutable snapshot passed to each extraction.

A snapshot bundles the skill ontology with per-industry trending skills.
Refreshing means building a new snapshot and handing it to the engine; an
existing snapshot is never mutated.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from models.schemas.knowledge import Industry, SkillNode, TrendingSkill
from services.extraction.ontology import OntologyError, SkillOntology

logger = logging.getLogger(__name__)

DEFAULT_SNAPSHOT_VERSION = "builtin-2024.1"


def _node(name, category, synonyms=(), prerequisites=(), related=(), relevance=None,
          difficulty=0.5, demand=0.5) -> SkillNode:
    return SkillNode(
        name=name,
        category=category,
        synonyms=synonyms,
        prerequisites=prerequisites,
        related_skills=related,
        industry_relevance=relevance or {},
        difficulty_level=difficulty,
        market_demand=demand,
    )


DEFAULT_SKILL_NODES: tuple[SkillNode, ...] = (
    _node("react", "frontend_framework", ("reactjs", "react.js"),
          ("javascript", "html", "css"), ("redux", "next.js", "typescript"),
          {"technology": 0.95}, 0.7, 0.9),
    _node("python", "programming_language", ("py", "python3", "cpython"),
          (), ("django", "flask", "pandas", "tensorflow"),
          {"technology": 0.9, "data_science": 0.95, "finance": 0.8}, 0.5, 0.95),
    _node("aws", "cloud_platform", ("amazon web services", "ec2", "amazon s3"),
          ("linux", "networking"), ("docker", "kubernetes", "terraform"),
          {"technology": 0.9, "business": 0.6}, 0.8, 0.9),
    _node("javascript", "programming_language", ("js", "es6", "ecmascript"),
          (), ("typescript", "react", "node.js"), {"technology": 0.9}, 0.5, 0.9),
    _node("typescript", "programming_language", ("ts",),
          ("javascript",), ("angular", "react"), {"technology": 0.85}, 0.6, 0.85),
    _node("node.js", "backend_runtime", ("node", "node js"),
          ("javascript",), ("express", "npm"), {"technology": 0.85}, 0.6, 0.85),
    _node("mongodb", "database", ("mongo", "mongoose"),
          (), ("node.js", "express"), {"technology": 0.75}, 0.5, 0.7),
    _node("postgresql", "database", ("postgres", "psql"),
          ("sql",), ("mysql",), {"technology": 0.8, "finance": 0.6}, 0.6, 0.8),
    _node("docker", "devops_tool", ("docker compose", "docker-compose", "dockerfile"),
          ("linux",), ("kubernetes", "jenkins"), {"technology": 0.9}, 0.6, 0.9),
    _node("kubernetes", "devops_tool", ("k8s", "kubectl", "kube"),
          ("docker",), ("helm", "terraform"), {"technology": 0.85}, 0.8, 0.9),
    _node("terraform", "infrastructure_as_code", ("hcl", "terraform cloud"),
          (), ("aws", "ansible"), {"technology": 0.8}, 0.7, 0.85),
    _node("jenkins", "ci_cd", ("jenkinsfile",),
          (), ("docker", "git"), {"technology": 0.7}, 0.5, 0.7),
    _node("pandas", "data_library", ("dataframes",),
          ("python",), ("numpy", "jupyter"), {"data_science": 0.95, "finance": 0.7}, 0.5, 0.85),
    _node("numpy", "data_library", ("ndarray",),
          ("python",), ("pandas", "scipy"), {"data_science": 0.9}, 0.5, 0.8),
    _node("scikit-learn", "machine_learning", ("sklearn", "scikit"),
          ("python", "numpy"), ("pandas",), {"data_science": 0.9}, 0.6, 0.8),
    _node("tensorflow", "machine_learning", ("tf2", "tensor flow", "keras"),
          ("python",), ("pytorch",), {"data_science": 0.9, "technology": 0.8}, 0.8, 0.8),
    _node("machine learning", "machine_learning", ("ml", "statistical learning"),
          ("python", "statistics"), ("deep learning",),
          {"data_science": 0.95, "technology": 0.85, "finance": 0.7}, 0.8, 0.9),
    _node("flutter", "mobile_framework", ("dart flutter",),
          ("dart",), ("firebase",), {"technology": 0.7}, 0.6, 0.7),
    _node("salesforce", "crm", ("sfdc", "salesforce crm"),
          (), ("hubspot",), {"business": 0.85}, 0.5, 0.8),
    _node("epic", "ehr_system", ("epic systems", "epiccare"),
          (), ("cerner",), {"healthcare": 0.95}, 0.6, 0.85),
    _node("bloomberg", "financial_data", ("bloomberg terminal",),
          (), ("factset",), {"finance": 0.9}, 0.5, 0.8),
)

DEFAULT_COMPOUND_SKILLS: dict[str, tuple[str, ...]] = {
    "full_stack": ("javascript", "react", "node.js", "mongodb"),
    "data_science": ("python", "pandas", "numpy", "scikit-learn", "jupyter"),
    "devops": ("docker", "kubernetes", "jenkins", "aws", "terraform"),
    "mobile": ("flutter", "react native", "android", "ios"),
    "cloud": ("aws", "azure", "gcp"),
    "security": ("cissp", "comptia", "ceh"),
    "database": ("postgresql", "mysql", "mongodb", "redis"),
}


def _trend(name, trend, growth, demand) -> TrendingSkill:
    return TrendingSkill(name=name, trend_score=trend, growth_rate=growth, demand_level=demand)


DEFAULT_TRENDING_SKILLS: dict[Industry, tuple[TrendingSkill, ...]] = {
    Industry.TECHNOLOGY: (
        _trend("rust", 0.95, 0.8, 0.7),
        _trend("webassembly", 0.9, 0.9, 0.6),
        _trend("next.js", 0.88, 0.7, 0.8),
        _trend("svelte", 0.85, 0.75, 0.65),
        _trend("deno", 0.8, 0.6, 0.5),
        _trend("edge_computing", 0.9, 0.85, 0.7),
        _trend("kubernetes", 0.92, 0.6, 0.9),
        _trend("terraform", 0.88, 0.65, 0.85),
    ),
    Industry.DATA_SCIENCE: (
        _trend("pytorch", 0.92, 0.8, 0.85),
        _trend("machine learning", 0.9, 0.75, 0.9),
        _trend("dbt", 0.85, 0.8, 0.6),
    ),
    Industry.FINANCE: (
        _trend("python", 0.85, 0.6, 0.8),
        _trend("risk management", 0.7, 0.4, 0.85),
        _trend("blockchain", 0.82, 0.72, 0.5),
    ),
    Industry.HEALTHCARE: (
        _trend("ehr", 0.8, 0.5, 0.9),
        _trend("healthcare analytics", 0.86, 0.78, 0.75),
    ),
}


class KnowledgeSnapshot(BaseModel):
    """Immutable bundle of ontology and trending-skill data for one or more calls."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    version: str
    ontology: SkillOntology
    trending_skills: dict[Industry, tuple[TrendingSkill, ...]] = {}
    loaded_at: datetime

    def trending_for(self, industry: Industry) -> tuple[TrendingSkill, ...]:
        return self.trending_skills.get(industry, ())


def build_default_snapshot() -> KnowledgeSnapshot:
    return KnowledgeSnapshot(
        version=DEFAULT_SNAPSHOT_VERSION,
        ontology=SkillOntology(DEFAULT_SKILL_NODES, DEFAULT_COMPOUND_SKILLS),
        trending_skills=dict(DEFAULT_TRENDING_SKILLS),
        loaded_at=datetime.now(timezone.utc),
    )


def snapshot_from_dict(data: dict) -> KnowledgeSnapshot:
    """Build a snapshot from ``{"version", "skills", "compound_skills", "trending_skills"}``."""
    if not isinstance(data, dict):
        raise OntologyError("Knowledge snapshot must be a JSON object")
    ontology = SkillOntology.from_dict(data)

    trending: dict[Industry, tuple[TrendingSkill, ...]] = {}
    raw_trending = data.get("trending_skills", {})
    if not isinstance(raw_trending, dict):
        raise OntologyError("trending_skills must be an object keyed by industry")
    try:
        for label, items in raw_trending.items():
            industry = Industry.from_label(label)
            trending[industry] = trending.get(industry, ()) + tuple(
                TrendingSkill.model_validate(item) for item in items
            )
    except (TypeError, ValueError) as e:
        raise OntologyError(f"Invalid trending skill data: {e}") from e

    return KnowledgeSnapshot(
        version=str(data.get("version") or "unversioned"),
        ontology=ontology,
        trending_skills=trending,
        loaded_at=datetime.now(timezone.utc),
    )


def load_snapshot(path: str | Path) -> KnowledgeSnapshot:
    """Load a knowledge snapshot from a JSON file."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise OntologyError(f"Could not read knowledge snapshot {path}: {e}") from e
    snapshot = snapshot_from_dict(data)
    logger.info(
        "Loaded knowledge snapshot %s from %s (%d skills)",
        snapshot.version, path, len(snapshot.ontology),
    )
    return snapshot
