"""Pydantic contracts shared by the skill extraction stages."""

from models.schemas.extraction_result import ExtractionMetadata, ExtractionResult
from models.schemas.knowledge import Industry, SkillNode, TrendingSkill
from models.schemas.skill_cluster import ClusterType, SkillCluster
from models.schemas.skill_match import MatchType, SkillLevel, SkillMatch

__all__ = [
    "ClusterType",
    "ExtractionMetadata",
    "ExtractionResult",
    "Industry",
    "MatchType",
    "SkillCluster",
    "SkillLevel",
    "SkillMatch",
    "SkillNode",
    "TrendingSkill",
]
