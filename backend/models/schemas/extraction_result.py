"""Aggregate output of one extraction call."""

from pydantic import BaseModel

from models.schemas.skill_cluster import SkillCluster
from models.schemas.skill_match import SkillMatch


class ExtractionMetadata(BaseModel):
    total_words_processed: int = 0
    technical_density: float = 0.0  # 0.0-1.0 share of technical tokens
    avg_confidence_score: float = 0.0
    processing_time_ms: int = 0
    ai_model_used: str = ""  # empty when no AI signal was requested
    ai_signal_used: bool = False
    extraction_version: str = ""
    snapshot_version: str = ""


class ExtractionResult(BaseModel):
    """Deduplicated, confidence-ranked skills plus derived structures.

    ``matches`` is unique by ``normalized_form`` and keeps the fusion ranking
    (confidence * context relevance * weight, highest first, taken before
    context validation adjusted the scores).
    """
    matches: list[SkillMatch] = []
    skill_clusters: list[SkillCluster] = []
    missing_critical_skills: list[str] = []  # at most 10, alphabetical
    emerging_skills: list[str] = []
    confidence_score: float = 0.0  # mean of match confidences
    metadata: ExtractionMetadata = ExtractionMetadata()
