"""Detect known compound skill stacks in the final match set."""

from collections.abc import Mapping, Sequence

from models.schemas.skill_cluster import ClusterType, SkillCluster
from models.schemas.skill_match import SkillMatch
from services.extraction.text_normalizer import normalized_key

CLUSTER_TYPES: dict[str, ClusterType] = {
    "full_stack": ClusterType.WEB_DEVELOPMENT,
    "data_science": ClusterType.DATA_SCIENCE,
    "devops": ClusterType.DEVOPS,
    "mobile": ClusterType.MOBILE_STACK,
    "cloud": ClusterType.CLOUD_PLATFORM,
    "security": ClusterType.SECURITY_STACK,
    "database": ClusterType.DATABASE_CLUSTER,
}


def cluster_type_for(cluster_name: str) -> ClusterType:
    return CLUSTER_TYPES.get(cluster_name, ClusterType.TECHNICAL_STACK)


def analyze_clusters(
    matches: list[SkillMatch],
    compound_skills: Mapping[str, Sequence[str]],
) -> list[SkillCluster]:
    """One cluster per compound stack with at least one member present.

    completeness = (found / required) * mean confidence of the found members.
    Members are matched on normalized form only; synonyms do not count.
    """
    by_form = {m.normalized_form: m for m in matches}

    clusters = []
    for cluster_name, required in compound_skills.items():
        keys = list(dict.fromkeys(normalized_key(r) for r in required))
        found = [by_form[k] for k in keys if k in by_form]
        if not found:
            continue
        coverage = len(found) / len(keys)
        mean_confidence = sum(m.confidence_score for m in found) / len(found)
        clusters.append(SkillCluster(
            cluster_name=cluster_name,
            cluster_type=cluster_type_for(cluster_name),
            skills=[m.keyword for m in found],
            completeness_score=min(1.0, coverage * mean_confidence),
        ))
    return clusters
