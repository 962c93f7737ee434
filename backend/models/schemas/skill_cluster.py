"""Compound skill-stack detected in the final match set."""

from enum import Enum

from pydantic import BaseModel, Field


class ClusterType(str, Enum):
    TECHNICAL_STACK = "technical_stack"
    CLOUD_PLATFORM = "cloud_platform"
    DATA_SCIENCE = "data_science"
    DEVOPS = "devops"
    MOBILE_STACK = "mobile_stack"
    WEB_DEVELOPMENT = "web_development"
    DATABASE_CLUSTER = "database_cluster"
    SECURITY_STACK = "security_stack"


class SkillCluster(BaseModel):
    cluster_name: str
    cluster_type: ClusterType = ClusterType.TECHNICAL_STACK
    skills: list[str] = []  # found subset, as written in the matches
    completeness_score: float = Field(default=0.0, ge=0.0, le=1.0)
