"""Shared dependencies for API routes."""

import logging

from config import settings
from services.extraction import SkillExtractionEngine, build_default_snapshot, load_snapshot
from services.gemini_client import GeminiClient, get_client

logger = logging.getLogger(__name__)

_engine: SkillExtractionEngine | None = None


def get_engine() -> SkillExtractionEngine:
    """Process-wide engine, built on first use from settings."""
    global _engine
    if _engine is None:
        llm_client = None
        if settings.ai_extraction_enabled:
            client = get_client()
            if client is not None:
                llm_client = GeminiClient(client)

        if settings.knowledge_snapshot_path:
            snapshot = load_snapshot(settings.knowledge_snapshot_path)
        else:
            snapshot = build_default_snapshot()

        _engine = SkillExtractionEngine.from_settings(settings, llm_client, snapshot)
        logger.info(
            "Skill extraction engine ready (snapshot %s, AI %s)",
            snapshot.version, "on" if llm_client else "off",
        )
    return _engine
