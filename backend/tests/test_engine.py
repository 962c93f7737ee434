"""End-to-end tests for the skill extraction engine (LLM stubbed)."""

import asyncio
import json

import pytest

from config import Settings
from conftest import StubLLMClient
from models.schemas.knowledge import Industry
from models.schemas.skill_cluster import ClusterType
from models.schemas.skill_match import MatchType
from services.extraction.engine import EXTRACTION_VERSION, SkillExtractionEngine
from services.extraction.knowledge_base import DEFAULT_SNAPSHOT_VERSION, snapshot_from_dict
from services.extraction.pattern_extractor import PatternExtractor
from services.extraction.text_normalizer import normalized_key

pytestmark = pytest.mark.integration

RESUME = (
    "Senior engineer with 5 years of experience in Python, Django and PostgreSQL. "
    "Deployed services on AWS with Docker and k8s. Built UIs with React and Node.js. "
    "No experience with Java."
)

AI_REPLY = json.dumps([
    {"skill": "Python", "category": "programming_language", "confidence": 0.9, "context": "5 years"},
    {"skill": "GraphQL", "category": "api", "confidence": 0.85, "context": "apis"},
    {"skill": "Docker", "category": "devops", "confidence": 0.8},
])


def _by_form(result):
    return {m.normalized_form: m for m in result.matches}


@pytest.mark.asyncio
async def test_result_invariants():
    engine = SkillExtractionEngine(StubLLMClient(AI_REPLY))
    result = await engine.extract(RESUME, Industry.TECHNOLOGY, "Python, Terraform and Go")

    forms = [m.normalized_form for m in result.matches]
    assert len(forms) == len(set(forms))
    for match in result.matches:
        assert 0.0 <= match.confidence_score <= 1.0
        assert match.confidence_score >= engine.confidence_threshold
    assert 0.0 <= result.confidence_score <= 1.0
    assert len(result.missing_critical_skills) <= 10
    assert result.missing_critical_skills == sorted(result.missing_critical_skills)


@pytest.mark.asyncio
async def test_negated_skill():
    text = "I have no experience with Java"
    [baseline] = PatternExtractor().extract("i have no experience with java", Industry.TECHNOLOGY,
                                            SkillExtractionEngine().snapshot.ontology)

    lenient = await SkillExtractionEngine(confidence_threshold=0.0).extract(text, "technology")
    java = _by_form(lenient)["java"]
    assert java.confidence_score <= 0.3 * baseline.confidence_score

    default = await SkillExtractionEngine().extract(text, "technology")
    assert "java" not in _by_form(default)


@pytest.mark.asyncio
async def test_pattern_wins_over_ontology():
    result = await SkillExtractionEngine().extract(
        "Containerized services with Docker and docker compose", Industry.TECHNOLOGY,
    )
    docker = _by_form(result)[normalized_key("docker")]
    assert docker.match_type == MatchType.EXACT
    assert docker.confidence_score >= 0.8
    assert docker.confidence_score == pytest.approx(0.88)


@pytest.mark.asyncio
async def test_full_stack_cluster():
    result = await SkillExtractionEngine().extract("Built apps with JavaScript, React and Node.js", "technology")
    [cluster] = result.skill_clusters
    assert cluster.cluster_name == "full_stack"
    assert cluster.cluster_type == ClusterType.WEB_DEVELOPMENT
    assert cluster.skills == ["javascript", "react", "nodejs"]
    assert cluster.completeness_score == pytest.approx(0.75 * 0.8)


@pytest.mark.asyncio
async def test_deterministic_for_identical_input():
    engine = SkillExtractionEngine(StubLLMClient(AI_REPLY))
    exclude = {"metadata": {"processing_time_ms"}}

    first = await engine.extract(RESUME, Industry.TECHNOLOGY, "Python and Terraform")
    second = await engine.extract(RESUME, Industry.TECHNOLOGY, "Python and Terraform")

    assert first.model_dump_json(exclude=exclude) == second.model_dump_json(exclude=exclude)


@pytest.mark.asyncio
async def test_empty_input():
    result = await SkillExtractionEngine().extract("", "technology")
    assert result.matches == []
    assert result.skill_clusters == []
    assert result.confidence_score == 0.0
    assert result.metadata.total_words_processed == 0
    assert result.metadata.technical_density == 0.0


@pytest.mark.asyncio
async def test_job_description_corroboration():
    result = await SkillExtractionEngine().extract("Experienced with Python", "technology", "We need Python")
    assert _by_form(result)["python"].confidence_score == pytest.approx(0.96)


@pytest.mark.asyncio
async def test_job_description_skills_feed_missing_list():
    result = await SkillExtractionEngine().extract("Experienced with Python", "technology", "Python and Terraform")
    assert "terraform" in result.missing_critical_skills
    assert "python" not in result.missing_critical_skills


@pytest.mark.asyncio
async def test_missing_skills_are_unique_by_normalized_form():
    result = await SkillExtractionEngine().extract("I write Python.", "technology", "We use Next.js daily.")
    assert result.missing_critical_skills == ["kubernetes", "next.js", "terraform"]


@pytest.mark.asyncio
async def test_unknown_industry_uses_ontology_only():
    result = await SkillExtractionEngine().extract("Deployed on k8s with python", "underwater basket weaving")
    assert [m.keyword for m in result.matches] == ["kubernetes"]
    assert result.matches[0].match_type == MatchType.SEMANTIC
    assert result.missing_critical_skills == []
    assert result.emerging_skills == []


@pytest.mark.asyncio
async def test_emerging_skills():
    result = await SkillExtractionEngine().extract("Systems programming in Rust", Industry.TECHNOLOGY)
    assert result.emerging_skills == ["rust"]


@pytest.mark.asyncio
async def test_ai_signal_is_fused():
    engine = SkillExtractionEngine(StubLLMClient(json.dumps([
        {"skill": "Python", "category": "programming_language", "confidence": 0.7},
        {"skill": "GraphQL", "category": "api", "confidence": 0.85},
    ])))
    result = await engine.extract("Python developer building GraphQL APIs", Industry.TECHNOLOGY)

    matches = _by_form(result)
    assert matches["python"].match_type == MatchType.EXACT
    assert matches["python"].confidence_score == pytest.approx(0.88)
    assert matches["graphql"].match_type == MatchType.SEMANTIC
    assert matches["graphql"].confidence_score == pytest.approx(0.85)
    assert result.metadata.ai_signal_used
    assert result.metadata.ai_model_used == "gemini-2.5-flash"


@pytest.mark.asyncio
@pytest.mark.parametrize("client", [
    StubLLMClient(error=RuntimeError("quota exceeded")),
    StubLLMClient("not json at all"),
    StubLLMClient(AI_REPLY, delay=1.0),
])
async def test_ai_failure_degrades_to_deterministic_result(client):
    baseline = await SkillExtractionEngine().extract(RESUME, Industry.TECHNOLOGY)
    degraded = await SkillExtractionEngine(client, ai_timeout=0.05).extract(RESUME, Industry.TECHNOLOGY)

    assert [m.model_dump() for m in degraded.matches] == [m.model_dump() for m in baseline.matches]
    assert not degraded.metadata.ai_signal_used
    assert degraded.metadata.ai_model_used == "gemini-2.5-flash"
    assert baseline.metadata.ai_model_used == ""


@pytest.mark.asyncio
async def test_metadata():
    result = await SkillExtractionEngine().extract("Python developer", Industry.TECHNOLOGY)
    meta = result.metadata
    assert meta.total_words_processed == 3  # python, developer, develop
    assert meta.technical_density == pytest.approx(1 / 3)
    assert meta.avg_confidence_score == result.confidence_score
    assert meta.extraction_version == EXTRACTION_VERSION
    assert meta.snapshot_version == DEFAULT_SNAPSHOT_VERSION
    assert meta.processing_time_ms >= 0


@pytest.mark.asyncio
async def test_refresh_snapshot_applies_to_later_calls():
    engine = SkillExtractionEngine()
    text = "Wrote elixir lang services"
    assert (await engine.extract(text, Industry.OTHER)).matches == []

    engine.refresh_snapshot(snapshot_from_dict({
        "version": "test-v2",
        "skills": [{"name": "elixir", "synonyms": ["elixir lang"]}],
    }))
    result = await engine.extract(text, Industry.OTHER)

    assert [m.keyword for m in result.matches] == ["elixir"]
    assert result.metadata.snapshot_version == "test-v2"


@pytest.mark.asyncio
async def test_in_flight_call_keeps_its_snapshot():
    engine = SkillExtractionEngine(StubLLMClient("[]", delay=0.05))
    task = asyncio.create_task(engine.extract("python", Industry.TECHNOLOGY))
    await asyncio.sleep(0)

    engine.refresh_snapshot(snapshot_from_dict({"version": "test-v3"}))
    result = await task

    assert result.metadata.snapshot_version == DEFAULT_SNAPSHOT_VERSION
    assert engine.snapshot.version == "test-v3"


@pytest.mark.parametrize("kwargs", [
    {"confidence_threshold": 1.2},
    {"confidence_threshold": -0.5},
    {"context_window_size": 0},
    {"ai_timeout": 0},
])
def test_invalid_configuration(kwargs):
    with pytest.raises(ValueError):
        SkillExtractionEngine(**kwargs)


def test_from_settings():
    settings = Settings(confidence_threshold=0.7, context_window_size=40, ai_model="gemini-test",
                        ai_timeout_seconds=5.0)
    engine = SkillExtractionEngine.from_settings(settings)
    assert engine.confidence_threshold == 0.7
    assert engine.snapshot.version == DEFAULT_SNAPSHOT_VERSION


@pytest.mark.asyncio
async def test_ai_request_is_sent_before_regex_stage(monkeypatch):
    client = StubLLMClient("[]", delay=0.01)
    calls_seen_by_regex = []
    original_extract = PatternExtractor.extract

    def recording_extract(self, text, industry, ontology):
        calls_seen_by_regex.append(len(client.calls))
        return original_extract(self, text, industry, ontology)

    monkeypatch.setattr(PatternExtractor, "extract", recording_extract)
    await SkillExtractionEngine(client).extract("Python developer", Industry.TECHNOLOGY)

    assert calls_seen_by_regex == [1]
