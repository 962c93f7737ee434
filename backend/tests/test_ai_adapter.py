"""Tests for the AI extraction adapter. The LLM is always stubbed."""

import json

import pytest

from conftest import StubLLMClient
from models.schemas.knowledge import Industry
from models.schemas.skill_match import MatchType
from services.extraction.ai_adapter import AISkillExtractor, CandidateSkill, parse_candidates


def _reply(*items):
    return json.dumps(list(items))


@pytest.mark.asyncio
async def test_reply_becomes_semantic_matches(ontology):
    client = StubLLMClient("```json\n" + _reply(
        {"skill": "Python", "category": "programming_language", "confidence": 0.9, "context": "python apps"},
    ) + "\n```")
    extractor = AISkillExtractor(client, model="test-model")

    [match] = await extractor.extract("i love python apps", Industry.TECHNOLOGY, ontology)

    assert match.keyword == "Python"
    assert match.normalized_form == "python"
    assert match.match_type == MatchType.SEMANTIC
    assert match.confidence_score == 0.9
    assert match.weight == pytest.approx(0.81)
    assert match.context_relevance == 0.8
    assert match.industry_relevance == 0.9
    assert match.context_phrases == ["python apps"]
    assert match.semantic_variations == ["py", "python3", "cpython"]
    assert match.word_position == len("i love ")
    assert client.calls[0][0] == "test-model"
    assert "technology" in client.calls[0][1]


@pytest.mark.asyncio
async def test_chatty_reply_is_tolerated(ontology):
    client = StubLLMClient("Sure! Here are the skills:\n" + _reply(
        {"skill": "GraphQL", "category": "api", "confidence": 0.7},
    ) + "\nHope this helps.")
    matches = await AISkillExtractor(client).extract("graphql apis", Industry.TECHNOLOGY, ontology)
    assert [m.keyword for m in matches] == ["GraphQL"]


@pytest.mark.asyncio
async def test_malformed_items_are_skipped(ontology):
    client = StubLLMClient(_reply(
        {"skill": "", "category": "lang", "confidence": 0.5},
        {"skill": "Go", "category": "lang", "confidence": "very high"},
        {"category": "lang", "confidence": 0.5},
        "rust",
        {"skill": "Rust", "category": "lang", "confidence": 1.7},
    ))
    [match] = await AISkillExtractor(client).extract("rust services", Industry.TECHNOLOGY, ontology)
    assert match.keyword == "Rust"
    assert match.confidence_score == 1.0


@pytest.mark.asyncio
async def test_duplicate_skills_collapse(ontology):
    client = StubLLMClient(_reply(
        {"skill": "Docker", "category": "devops", "confidence": 0.9},
        {"skill": "docker", "category": "devops", "confidence": 0.6},
    ))
    matches = await AISkillExtractor(client).extract("docker", Industry.TECHNOLOGY, ontology)
    assert len(matches) == 1
    assert matches[0].confidence_score == 0.9


@pytest.mark.asyncio
async def test_skill_not_in_text_gets_position_zero(ontology):
    client = StubLLMClient(_reply({"skill": "Kafka", "category": "messaging", "confidence": 0.8}))
    [match] = await AISkillExtractor(client).extract("event streaming", Industry.TECHNOLOGY, ontology)
    assert match.word_position == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("reply", ["", "I cannot help with that.", "[not json]", '{"skill": "x"}'])
async def test_unusable_reply_means_no_signal(ontology, reply):
    matches = await AISkillExtractor(StubLLMClient(reply)).extract("python", Industry.TECHNOLOGY, ontology)
    assert matches == []


@pytest.mark.asyncio
async def test_client_error_means_no_signal(ontology):
    client = StubLLMClient(error=ConnectionError("network down"))
    assert await AISkillExtractor(client).extract("python", Industry.TECHNOLOGY, ontology) == []


@pytest.mark.asyncio
async def test_timeout_means_no_signal(ontology):
    client = StubLLMClient(_reply({"skill": "Python", "category": "lang", "confidence": 0.9}), delay=1.0)
    extractor = AISkillExtractor(client, timeout=0.05)
    assert await extractor.extract("python", Industry.TECHNOLOGY, ontology) == []


@pytest.mark.asyncio
async def test_no_client_is_disabled(ontology):
    extractor = AISkillExtractor(None)
    assert not extractor.enabled
    assert await extractor.extract("python", Industry.TECHNOLOGY, ontology) == []


@pytest.mark.asyncio
async def test_empty_text_skips_call(ontology):
    client = StubLLMClient()
    assert await AISkillExtractor(client).extract("", Industry.TECHNOLOGY, ontology) == []
    assert client.calls == []


def test_timeout_must_be_positive():
    with pytest.raises(ValueError):
        AISkillExtractor(StubLLMClient(), timeout=0)


def test_parse_candidates_coerces_context():
    [candidate] = parse_candidates([{"skill": " SQL ", "category": "db", "confidence": 0.5, "context": None}])
    assert candidate == CandidateSkill(skill="SQL", category="db", confidence=0.5, context="")
