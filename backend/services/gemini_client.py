"""Google Gemini API wrapper: the LLM collaborator behind AI skill extraction."""

import json
import logging

from google import genai
from google.genai import types

from config import settings

logger = logging.getLogger(__name__)

_client: genai.Client | None = None


def get_client() -> genai.Client | None:
    global _client
    if not settings.gemini_api_key:
        logger.warning("No GEMINI_API_KEY set - Gemini features disabled")
        return None
    if _client is None:
        _client = genai.Client(api_key=settings.gemini_api_key)
    return _client


class GeminiClient:
    """Async ``generate(model, prompt) -> str`` over the Gemini API.

    Raises on any failure; callers decide how to degrade.
    """

    def __init__(self, client: genai.Client | None = None, temperature: float = 0.2) -> None:
        self._client = client
        self.temperature = temperature

    async def generate(self, model: str, prompt: str) -> str:
        client = self._client or get_client()
        if client is None:
            raise RuntimeError("Gemini client is not configured")

        response = await client.aio.models.generate_content(
            model=model,
            contents=prompt,
            config=types.GenerateContentConfig(
                temperature=self.temperature,
                max_output_tokens=4096,
            ),
        )
        return (response.text or "").strip()


def _strip_code_fences(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else text[3:]
        if text.endswith("```"):
            text = text[:-3]
        text = text.strip()
    return text


def extract_json_array(raw: str) -> list | None:
    """Pull the JSON array out of a chatty model reply.

    Takes everything between the first ``[`` and the last ``]``. Returns
    None when there is no array or it does not parse.
    """
    text = _strip_code_fences(raw or "")
    start = text.find("[")
    end = text.rfind("]")
    if start == -1 or end <= start:
        return None

    try:
        parsed = json.loads(text[start:end + 1])
    except json.JSONDecodeError as e:
        logger.info("Failed to parse model reply as a JSON array: %s", e)
        return None
    return parsed if isinstance(parsed, list) else None
