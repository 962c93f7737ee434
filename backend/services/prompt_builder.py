"""Prompt templates for Gemini API calls."""


def build_skill_extraction_prompt(text: str, industry: str) -> str:
    """Ask for a JSON array of skills found in the document text."""
    return f"""You are an expert technical recruiter and skills analyst.

Extract technical skills, tools, technologies and certifications from this text for the {industry} industry.
Only list skills the text actually claims; ignore skills the author says they lack.

TEXT:
---
{text}
---

Respond with ONLY a valid JSON array (no markdown, no code fences) of objects in this exact structure:
[
  {{
    "skill": "<skill name as written>",
    "category": "<short category, e.g. programming_language, framework, database, cloud_platform>",
    "confidence": <number 0-1, how certain you are the author has this skill>,
    "context": "<short phrase from the text that mentions the skill>"
  }}
]"""
