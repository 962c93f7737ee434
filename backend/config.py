import os
from pydantic_settings import BaseSettings


def _parse_cors_origins() -> list[str] | None:
    """Parse CORS_ORIGINS env var as comma-separated string or JSON list."""
    raw = os.environ.get("CORS_ORIGINS")
    if not raw:
        return None
    if raw.startswith("["):
        import json
        return json.loads(raw)
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings(BaseSettings):
    gemini_api_key: str = ""
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]
    debug: bool = False
    log_level: str = "INFO"

    # AI extraction signal
    ai_extraction_enabled: bool = True
    ai_model: str = "gemini-2.5-flash"
    ai_timeout_seconds: float = 30.0

    # Extraction tuning
    confidence_threshold: float = 0.6
    context_window_size: int = 50  # characters either side of a match
    knowledge_snapshot_path: str = ""  # JSON file; empty means the built-in data

    # Request limits
    max_text_length: int = 50000
    max_job_description_length: int = 10000

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "protected_namespaces": ("settings_",)}


_cors_override = _parse_cors_origins()
settings = Settings(**{"cors_origins": _cors_override} if _cors_override else {})
