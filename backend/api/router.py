from fastapi import APIRouter, Depends, HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import get_engine
from config import settings
from models.requests import ExtractRequest
from models.schemas.extraction_result import ExtractionResult
from services.extraction import SkillExtractionEngine

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


@router.get("/health")
async def health(engine: SkillExtractionEngine = Depends(get_engine)):
    return {
        "status": "ok",
        "gemini_configured": bool(settings.gemini_api_key),
        "snapshot_version": engine.snapshot.version,
    }


@router.post("/extract", response_model=ExtractionResult)
@limiter.limit("30/minute")
async def extract(
    request: Request,
    body: ExtractRequest,
    engine: SkillExtractionEngine = Depends(get_engine),
):
    if len(body.text) > settings.max_text_length:
        raise HTTPException(
            status_code=400,
            detail=f"Text too long (max {settings.max_text_length} chars)",
        )

    if body.job_description and len(body.job_description) > settings.max_job_description_length:
        raise HTTPException(
            status_code=400,
            detail=f"Job description too long (max {settings.max_job_description_length} chars)",
        )

    return await engine.extract(body.text, body.industry, body.job_description)
