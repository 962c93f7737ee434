from pydantic import BaseModel, Field, field_validator

from models.schemas.knowledge import Industry


class ExtractRequest(BaseModel):
    text: str = Field(..., description="Plain text resume content")
    industry: Industry = Field(default=Industry.TECHNOLOGY, description="Industry label, free text accepted")
    job_description: str | None = Field(default=None, description="Optional job description text")

    @field_validator("industry", mode="before")
    @classmethod
    def _map_industry(cls, v: object) -> Industry:
        return Industry.from_label(v if isinstance(v, (str, Industry)) else None)
