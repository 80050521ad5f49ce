from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class AcceptanceRequestDTO(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    gpa: float = Field(ge=0, le=4.0)
    sat_score: int = Field(alias="satScore", ge=400, le=1600)
    ec_count: int = Field(0, alias="ecCount", ge=0)
    leadership_roles: int = Field(0, alias="leadershipRoles", ge=0)
    essay_quality: float = Field(0, alias="essayQuality", ge=0, le=10)
    recommendations: float = Field(0, ge=0, le=10)
    target_school: str | None = Field(None, alias="targetSchool", max_length=128)


class AcceptanceResponseDTO(BaseModel):
    school: str
    rate: float
    breakdown: dict[str, float]
