from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class LogoType(str, Enum):
    WORDMARK = "wordmark"
    PICTORIAL = "pictorial"
    ABSTRACT = "abstract"


LOGO_TYPES: List[LogoType] = [LogoType.WORDMARK, LogoType.PICTORIAL, LogoType.ABSTRACT]


class ProjectStatus(str, Enum):
    PENDING = "pending"
    ANALYZING = "analyzing"
    GENERATING = "generating"
    COMPLETE = "complete"
    ERROR = "error"


class CamelModel(BaseModel):
    """Models exchanged with the browser and the store use camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TranscriptEntry(CamelModel):
    text: str = Field(..., min_length=1, description="What the speaker said.")
    speaker: str = Field(..., min_length=1, description="Who said it.")
    timestamp: Optional[str] = Field(None, description="Optional position in the recording.")

    @field_validator("timestamp", mode="before")
    @classmethod
    def stringify_timestamp(cls, value: Any) -> Any:
        # Numeric offsets such as 12.5 are kept in their string form.
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class SuggestedDirection(CamelModel):
    type: Optional[LogoType] = None
    reasoning: str = ""

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, value):
        # Models sometimes echo the template ("wordmark | pictorial") or capitalise.
        if isinstance(value, str):
            value = value.strip().lower()
            return value if value in {t.value for t in LogoType} else None
        return value


class BrandAnalysis(CamelModel):
    company_name: str = Field(..., min_length=1)
    industry: str = Field(..., min_length=1)
    brand_personality: List[str] = Field(..., min_length=1)
    key_differentiators: List[str] = Field(default_factory=list)
    target_audience: str = ""
    visual_preferences: List[str] = Field(default_factory=list)
    anti_preferences: List[str] = Field(default_factory=list)
    suggested_direction: Optional[SuggestedDirection] = None


class GeneratedLogo(CamelModel):
    """A validated logo concept as returned by the model, before it is stored."""

    concept_name: str
    logo_type: LogoType
    rationale: str
    svg_code: str


class LogoConcept(CamelModel):
    id: str
    project_id: str
    created_at: Optional[datetime] = None
    concept_name: str
    logo_type: LogoType
    rationale: str
    svg_code: str
    is_favorite: bool = False


class Project(CamelModel):
    id: str
    created_at: Optional[datetime] = None
    transcript: List[TranscriptEntry] = Field(default_factory=list)
    brand_analysis: Optional[BrandAnalysis] = None
    status: ProjectStatus = ProjectStatus.PENDING
    error_message: Optional[str] = None
    logo_concepts: List[LogoConcept] = Field(default_factory=list)


# -------------------
# Request / response bodies
# -------------------


class AnalyzeRequest(CamelModel):
    transcript: List[TranscriptEntry] = Field(..., min_length=1)


class AnalyzeResponse(CamelModel):
    project_id: str
    brand_analysis: BrandAnalysis
    logos: List[GeneratedLogo]


class GenerateRequest(CamelModel):
    project_id: str = Field(..., min_length=1)
    logo_type: LogoType
    variant: int = Field(
        1,
        ge=1,
        le=2,
        description="Use 2 to ask for a different pictorial angle. The new concept replaces the stored one of the same type.",
    )


class RegenerateRequest(CamelModel):
    project_id: str = Field(..., min_length=1)
    logo_type: Optional[LogoType] = None
    regenerate_all: bool = False


class ConceptResponse(CamelModel):
    concept: LogoConcept


class ConceptsResponse(CamelModel):
    concepts: List[LogoConcept]


class ProjectResponse(CamelModel):
    project: Project


class FavoriteRequest(CamelModel):
    is_favorite: bool


class LogoThumbnail(CamelModel):
    id: str
    logo_type: LogoType
    svg_code: str


class ProjectSummary(CamelModel):
    id: str
    created_at: Optional[datetime] = None
    company_name: str
    status: ProjectStatus
    logo_count: int
    logos: List[LogoThumbnail]


class ProjectListResponse(CamelModel):
    projects: List[ProjectSummary]


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
