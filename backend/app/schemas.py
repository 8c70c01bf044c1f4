"""
Pydantic schemas for request and response validation.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    HttpUrl,
    TypeAdapter,
    ValidationError,
    ValidationInfo,
    field_validator,
)
from pydantic_core import PydanticCustomError

from meapi.models import DEFAULT_PROFICIENCY, MAX_PROFICIENCY, MIN_PROFICIENCY

_HTTP_URL = TypeAdapter(HttpUrl)

URL_LABELS = {
    "github_url": "GitHub URL",
    "linkedin_url": "LinkedIn URL",
    "portfolio_url": "Portfolio URL",
}


def _check_http_url(value: str | None, label: str) -> str | None:
    """Accept an http(s) URL unchanged; empty strings mean "not provided"."""
    if value is None or value == "":
        return None
    try:
        _HTTP_URL.validate_python(value)
    except ValidationError:
        raise PydanticCustomError("url", "{label} must be a valid URL", {"label": label}) from None
    return value


# =============================================================================
# Requests
# =============================================================================


class LoginRequest(BaseModel):
    # Presence is checked by the login handler so it can answer MISSING_CREDENTIALS
    username: str | None = None
    password: str | None = None


class LinkInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=100)
    url: str

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v:
            raise PydanticCustomError("url", "Link URL is required")
        return _check_http_url(v, "Link URL")  # type: ignore[return-value]


class SkillInput(BaseModel):
    """A skill; a bare string in the request body is read as {"name": <string>}."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=50)
    level: int = Field(
        default=DEFAULT_PROFICIENCY,
        ge=MIN_PROFICIENCY,
        le=MAX_PROFICIENCY,
        validation_alias=AliasChoices("level", "proficiency_level", "proficiency"),
    )

    @field_validator("level", mode="before")
    @classmethod
    def default_missing_level(cls, v: Any) -> Any:
        return DEFAULT_PROFICIENCY if v is None else v


class ProjectInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=500)
    links: list[LinkInput] = Field(default_factory=list)

    @field_validator("links", mode="before")
    @classmethod
    def default_missing_links(cls, v: Any) -> Any:
        return [] if v is None else v


class WorkExperienceInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    company: str = Field(min_length=1, max_length=100)
    position: str = Field(min_length=1, max_length=100)
    start_date: str = Field(min_length=1, max_length=20)
    end_date: str | None = Field(default=None, max_length=20)
    description: str | None = Field(default=None, max_length=1000)

    @field_validator("end_date", "description", mode="before")
    @classmethod
    def blank_as_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ProfileRequest(BaseModel):
    """
    Body of POST and PUT /api/profile.

    PUT replaces the whole profile: a collection left out of the body is
    stored as empty.
    """

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    education: str | None = Field(default=None, max_length=200)
    github_url: str | None = None
    linkedin_url: str | None = None
    portfolio_url: str | None = None
    skills: list[SkillInput] = Field(default_factory=list)
    projects: list[ProjectInput] = Field(default_factory=list)
    work_experience: list[WorkExperienceInput] = Field(
        default_factory=list,
        validation_alias=AliasChoices("workExperience", "work_experience"),
    )

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("education", mode="before")
    @classmethod
    def blank_education_as_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("github_url", "linkedin_url", "portfolio_url")
    @classmethod
    def validate_urls(cls, v: str | None, info: ValidationInfo) -> str | None:
        return _check_http_url(v, URL_LABELS[info.field_name])

    @field_validator("skills", mode="before")
    @classmethod
    def expand_string_skills(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, list):
            return [{"name": item} if isinstance(item, str) else item for item in v]
        return v

    @field_validator("projects", "work_experience", mode="before")
    @classmethod
    def default_missing_collection(cls, v: Any) -> Any:
        return [] if v is None else v

    def profile_fields(self) -> dict[str, Any]:
        """Scalar columns of the profile row."""
        return self.model_dump(
            include={"name", "email", "education", "github_url", "linkedin_url", "portfolio_url"}
        )

    def skill_rows(self) -> list[dict[str, Any]]:
        return [{"skill_name": s.name, "proficiency_level": s.level} for s in self.skills]

    def project_rows(self) -> list[dict[str, Any]]:
        return [
            {
                "title": p.title,
                "description": p.description,
                "links": [link.model_dump() for link in p.links],
            }
            for p in self.projects
        ]

    def work_rows(self) -> list[dict[str, Any]]:
        return [w.model_dump() for w in self.work_experience]


class SearchType(str, Enum):
    all = "all"
    profiles = "profiles"
    projects = "projects"
    skills = "skills"
    work = "work"


# =============================================================================
# Responses
# =============================================================================


class MessageResponse(BaseModel):
    message: str


class ProfileCreatedResponse(BaseModel):
    message: str
    profileId: int


class UserResponse(BaseModel):
    id: int
    username: str
    role: str


class LoginResponse(BaseModel):
    message: str
    token: str
    user: UserResponse


class SkillLevelResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    skill_name: str
    proficiency_level: int


class ProjectLink(BaseModel):
    name: str
    url: str


class ProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    links: list[ProjectLink] = Field(default_factory=list)
    created_at: datetime | None = None


class WorkExperienceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    company: str
    position: str
    start_date: str
    end_date: str | None = None
    description: str | None = None


class ProfileResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    email: str
    education: str | None = None
    github_url: str | None = None
    linkedin_url: str | None = None
    portfolio_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    skills: list[str] = Field(default_factory=list)
    skills_with_level: list[SkillLevelResponse] = Field(
        default_factory=list, alias="skillsWithLevel"
    )
    projects: list[ProjectResponse] = Field(default_factory=list)
    work_experience: list[WorkExperienceResponse] = Field(
        default_factory=list, alias="workExperience"
    )


class ProjectListItem(ProjectResponse):
    profile_id: int
    profile_name: str | None = None


class Pagination(BaseModel):
    limit: int
    offset: int


class PagePagination(Pagination):
    total: int
    hasMore: bool


class ProjectListResponse(BaseModel):
    projects: list[ProjectListItem]
    pagination: PagePagination


class TopSkill(BaseModel):
    name: str
    frequency: int
    averageProficiency: float | None = None


class TopSkillsResponse(BaseModel):
    skills: list[TopSkill]


class SearchProfileItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    education: str | None = None
    github_url: str | None = None
    linkedin_url: str | None = None
    portfolio_url: str | None = None
    created_at: datetime | None = None


class SearchProjectItem(ProjectResponse):
    profile_id: int


class SearchSkillItem(SkillLevelResponse):
    id: int
    profile_id: int


class SearchWorkItem(WorkExperienceResponse):
    profile_id: int


class SearchResults(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    profiles: list[SearchProfileItem] = Field(default_factory=list)
    projects: list[SearchProjectItem] = Field(default_factory=list)
    skills: list[SearchSkillItem] = Field(default_factory=list)
    work_experience: list[SearchWorkItem] = Field(default_factory=list, alias="workExperience")


class SearchResponse(BaseModel):
    query: str
    type: SearchType
    results: SearchResults
    pagination: Pagination


class SkillEntry(BaseModel):
    name: str
    proficiency: int


class SkillListResponse(BaseModel):
    skills: list[SkillEntry]


class SkillFrequency(BaseModel):
    name: str
    frequency: int


class StatsResponse(BaseModel):
    total_profiles: int
    total_projects: int
    unique_skills: int
    total_work_experience: int
    topSkills: list[SkillFrequency]


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    uptime: float
    environment: str
    version: str
