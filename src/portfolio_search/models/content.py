"""Data models for raw content entries and normalized searchable records."""

from typing import Literal, get_args

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

RecordType = Literal["project", "writing", "experience", "skill", "profile"]

RECORD_TYPES: tuple[str, ...] = get_args(RecordType)


class CamelModel(BaseModel):
    """Base model reading and writing the site's camelCase JSON keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        str_strip_whitespace=True,
    )


class Technology(CamelModel):
    """A technology used by a project, role or skill."""

    name: str = Field(..., min_length=1, max_length=50)
    category: str = "other"


# ===== Raw content entries =====


class CaseStudy(CamelModel):
    """Case study attached to a project; only lessons are searchable."""

    overview: str | None = None
    lessons: list[str] = Field(default_factory=list)


class ProjectContent(CamelModel):
    """A portfolio project."""

    id: str = Field(..., min_length=1, max_length=100, pattern=r"^[a-z0-9-]+$")
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=500)
    category: str | None = None
    client: str | None = None
    role: str | None = None
    status: str | None = None
    technologies: list[Technology] = Field(default_factory=list)
    start_date: str | None = None
    end_date: str | None = None
    featured: bool = False
    case_study: CaseStudy | None = None


class WritingContent(CamelModel):
    """An article, either hosted elsewhere or on the personal blog."""

    id: str = Field(..., min_length=1, max_length=100, pattern=r"^[a-z0-9-]+$")
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=500)
    url: str | None = None
    type: str | None = None
    category: str | None = None
    published_date: str | None = None
    read_time: int | None = Field(default=None, ge=1, le=480)
    tags: list[str] = Field(default_factory=list)
    featured: bool = False
    author: str | None = None
    source: str | None = None


class ExperienceContent(CamelModel):
    """A work experience entry."""

    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1, validation_alias=AliasChoices("title", "position"))
    description: str = ""
    company: str | None = None
    category: str | None = None
    role: str | None = None
    skills: list[str] = Field(default_factory=list)
    technologies: list[Technology] = Field(default_factory=list)
    start_date: str | None = None
    end_date: str | None = None


class SkillContent(CamelModel):
    """A single skill."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    description: str = ""
    category: str | None = None
    tags: list[str] = Field(default_factory=list)
    technologies: list[Technology] = Field(default_factory=list)
    last_updated: str | None = None


class ProfileContent(CamelModel):
    """The site owner's profile."""

    name: str = Field(..., min_length=1)
    bio: str = Field(default="", validation_alias=AliasChoices("bio", "summary"))
    title: str | None = None
    skills: list[str] = Field(default_factory=list)
    last_updated: str | None = None

    @field_validator("skills", mode="before")
    @classmethod
    def skill_names(cls, value):
        # Profile skills come either as plain names or as {name, proficiency} objects
        if isinstance(value, list):
            return [item.get("name") if isinstance(item, dict) else item for item in value]
        return value


# ===== Normalized records =====


class RecordMetadata(CamelModel):
    """Type-dependent optional fields of a searchable record."""

    published_date: str | None = None
    read_time: int | None = None
    client: str | None = None
    role: str | None = None
    company: str | None = None
    platform: str | None = None
    featured: bool | None = None
    start_date: str | None = None
    end_date: str | None = None


class SearchableRecord(CamelModel):
    """The uniform record shape every content source is normalized into."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str = ""
    type: RecordType
    category: str | None = None
    tags: list[str] = Field(default_factory=list)
    technologies: list[Technology] = Field(default_factory=list)
    metadata: RecordMetadata = Field(default_factory=RecordMetadata)
    url: str | None = None
