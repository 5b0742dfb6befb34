"""Normalization of raw content entries into searchable records."""

from typing import Any, Callable

from pydantic import ValidationError

from portfolio_search.errors import RecordValidationError
from portfolio_search.models.content import (
    ExperienceContent,
    ProfileContent,
    ProjectContent,
    RecordMetadata,
    RecordType,
    SearchableRecord,
    SkillContent,
    WritingContent,
)


def normalize_project(entry: dict) -> SearchableRecord:
    project = ProjectContent.model_validate(entry)
    return SearchableRecord(
        id=project.id,
        title=project.title,
        description=project.description,
        type="project",
        url=f"/projects#{project.id}",
        category=project.category,
        tags=project.case_study.lessons if project.case_study else [],
        technologies=project.technologies,
        metadata=RecordMetadata(
            client=project.client,
            role=project.role,
            start_date=project.start_date,
            end_date=project.end_date,
            featured=project.featured,
        ),
    )


def normalize_writing(entry: dict) -> SearchableRecord:
    article = WritingContent.model_validate(entry)
    return SearchableRecord(
        id=article.id,
        title=article.title,
        description=article.description,
        type="writing",
        url=article.url,
        category=article.category,
        tags=article.tags,
        metadata=RecordMetadata(
            published_date=article.published_date,
            read_time=article.read_time,
            platform=article.source,
            featured=article.featured,
        ),
    )


def normalize_experience(entry: dict) -> SearchableRecord:
    experience = ExperienceContent.model_validate(entry)
    return SearchableRecord(
        id=experience.id,
        title=experience.title,
        description=experience.description,
        type="experience",
        url=f"/experience#{experience.id}",
        category=experience.category,
        tags=experience.skills,
        technologies=experience.technologies,
        metadata=RecordMetadata(
            role=experience.role,
            company=experience.company,
            start_date=experience.start_date,
            end_date=experience.end_date,
        ),
    )


def normalize_skill(entry: dict) -> SearchableRecord:
    skill = SkillContent.model_validate(entry)
    return SearchableRecord(
        id=skill.id,
        title=skill.name,
        description=skill.description,
        type="skill",
        url=f"/skills#{skill.id}",
        category=skill.category,
        tags=skill.tags,
        technologies=skill.technologies,
        metadata=RecordMetadata(published_date=skill.last_updated),
    )


def normalize_profile(entry: dict) -> SearchableRecord:
    profile = ProfileContent.model_validate(entry)
    return SearchableRecord(
        id="profile",
        title=profile.name,
        description=profile.bio,
        type="profile",
        url="/",
        category="personal",
        tags=profile.skills,
        metadata=RecordMetadata(role=profile.title, published_date=profile.last_updated),
    )


NORMALIZERS: dict[RecordType, Callable[[dict], SearchableRecord]] = {
    "project": normalize_project,
    "writing": normalize_writing,
    "experience": normalize_experience,
    "skill": normalize_skill,
    "profile": normalize_profile,
}


def normalize_entry(source: str, record_type: RecordType, entry: Any) -> SearchableRecord:
    """
    Validate one raw entry and normalize it.

    Raises:
        RecordValidationError: if the entry does not fit its content model
    """
    try:
        return NORMALIZERS[record_type](entry)
    except ValidationError as e:
        record_id = entry.get("id") if isinstance(entry, dict) else None
        errors = [
            f"{'.'.join(str(part) for part in err['loc']) or '<root>'}: {err['msg']}"
            for err in e.errors()
        ]
        raise RecordValidationError(source, record_id, errors) from e
