from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class SkillEntry(BaseModel):
    name: str


class ExperienceEntry(BaseModel):
    title: str | None = None
    company: str | None = None
    description: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None


class ResumeSnapshotInput(BaseModel):
    """Read-only view of a resume as supplied by the resume service."""

    id: str
    user_id: str
    summary: str | None = None
    job_title: str | None = None
    email_contact: str | None = None
    phone: str | None = None
    skills: list[SkillEntry] = Field(default_factory=list)
    experiences: list[ExperienceEntry] = Field(default_factory=list)
    industry: str | None = None
    is_public: bool = False
    profile_views: int = Field(default=0, ge=0)
