"""Content-library records owned by a user.

These are read-only inputs to tailoring and rendering. They are managed by
ordinary record CRUD elsewhere (or loaded with ``scripts/import_library.py``).
"""

from __future__ import annotations

from datetime import date
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

from vitae.domain.values import ExperienceType, LanguageProficiency


def new_id() -> str:
    return uuid4().hex


class User(BaseModel):
    id: str = Field(default_factory=new_id)
    email: str = ""
    name: str = ""
    headline: str = ""
    summary: str = ""
    location: str = ""
    phone: str = ""
    website: str = ""
    linkedin_url: str = ""
    github_url: str = ""
    portfolio_url: str = ""
    preferred_language: str = "en"

    def display_name(self) -> str:
        if self.name.strip():
            return self.name.strip()
        if self.email.strip():
            return self.email.strip()
        return "Anonymous User"


class Experience(BaseModel):
    id: str = Field(default_factory=new_id)
    user_id: str
    type: ExperienceType = ExperienceType.WORK
    title: str
    organization: str = ""
    location: str = ""
    start_date: date
    end_date: Optional[date] = None
    is_current: bool = False
    description: str = ""


class Bullet(BaseModel):
    id: str = Field(default_factory=new_id)
    experience_id: str
    content: str
    impact_score: int = Field(default=50, ge=0, le=100)
    keywords: list[str] = Field(default_factory=list)
    display_order: int = 0

    @field_validator("content")
    @classmethod
    def _content_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("bullet content cannot be empty")
        return value


class Skill(BaseModel):
    id: str = Field(default_factory=new_id)
    user_id: str
    name: str
    category: Optional[str] = None
    proficiency_level: int = Field(default=50, ge=0, le=100)
    years_of_experience: Optional[float] = None
    is_highlighted: bool = False


class Education(BaseModel):
    id: str = Field(default_factory=new_id)
    user_id: str
    institution: str
    degree: str = ""
    field_of_study: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    gpa: Optional[str] = None
    honors: list[str] = Field(default_factory=list)
    display_order: int = 0


class Project(BaseModel):
    id: str = Field(default_factory=new_id)
    user_id: str
    name: str
    description: str = ""
    tech_stack: list[str] = Field(default_factory=list)
    url: Optional[str] = None
    repository_url: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    bullets: list[str] = Field(default_factory=list)
    display_order: int = 0


class SpokenLanguage(BaseModel):
    id: str = Field(default_factory=new_id)
    user_id: str
    language: str
    proficiency: LanguageProficiency = LanguageProficiency.INTERMEDIATE
    display_order: int = 0
