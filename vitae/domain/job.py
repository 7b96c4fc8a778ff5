from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class JobAnalysis(BaseModel):
    title: str = ""
    company: str = ""
    required_skills: list[str] = Field(default_factory=list)
    preferred_skills: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    seniority_level: str = ""
    years_experience: int = 0
    summary: str = ""


class ParsedJob(BaseModel):
    title: str = ""
    company: str = ""
    description: str = ""
    url: str = ""
    published_at: Optional[str] = None
