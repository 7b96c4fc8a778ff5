from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from vitae.domain import ParsedJob, Resume, ResumeContent


class CreateResumeRequest(BaseModel):
    job_description: str = Field(min_length=1, max_length=50000)
    job_title: Optional[str] = Field(default=None, max_length=300)
    company_name: Optional[str] = Field(default=None, max_length=300)
    job_url: Optional[str] = Field(default=None, max_length=2000)
    target_language: Optional[str] = Field(default=None, max_length=16)

    @field_validator("job_description")
    @classmethod
    def _job_description_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("job description cannot be empty")
        return value


class TailorResumeRequest(BaseModel):
    max_bullets: Optional[int] = Field(default=None, ge=1, le=50)


class UpdateResumeStatusRequest(BaseModel):
    status: str = Field(min_length=1)
    notes: Optional[str] = Field(default=None, max_length=5000)


class ParseJobRequest(BaseModel):
    url: str = Field(min_length=1, max_length=2000)


class ResumeResponse(BaseModel):
    id: str
    user_id: str
    display_name: str
    job_description: str
    job_title: Optional[str] = None
    company_name: Optional[str] = None
    job_url: Optional[str] = None
    target_language: str
    selected_bullets: list[str]
    generated_content: Optional[ResumeContent] = None
    score: int
    pdf_url: Optional[str] = None
    notes: Optional[str] = None
    status: str
    can_generate_pdf: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, resume: Resume) -> "ResumeResponse":
        return cls(
            id=resume.id,
            user_id=resume.user_id,
            display_name=resume.job_display_name(),
            job_description=resume.job_description,
            job_title=resume.job_title,
            company_name=resume.company_name,
            job_url=resume.job_url,
            target_language=resume.target_language,
            selected_bullets=list(resume.selected_bullets),
            generated_content=resume.generated_content,
            score=resume.score,
            pdf_url=resume.pdf_url,
            notes=resume.notes,
            status=resume.status.value,
            can_generate_pdf=resume.can_generate_pdf(),
            created_at=resume.created_at,
            updated_at=resume.updated_at,
        )


class ResumeListResponse(BaseModel):
    resumes: list[ResumeResponse]
    total: int


class ParsedJobResponse(BaseModel):
    title: str
    company: str
    description: str
    url: str
    published_at: Optional[str] = None

    @classmethod
    def from_domain(cls, job: ParsedJob) -> "ParsedJobResponse":
        return cls(**job.model_dump())


class TemplateInfo(BaseModel):
    name: str
    display_name: str
    description: str
    font_size: float
    show_summary: bool
