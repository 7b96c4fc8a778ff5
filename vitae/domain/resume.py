from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from vitae.domain.errors import (
    EmptyJobDescription,
    FieldError,
    InvalidStatusTransition,
    ValidationErrors,
)
from vitae.domain.library import new_id
from vitae.domain.values import MatchScore, ResumeStatus

SUPPORTED_LANGUAGE_PREFIXES = ("en", "pt", "es", "fr", "de")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class TailoredBullet(BaseModel):
    bullet_id: str
    original_content: str
    tailored_content: str


class TailoredExperience(BaseModel):
    experience_id: str
    title: str
    organization: str = ""
    start_date: str
    end_date: Optional[str] = None
    is_current: bool = False
    bullets: list[TailoredBullet] = Field(default_factory=list)


class ResumeAnalysis(BaseModel):
    matched_keywords: list[str] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class ResumeContent(BaseModel):
    summary: str = ""
    experiences: list[TailoredExperience] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    analysis: Optional[ResumeAnalysis] = None

    def bullet_ids(self) -> list[str]:
        return [bullet.bullet_id for exp in self.experiences for bullet in exp.bullets]


class Resume(BaseModel):
    """A resume tailored to one job posting, and its application lifecycle."""

    id: str = Field(default_factory=new_id)
    user_id: str
    job_description: str
    job_title: Optional[str] = None
    company_name: Optional[str] = None
    job_url: Optional[str] = None
    target_language: str = "en"
    selected_bullets: list[str] = Field(default_factory=list)
    generated_content: Optional[ResumeContent] = None
    score: int = 0
    pdf_url: Optional[str] = None
    notes: Optional[str] = None
    status: ResumeStatus = ResumeStatus.DRAFT
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)
    version: int = 0

    @classmethod
    def new(
        cls,
        user_id: str,
        job_description: str,
        *,
        job_title: Optional[str] = None,
        company_name: Optional[str] = None,
        job_url: Optional[str] = None,
        target_language: Optional[str] = None,
    ) -> "Resume":
        if not (job_description or "").strip():
            raise EmptyJobDescription()
        resume = cls(
            user_id=user_id,
            job_description=job_description.strip(),
            target_language=(target_language or "en").strip().lower() or "en",
        )
        resume.set_job_details(job_title, company_name, job_url)
        resume.validate()
        return resume

    def validate(self) -> None:
        errors: list[FieldError] = []
        if not self.user_id.strip():
            errors.append(FieldError("user_id", "user id is required"))
        if not self.job_description.strip():
            errors.append(FieldError("job_description", "job description cannot be empty"))
        lang = self.target_language.lower().replace("_", "-")
        if lang.split("-")[0] not in SUPPORTED_LANGUAGE_PREFIXES:
            errors.append(
                FieldError("target_language", "target language must be one of en, pt-BR, es, fr, de")
            )
        if errors:
            raise ValidationErrors(errors)

    def touch(self) -> None:
        self.updated_at = _utc_now()

    def set_job_details(
        self,
        title: Optional[str] = None,
        company: Optional[str] = None,
        url: Optional[str] = None,
    ) -> None:
        if _clean(title):
            self.job_title = _clean(title)
        if _clean(company):
            self.company_name = _clean(company)
        if _clean(url):
            self.job_url = _clean(url)
        self.touch()

    def select_bullets(self, bullet_ids: list[str]) -> None:
        seen: set[str] = set()
        ordered: list[str] = []
        for bullet_id in bullet_ids:
            if bullet_id and bullet_id not in seen:
                seen.add(bullet_id)
                ordered.append(bullet_id)
        self.selected_bullets = ordered
        self.touch()

    def add_selected_bullet(self, bullet_id: str) -> None:
        if bullet_id in self.selected_bullets:
            return
        self.selected_bullets.append(bullet_id)
        self.touch()

    def remove_selected_bullet(self, bullet_id: str) -> None:
        if bullet_id not in self.selected_bullets:
            return
        self.selected_bullets = [b for b in self.selected_bullets if b != bullet_id]
        self.touch()

    def set_generated_content(self, content: ResumeContent) -> None:
        self.generated_content = content
        if self.status == ResumeStatus.DRAFT:
            self.transition_to(ResumeStatus.GENERATED)
        self.touch()

    def set_score(self, value: int) -> None:
        self.score = MatchScore(value).value
        self.touch()

    def set_pdf_url(self, url: str) -> None:
        self.pdf_url = url
        self.touch()

    def set_notes(self, notes: Optional[str]) -> None:
        self.notes = notes
        self.touch()

    def transition_to(self, target: ResumeStatus) -> None:
        if not self.status.can_transition_to(target):
            raise InvalidStatusTransition(self.status.value, target.value)
        self.status = target
        self.touch()

    def can_generate_pdf(self) -> bool:
        return self.generated_content is not None

    def job_display_name(self) -> str:
        title = _clean(self.job_title)
        company = _clean(self.company_name)
        if title and company:
            return f"{title} at {company}"
        if title:
            return title
        if company:
            return f"Position at {company}"
        return "Untitled Resume"
