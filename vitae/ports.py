"""Capabilities the tailoring core depends on.

Concrete adapters live in ``vitae.ai`` and ``vitae.integrations``; tests
substitute fakes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from vitae.domain import (
    Bullet,
    Education,
    Experience,
    JobAnalysis,
    ParsedJob,
    Project,
    Resume,
    ResumeContent,
    ResumeStatus,
    Skill,
    SpokenLanguage,
    User,
)


class CapabilityError(RuntimeError):
    code = "CAPABILITY_ERROR"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code


class AIProviderError(CapabilityError):
    code = "AI_ERROR"


class PDFEngineError(CapabilityError):
    code = "PDF_ERROR"


class StorageError(CapabilityError):
    code = "STORAGE_ERROR"


class BlobNotFound(StorageError):
    code = "BLOB_NOT_FOUND"


class JobParserError(CapabilityError):
    code = "JOB_PARSE_ERROR"


@dataclass(frozen=True)
class BulletSelection:
    bullet_ids: list[str]
    reasoning: str = ""


@dataclass(frozen=True)
class PDFOptions:
    paper_width: float = 8.5
    paper_height: float = 11.0
    margin_top: float = 0.4
    margin_bottom: float = 0.4
    margin_left: float = 0.4
    margin_right: float = 0.4
    scale: float = 1.0
    print_background: bool = True


@dataclass(frozen=True)
class StoredObject:
    key: str
    url: str
    size: int


class ResumeAI(Protocol):
    async def analyze_job(self, job_description: str, target_language: str) -> JobAnalysis: ...

    async def select_bullets(
        self,
        job_analysis: JobAnalysis,
        bullets: Sequence[Bullet],
        max_bullets: int,
        target_language: str,
    ) -> BulletSelection: ...

    async def tailor_bullet(
        self,
        bullet: Bullet,
        job_analysis: JobAnalysis,
        target_language: str,
        style: str = "professional",
    ) -> str: ...

    async def generate_summary(
        self,
        user: User,
        job_analysis: JobAnalysis,
        bullets: Sequence[Bullet],
        target_language: str,
    ) -> str: ...

    async def score_match(
        self,
        job_analysis: JobAnalysis,
        content: ResumeContent,
        user_skills: Sequence[Skill],
    ) -> int: ...


class PDFEngine(Protocol):
    async def render_pdf(self, html: str, template_name: str, options: PDFOptions) -> bytes: ...


class BlobStorage(Protocol):
    async def put(self, key: str, data: bytes, content_type: str) -> StoredObject: ...

    async def get(self, key: str) -> bytes:
        """Return the stored bytes; raise ``BlobNotFound`` when the key is absent."""

    async def delete(self, key: str) -> None:
        """Delete the key; deleting an absent key is not an error."""

    def url_for(self, key: str) -> str: ...


class JobParser(Protocol):
    async def parse_url(self, url: str) -> ParsedJob: ...


class ResumeRepository(Protocol):
    def create(self, resume: Resume) -> None: ...

    def get(self, resume_id: str) -> Resume:
        """Raise ``ResumeNotFound`` when absent."""

    def update(self, resume: Resume) -> None:
        """Persist and bump ``resume.version``; raise ``ConcurrentModification`` on a stale version."""

    def delete(self, resume_id: str) -> None: ...

    def list_by_user(
        self,
        user_id: str,
        status: Optional[ResumeStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[Resume], int]: ...


class UserRepository(Protocol):
    def get(self, user_id: str) -> User: ...


class ExperienceRepository(Protocol):
    def get(self, experience_id: str) -> Experience: ...

    def list_by_user(self, user_id: str) -> list[Experience]: ...


class BulletRepository(Protocol):
    def list_by_user(self, user_id: str) -> list[Bullet]: ...

    def list_by_ids(self, bullet_ids: Sequence[str]) -> list[Bullet]: ...


class SkillRepository(Protocol):
    def list_by_user(self, user_id: str) -> list[Skill]: ...


class EducationRepository(Protocol):
    def list_by_user(self, user_id: str) -> list[Education]: ...


class ProjectRepository(Protocol):
    def list_by_user(self, user_id: str) -> list[Project]: ...


class SpokenLanguageRepository(Protocol):
    def list_by_user(self, user_id: str) -> list[SpokenLanguage]: ...
