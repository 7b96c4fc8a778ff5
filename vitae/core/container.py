from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from vitae.core.config import Settings
from vitae.core.library_store import (
    SQLiteBulletRepository,
    SQLiteEducationRepository,
    SQLiteExperienceRepository,
    SQLiteProjectRepository,
    SQLiteResumeRepository,
    SQLiteSkillRepository,
    SQLiteSpokenLanguageRepository,
    SQLiteStore,
    SQLiteUserRepository,
)
from vitae.ports import (
    BlobStorage,
    BulletRepository,
    EducationRepository,
    ExperienceRepository,
    JobParser,
    PDFEngine,
    ProjectRepository,
    ResumeAI,
    ResumeRepository,
    SkillRepository,
    SpokenLanguageRepository,
    UserRepository,
)
from vitae.services.pdf_delivery import DocumentDeliveryService
from vitae.services.resume_service import ResumeService
from vitae.services.tailoring_service import TailoringService

logger = logging.getLogger(__name__)


@dataclass
class Repositories:
    resumes: ResumeRepository
    users: UserRepository
    experiences: ExperienceRepository
    bullets: BulletRepository
    skills: SkillRepository
    education: EducationRepository
    projects: ProjectRepository
    languages: SpokenLanguageRepository


@dataclass
class Services:
    resumes: ResumeService
    tailoring: TailoringService
    delivery: DocumentDeliveryService
    closers: list[Callable[[], Awaitable[Any]]] = field(default_factory=list)

    async def aclose(self) -> None:
        for close in self.closers:
            try:
                await close()
            except Exception as exc:
                logger.warning("service_close_failed error=%s", exc)


def sqlite_repositories(store: SQLiteStore) -> Repositories:
    return Repositories(
        resumes=SQLiteResumeRepository(store),
        users=SQLiteUserRepository(store),
        experiences=SQLiteExperienceRepository(store),
        bullets=SQLiteBulletRepository(store),
        skills=SQLiteSkillRepository(store),
        education=SQLiteEducationRepository(store),
        projects=SQLiteProjectRepository(store),
        languages=SQLiteSpokenLanguageRepository(store),
    )


def build_services(
    repos: Repositories,
    *,
    ai: ResumeAI,
    pdf_engine: PDFEngine,
    storage: BlobStorage,
    job_parser: JobParser,
    max_bullets: int = 15,
    concurrency: int = 4,
) -> Services:
    tailoring = TailoringService(
        resumes=repos.resumes,
        users=repos.users,
        experiences=repos.experiences,
        bullets=repos.bullets,
        skills=repos.skills,
        ai=ai,
        default_max_bullets=max_bullets,
        max_concurrency=concurrency,
    )
    delivery = DocumentDeliveryService(
        resumes=repos.resumes,
        users=repos.users,
        education=repos.education,
        projects=repos.projects,
        languages=repos.languages,
        skills=repos.skills,
        pdf_engine=pdf_engine,
        storage=storage,
    )
    resumes = ResumeService(
        resumes=repos.resumes,
        users=repos.users,
        tailoring=tailoring,
        delivery=delivery,
        job_parser=job_parser,
    )
    return Services(resumes=resumes, tailoring=tailoring, delivery=delivery)


def build_default_services(settings: Settings) -> Services:
    from vitae.ai.factory import get_resume_ai
    from vitae.integrations.gotenberg import GotenbergClient
    from vitae.integrations.jina import JinaJobParser
    from vitae.integrations.local_storage import LocalFileStorage

    store = SQLiteStore(settings.database_path)
    pdf_engine = GotenbergClient(settings.gotenberg_url, timeout_s=settings.gotenberg_timeout_s)
    job_parser = JinaJobParser(
        base_url=settings.jina_base_url,
        api_key=settings.jina_api_key,
        timeout_s=settings.jina_timeout_s,
    )
    services = build_services(
        sqlite_repositories(store),
        ai=get_resume_ai(),
        pdf_engine=pdf_engine,
        storage=LocalFileStorage(settings.storage_path, settings.storage_base_url),
        job_parser=job_parser,
        max_bullets=settings.tailor_max_bullets,
        concurrency=settings.tailor_concurrency,
    )

    async def close_store() -> None:
        store.close()

    services.closers.extend([pdf_engine.aclose, job_parser.aclose, close_store])
    return services
