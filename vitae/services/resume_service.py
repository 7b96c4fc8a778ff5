from __future__ import annotations

import logging
from typing import Optional

from vitae.domain import ParsedJob, Resume, ResumeNotFound, ResumeStatus
from vitae.ports import JobParser, ResumeRepository, UserRepository
from vitae.services.pdf_delivery import DocumentDeliveryService, PDFDocument
from vitae.services.tailoring_service import TailoringService

logger = logging.getLogger(__name__)


class ResumeService:
    """Resume use cases exposed to the HTTP layer."""

    def __init__(
        self,
        *,
        resumes: ResumeRepository,
        users: UserRepository,
        tailoring: TailoringService,
        delivery: DocumentDeliveryService,
        job_parser: JobParser,
    ):
        self._resumes = resumes
        self._users = users
        self._tailoring = tailoring
        self._delivery = delivery
        self._job_parser = job_parser

    def create_resume(
        self,
        user_id: str,
        job_description: str,
        *,
        job_title: Optional[str] = None,
        company_name: Optional[str] = None,
        job_url: Optional[str] = None,
        target_language: Optional[str] = None,
    ) -> Resume:
        user = self._users.get(user_id)
        resume = Resume.new(
            user.id,
            job_description,
            job_title=job_title,
            company_name=company_name,
            job_url=job_url,
            target_language=target_language or user.preferred_language,
        )
        self._resumes.create(resume)
        logger.info("resume_created resume_id=%s user_id=%s", resume.id, user.id)
        return resume

    def get_resume(self, resume_id: str, owner_id: str) -> Resume:
        resume = self._resumes.get(resume_id)
        if resume.user_id != owner_id:
            raise ResumeNotFound()
        return resume

    def list_resumes(
        self,
        owner_id: str,
        status: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[Resume], int]:
        parsed = ResumeStatus.parse(status) if status else None
        return self._resumes.list_by_user(owner_id, parsed, limit=limit, offset=offset)

    async def tailor_resume(self, resume_id: str, owner_id: str, max_bullets: Optional[int] = None) -> Resume:
        resume = await self._tailoring.tailor(resume_id, max_bullets, owner_id=owner_id)
        await self._delivery.invalidate(resume)
        return resume

    async def download_pdf(
        self,
        resume_id: str,
        owner_id: str,
        template_name: Optional[str] = None,
        force_regenerate: bool = False,
    ) -> PDFDocument:
        return await self._delivery.download(
            resume_id,
            template_name,
            owner_id=owner_id,
            force_regenerate=force_regenerate,
        )

    def update_status(
        self,
        resume_id: str,
        owner_id: str,
        status: str,
        notes: Optional[str] = None,
    ) -> Resume:
        resume = self.get_resume(resume_id, owner_id)
        target = ResumeStatus.parse(status)
        resume.transition_to(target)
        if notes is not None:
            resume.set_notes(notes)
        self._resumes.update(resume)
        logger.info("resume_status_updated resume_id=%s status=%s", resume.id, resume.status.value)
        return resume

    async def delete_resume(self, resume_id: str, owner_id: str) -> None:
        resume = self.get_resume(resume_id, owner_id)
        await self._delivery.invalidate(resume)
        self._resumes.delete(resume.id)
        logger.info("resume_deleted resume_id=%s", resume.id)

    async def parse_job_url(self, url: str) -> ParsedJob:
        return await self._job_parser.parse_url(url)
