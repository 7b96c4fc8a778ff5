"""PDF delivery backed by a blob-storage cache.

A cache hit is served as stored. A miss renders and rasterizes synchronously,
returns the bytes, and leaves a detached task to populate the cache. That
task is never awaited by the download; its failures end up in the log only.
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Optional

from vitae.core.template_catalog import TemplateSpec, resolve_template
from vitae.domain import Resume, ResumeNotFound, ResumeNotReady, ResumeStatus
from vitae.ports import (
    BlobNotFound,
    BlobStorage,
    EducationRepository,
    PDFEngine,
    PDFOptions,
    ProjectRepository,
    ResumeRepository,
    SkillRepository,
    SpokenLanguageRepository,
    UserRepository,
)
from vitae.services.resume_renderer import RenderInput, render_resume_html

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
FALLBACK_FILENAME = "Resume.pdf"

_UNSAFE_FILENAME_RE = re.compile(r'[\\/:*?"<>|\x00-\x1f]')
_WHITESPACE_RE = re.compile(r"\s+")


def cache_key(user_id: str, resume_id: str) -> str:
    return f"resumes/{user_id}/{resume_id}.pdf"


def _sanitize_filename_part(value: Optional[str]) -> str:
    cleaned = _UNSAFE_FILENAME_RE.sub("", value or "").strip().strip(".")
    return _WHITESPACE_RE.sub("_", cleaned)


def pdf_filename(resume: Resume) -> str:
    for candidate in (resume.company_name, resume.job_title):
        part = _sanitize_filename_part(candidate)
        if part:
            return f"Resume_{part}.pdf"
    return FALLBACK_FILENAME


def pdf_options_for(template: TemplateSpec) -> PDFOptions:
    return PDFOptions(
        margin_top=template.margin_in,
        margin_bottom=template.margin_in,
        margin_left=template.margin_in,
        margin_right=template.margin_in,
    )


@dataclass(frozen=True)
class PDFDocument:
    content: bytes
    filename: str
    cached: bool


class DocumentDeliveryService:
    def __init__(
        self,
        *,
        resumes: ResumeRepository,
        users: UserRepository,
        education: EducationRepository,
        projects: ProjectRepository,
        languages: SpokenLanguageRepository,
        skills: SkillRepository,
        pdf_engine: PDFEngine,
        storage: BlobStorage,
    ):
        self._resumes = resumes
        self._users = users
        self._education = education
        self._projects = projects
        self._languages = languages
        self._skills = skills
        self._pdf_engine = pdf_engine
        self._storage = storage
        self._pending: dict[str, set[asyncio.Task]] = {}

    async def download(
        self,
        resume_id: str,
        template_name: Optional[str] = None,
        *,
        owner_id: Optional[str] = None,
        force_regenerate: bool = False,
    ) -> PDFDocument:
        resume = self._resumes.get(resume_id)
        if owner_id is not None and resume.user_id != owner_id:
            raise ResumeNotFound()
        if not resume.can_generate_pdf():
            raise ResumeNotReady()

        key = cache_key(resume.user_id, resume.id)
        filename = pdf_filename(resume)

        if not force_regenerate:
            cached = await self._read_cache(key)
            if cached:
                logger.info("pdf_cache_hit resume_id=%s size=%s", resume.id, len(cached))
                return PDFDocument(content=cached, filename=filename, cached=True)

        content = await self.generate(resume, template_name)
        self._mark_generated(resume, self._storage.url_for(key))
        self._spawn_cache_write(key, content)
        return PDFDocument(content=content, filename=filename, cached=False)

    async def generate(self, resume: Resume, template_name: Optional[str] = None) -> bytes:
        """Render and rasterize without touching the cache."""
        if not resume.can_generate_pdf():
            raise ResumeNotReady()
        template = resolve_template(template_name)
        user = self._users.get(resume.user_id)
        html = render_resume_html(
            RenderInput(
                user=user,
                resume=resume,
                education=self._education.list_by_user(resume.user_id),
                projects=self._projects.list_by_user(resume.user_id),
                languages=self._languages.list_by_user(resume.user_id),
                skills=self._skills.list_by_user(resume.user_id),
                locale=resume.target_language,
                font_size=template.font_size,
                show_summary=template.show_summary,
            )
        )
        content = await self._pdf_engine.render_pdf(html, template.name, pdf_options_for(template))
        logger.info(
            "pdf_generated resume_id=%s template=%s size=%s", resume.id, template.name, len(content)
        )
        return content

    async def invalidate(self, resume: Resume) -> None:
        """Drop the cached document; failures are logged and ignored.

        Queued writes for the key are awaited first so none of them can
        restore the document after the delete.
        """
        key = cache_key(resume.user_id, resume.id)
        queued = list(self._pending.get(key, ()))
        if queued:
            await asyncio.gather(*queued, return_exceptions=True)
        try:
            await self._storage.delete(key)
        except Exception as exc:
            logger.warning("pdf_cache_delete_failed key=%s error=%s", key, exc)

    async def drain(self, timeout: Optional[float] = None) -> None:
        """Wait for in-flight cache writes, e.g. on shutdown."""
        pending = [task for tasks in self._pending.values() for task in tasks]
        if not pending:
            return
        done, not_done = await asyncio.wait(pending, timeout=timeout)
        if not_done:
            logger.warning("pdf_cache_writes_abandoned count=%s", len(not_done))

    @property
    def pending_writes(self) -> int:
        return sum(len(tasks) for tasks in self._pending.values())

    async def _read_cache(self, key: str) -> Optional[bytes]:
        try:
            return await self._storage.get(key)
        except BlobNotFound:
            return None
        except Exception as exc:
            logger.warning("pdf_cache_read_failed key=%s error=%s", key, exc)
            return None

    def _mark_generated(self, resume: Resume, url: str) -> None:
        resume.set_pdf_url(url)
        if resume.status == ResumeStatus.GENERATED:
            resume.transition_to(ResumeStatus.REVIEWED)
        try:
            self._resumes.update(resume)
        except Exception as exc:
            logger.warning("pdf_resume_update_failed resume_id=%s error=%s", resume.id, exc)

    def _spawn_cache_write(self, key: str, content: bytes) -> None:
        task = asyncio.create_task(self._write_cache(key, content))
        self._pending.setdefault(key, set()).add(task)
        task.add_done_callback(lambda done: self._forget(key, done))

    def _forget(self, key: str, task: asyncio.Task) -> None:
        tasks = self._pending.get(key)
        if tasks is None:
            return
        tasks.discard(task)
        if not tasks:
            del self._pending[key]

    async def _write_cache(self, key: str, content: bytes) -> None:
        try:
            stored = await self._storage.put(key, content, PDF_CONTENT_TYPE)
        except Exception as exc:
            logger.warning("pdf_cache_write_failed key=%s error=%s", key, exc)
            return
        logger.info("pdf_cache_stored key=%s size=%s", stored.key, stored.size)
