"""Job-description driven tailoring of a resume.

Runs job analysis, bullet selection, per-bullet rewriting, summary
generation and match scoring in that order, then writes the assembled
content back onto the resume in a single update.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Sequence

from vitae.domain import (
    Bullet,
    JobAnalysis,
    NoBulletsAvailable,
    Resume,
    ResumeAnalysis,
    ResumeContent,
    ResumeNotFound,
    TailoredBullet,
    TailoredExperience,
)
from vitae.ports import (
    BulletRepository,
    ExperienceRepository,
    ResumeAI,
    ResumeRepository,
    SkillRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_BULLETS = 15
TAILOR_STYLE = "professional"


class TailoringService:
    def __init__(
        self,
        *,
        resumes: ResumeRepository,
        users: UserRepository,
        experiences: ExperienceRepository,
        bullets: BulletRepository,
        skills: SkillRepository,
        ai: ResumeAI,
        default_max_bullets: int = DEFAULT_MAX_BULLETS,
        max_concurrency: int = 4,
    ):
        self._resumes = resumes
        self._users = users
        self._experiences = experiences
        self._bullets = bullets
        self._skills = skills
        self._ai = ai
        self._default_max_bullets = default_max_bullets
        self._max_concurrency = max(1, max_concurrency)

    async def tailor(
        self,
        resume_id: str,
        max_bullets: Optional[int] = None,
        *,
        owner_id: Optional[str] = None,
    ) -> Resume:
        resume = self._resumes.get(resume_id)
        if owner_id is not None and resume.user_id != owner_id:
            raise ResumeNotFound()
        user = self._users.get(resume.user_id)

        library = self._bullets.list_by_user(resume.user_id)
        if not library:
            raise NoBulletsAvailable()
        skills = self._skills.list_by_user(resume.user_id)

        lang = resume.target_language
        analysis = await self._ai.analyze_job(resume.job_description, lang)
        if not resume.job_title and analysis.title:
            resume.set_job_details(title=analysis.title)
        if not resume.company_name and analysis.company:
            resume.set_job_details(company=analysis.company)

        limit = max_bullets if max_bullets and max_bullets > 0 else self._default_max_bullets
        selection = await self._ai.select_bullets(analysis, library, limit, lang)

        owned_ids = {bullet.id for bullet in library}
        chosen_ids = [bid for bid in selection.bullet_ids if bid in owned_ids]
        dropped = len(selection.bullet_ids) - len(chosen_ids)
        if dropped:
            logger.warning("tailor_selection_unknown_ids resume_id=%s dropped=%s", resume.id, dropped)
        resume.select_bullets(chosen_ids)
        selected = self._bullets.list_by_ids(resume.selected_bullets)

        tailored = await self._tailor_bullets(resume, selected, analysis)
        succeeded = [bullet for bullet, _ in tailored]

        summary = await self._ai.generate_summary(user, analysis, succeeded, lang)

        experiences = self._group_by_experience(resume, tailored)
        content = ResumeContent(
            summary=summary,
            experiences=experiences,
            skills=[skill.name for skill in skills],
            analysis=ResumeAnalysis(
                matched_keywords=list(analysis.required_skills),
                missing_keywords=list(analysis.preferred_skills),
                recommendations=[],
            ),
        )

        try:
            score = await self._ai.score_match(analysis, content, skills)
            resume.set_score(score)
        except Exception as exc:
            logger.warning("tailor_score_failed resume_id=%s error=%s", resume.id, exc)
            resume.set_score(0)

        resume.set_generated_content(content)
        self._resumes.update(resume)
        logger.info(
            "tailor_completed resume_id=%s selected=%s tailored=%s experiences=%s score=%s",
            resume.id,
            len(resume.selected_bullets),
            len(succeeded),
            len(experiences),
            resume.score,
        )
        return resume

    async def _tailor_bullets(
        self,
        resume: Resume,
        bullets: Sequence[Bullet],
        analysis: JobAnalysis,
    ) -> list[tuple[Bullet, str]]:
        """Rewrite each bullet independently; a failed rewrite drops only that bullet."""
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def rewrite(bullet: Bullet) -> Optional[str]:
            async with semaphore:
                try:
                    return await self._ai.tailor_bullet(bullet, analysis, resume.target_language, TAILOR_STYLE)
                except Exception as exc:
                    logger.warning(
                        "tailor_bullet_failed resume_id=%s bullet_id=%s error=%s",
                        resume.id,
                        bullet.id,
                        exc,
                    )
                    return None

        results = await asyncio.gather(*(rewrite(bullet) for bullet in bullets))
        return [(bullet, text) for bullet, text in zip(bullets, results) if text]

    def _group_by_experience(
        self,
        resume: Resume,
        tailored: Sequence[tuple[Bullet, str]],
    ) -> list[TailoredExperience]:
        grouped: dict[str, list[TailoredBullet]] = {}
        for bullet, text in tailored:
            grouped.setdefault(bullet.experience_id, []).append(
                TailoredBullet(bullet_id=bullet.id, original_content=bullet.content, tailored_content=text)
            )

        experiences: list[TailoredExperience] = []
        for experience_id, bullets in grouped.items():
            try:
                exp = self._experiences.get(experience_id)
            except Exception as exc:
                logger.warning(
                    "tailor_experience_load_failed resume_id=%s experience_id=%s error=%s",
                    resume.id,
                    experience_id,
                    exc,
                )
                continue
            if exp.user_id != resume.user_id:
                logger.warning(
                    "tailor_experience_foreign resume_id=%s experience_id=%s", resume.id, experience_id
                )
                continue
            experiences.append(
                TailoredExperience(
                    experience_id=exp.id,
                    title=exp.title,
                    organization=exp.organization,
                    start_date=exp.start_date.isoformat(),
                    end_date=exp.end_date.isoformat() if exp.end_date else None,
                    is_current=exp.is_current,
                    bullets=bullets,
                )
            )
        return experiences
