"""LLM-backed job analysis, bullet selection, rewriting, summary and scoring."""

from __future__ import annotations

import logging
from typing import Any, Sequence

from pydantic import ValidationError

from vitae.ai.types import ChatMessage, JSONCompletionClient
from vitae.domain import Bullet, InvalidMatchScore, JobAnalysis, MatchScore, ResumeContent, Skill, User
from vitae.ports import AIProviderError, BulletSelection
from vitae.services.i18n import language_name

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert technical recruiter and resume writer. "
    "Always answer with a single valid JSON object and nothing else."
)


def _join(values: Sequence[str]) -> str:
    return ", ".join(v for v in values if v) or "-"


def _str_list(raw: Any) -> list[str]:
    if not isinstance(raw, list):
        return []
    return [str(item).strip() for item in raw if str(item).strip()]


class LLMResumeAI:
    def __init__(self, client: JSONCompletionClient, *, model: str, analysis_model: str):
        self._client = client
        self._model = model
        self._analysis_model = analysis_model

    async def _ask(self, prompt: str, *, model: str, temperature: float) -> dict[str, Any]:
        messages = [
            ChatMessage(role="system", content=SYSTEM_PROMPT),
            ChatMessage(role="user", content=prompt),
        ]
        return await self._client.complete_json(messages, model=model, temperature=temperature)

    async def analyze_job(self, job_description: str, target_language: str) -> JobAnalysis:
        prompt = f"""Analyze the job description below and extract its key facts.

JOB DESCRIPTION:
{job_description}

Answer with this JSON structure:
{{
  "title": "job title",
  "company": "company name, empty if not stated",
  "required_skills": ["must-have skills"],
  "preferred_skills": ["nice-to-have skills"],
  "keywords": ["important keywords"],
  "seniority_level": "junior, mid, senior, lead or executive",
  "years_experience": 0,
  "summary": "two or three sentence summary of the role, written in {language_name(target_language)}"
}}"""
        payload = await self._ask(prompt, model=self._analysis_model, temperature=0.3)
        try:
            return JobAnalysis(
                title=str(payload.get("title") or "").strip(),
                company=str(payload.get("company") or "").strip(),
                required_skills=_str_list(payload.get("required_skills")),
                preferred_skills=_str_list(payload.get("preferred_skills")),
                keywords=_str_list(payload.get("keywords")),
                seniority_level=str(payload.get("seniority_level") or "").strip(),
                years_experience=int(payload.get("years_experience") or 0),
                summary=str(payload.get("summary") or "").strip(),
            )
        except (TypeError, ValueError, ValidationError) as exc:
            raise AIProviderError(f"Unusable job analysis: {exc}", code="AI_INVALID_JSON") from exc

    async def select_bullets(
        self,
        job_analysis: JobAnalysis,
        bullets: Sequence[Bullet],
        max_bullets: int,
        target_language: str,
    ) -> BulletSelection:
        listing = "\n".join(f"{i}. [ID: {b.id}] {b.content}" for i, b in enumerate(bullets, start=1))
        prompt = f"""Select the experience bullets most relevant to this job.

JOB:
- Title: {job_analysis.title}
- Company: {job_analysis.company}
- Required skills: {_join(job_analysis.required_skills)}
- Preferred skills: {_join(job_analysis.preferred_skills)}
- Keywords: {_join(job_analysis.keywords)}
- Summary: {job_analysis.summary}

AVAILABLE BULLETS:
{listing}

Select at most {max_bullets} bullets. Prefer direct skill matches, quantified
achievements, relevant industry experience and signs of leadership. If nothing
matches well, pick the closest ones and say so in "reasoning".

Answer with this JSON structure:
{{
  "selected_bullet_ids": ["id1", "id2"],
  "reasoning": "short explanation"
}}"""
        payload = await self._ask(prompt, model=self._analysis_model, temperature=0.3)
        ids = _str_list(payload.get("selected_bullet_ids"))
        return BulletSelection(bullet_ids=ids[:max_bullets], reasoning=str(payload.get("reasoning") or ""))

    async def tailor_bullet(
        self,
        bullet: Bullet,
        job_analysis: JobAnalysis,
        target_language: str,
        style: str = "professional",
    ) -> str:
        prompt = f"""Rewrite one resume bullet for the target job.

ORIGINAL BULLET:
{bullet.content}

TARGET:
- Job title: {job_analysis.title}
- Required skills: {_join(job_analysis.required_skills)}
- Keywords: {_join(job_analysis.keywords)}

Rules:
1. Fix grammar and clarity first.
2. If the bullet already states a clear action and a measurable result, keep it close to the original.
   Otherwise rewrite it around a concrete action and a measurable result.
3. Use the keywords only where they fit the facts. Never invent facts.
4. Tone: {style}. Language: {language_name(target_language)}.
5. Mark 3 to 5 high-value terms (technologies, metrics, strong verbs) with **bold** markdown.

Answer with this JSON structure:
{{
  "tailored_content": "the rewritten bullet",
  "keywords": ["keywords used"]
}}"""
        payload = await self._ask(prompt, model=self._model, temperature=0.7)
        text = str(payload.get("tailored_content") or "").strip()
        if not text:
            raise AIProviderError("AI returned an empty bullet", code="AI_EMPTY_RESPONSE")
        return text

    async def generate_summary(
        self,
        user: User,
        job_analysis: JobAnalysis,
        bullets: Sequence[Bullet],
        target_language: str,
    ) -> str:
        achievements = "\n".join(f"- {b.content}" for b in bullets) or "-"
        prompt = f"""Write a professional summary for a resume.

CANDIDATE:
- Name: {user.name or "Professional"}
- Headline: {user.headline}
- Current summary: {user.summary}

KEY ACHIEVEMENTS SELECTED FOR THIS JOB:
{achievements}

TARGET JOB:
- Title: {job_analysis.title}
- Company: {job_analysis.company}
- Required skills: {_join(job_analysis.required_skills)}
- Summary: {job_analysis.summary}

Write 3 to 4 confident sentences in {language_name(target_language)} that connect the
candidate's experience to the job. Mark 4 to 6 key terms with **bold** markdown.

Answer with this JSON structure:
{{
  "summary": "the summary"
}}"""
        payload = await self._ask(prompt, model=self._model, temperature=0.8)
        summary = str(payload.get("summary") or "").strip()
        if not summary:
            raise AIProviderError("AI returned an empty summary", code="AI_EMPTY_RESPONSE")
        return summary

    async def score_match(
        self,
        job_analysis: JobAnalysis,
        content: ResumeContent,
        user_skills: Sequence[Skill],
    ) -> int:
        skills = "\n".join(f"- {s.name} (proficiency: {s.proficiency_level}%)" for s in user_skills) or "-"
        lines = [f"Summary: {content.summary}", ""]
        for exp in content.experiences:
            lines.append(f"{exp.title} at {exp.organization}:")
            lines.extend(f"  - {b.tailored_content}" for b in exp.bullets)
        prompt = f"""Score how well this resume matches the job, from 0 to 100.

JOB:
- Title: {job_analysis.title}
- Required skills: {_join(job_analysis.required_skills)}
- Preferred skills: {_join(job_analysis.preferred_skills)}
- Years of experience: {job_analysis.years_experience}
- Summary: {job_analysis.summary}

CANDIDATE SKILLS:
{skills}

RESUME CONTENT:
{chr(10).join(lines)}

Weights: skill alignment 40%, experience relevance 30%, seniority fit 15%, keyword coverage 15%.

Answer with this JSON structure:
{{
  "score": 85,
  "breakdown": {{"skills": 90, "experience": 80, "seniority": 85, "keywords": 75}},
  "explanation": "short explanation"
}}"""
        payload = await self._ask(prompt, model=self._analysis_model, temperature=0.2)
        try:
            raw = payload.get("score")
            return MatchScore(int(raw)).value
        except (TypeError, ValueError, InvalidMatchScore) as exc:
            logger.warning("ai_score_invalid value=%r", payload.get("score"))
            raise AIProviderError(f"AI returned an invalid score: {exc}", code="AI_INVALID_JSON") from exc
