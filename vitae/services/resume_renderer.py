"""Single-page, ATS-safe HTML rendering of a tailored resume.

Each section is built into a small view model here and laid out by its own
Jinja2 template under ``vitae/templates/resume/sections``. A section whose
backing data is empty is skipped, so no empty heading is ever emitted.
Autoescaping covers every free-text field; ``**bold**`` markup is applied
after escaping by the ``bold`` filter.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional, Sequence

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup, escape

from vitae.domain import Education, Project, Resume, ResumeContent, Skill, SpokenLanguage, User
from vitae.services.i18n import Localizer

SKILL_CATEGORY_ORDER = ("Languages", "Frameworks", "Tools", "Databases", "Cloud", "Other")
DEFAULT_SKILL_CATEGORY = "Other"

_TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"
_BOLD_RE = re.compile(r"\*\*(.*?)\*\*", re.DOTALL)


def render_markdown_bold(text: str | None) -> Markup:
    """Escape ``text`` then turn ``**x**`` into ``<strong>x</strong>``."""
    escaped = str(escape(text or ""))
    return Markup(_BOLD_RE.sub(r"<strong>\1</strong>", escaped))


def _build_environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(_TEMPLATES_DIR)),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["bold"] = render_markdown_bold
    return env


_env = _build_environment()


@dataclass(frozen=True)
class RenderInput:
    user: User
    resume: Resume
    education: Sequence[Education] = ()
    projects: Sequence[Project] = ()
    languages: Sequence[SpokenLanguage] = ()
    skills: Sequence[Skill] = ()
    locale: Optional[str] = None
    font_size: float = 11
    show_summary: bool = True


def linkedin_display(url: str) -> str:
    return _url_display(url, "linkedin.com/in/")


def github_display(url: str) -> str:
    return _url_display(url, "github.com/")


def _url_display(url: str, prefix: str) -> str:
    _, found, after = url.partition(prefix)
    if not found:
        return url
    return prefix + after.rstrip("/")


def url_domain(url: str) -> str:
    host = url
    for scheme in ("https://", "http://"):
        if host.startswith(scheme):
            host = host[len(scheme):]
    return host.split("/", 1)[0]


def group_skills(selected: Sequence[str], user_skills: Sequence[Skill]) -> list[tuple[str, list[str]]]:
    """Group selected skill names by the user's categories, preferred order first."""
    categories: dict[str, str] = {}
    for skill in user_skills:
        categories[skill.name.lower()] = (skill.category or "").strip() or DEFAULT_SKILL_CATEGORY

    grouped: dict[str, list[str]] = {}
    for name in selected:
        category = categories.get(name.lower(), DEFAULT_SKILL_CATEGORY)
        grouped.setdefault(category, []).append(name)

    rows = [(cat, grouped[cat]) for cat in SKILL_CATEGORY_ORDER if grouped.get(cat)]
    rows.extend((cat, items) for cat, items in grouped.items() if cat not in SKILL_CATEGORY_ORDER and items)
    return rows


def _header(data: RenderInput, i18n: Localizer) -> dict[str, Any]:
    user = data.user
    contacts: list[dict[str, Optional[str]]] = []
    if user.phone.strip():
        contacts.append({"text": user.phone.strip(), "href": None})
    if user.email.strip():
        contacts.append({"text": user.email.strip(), "href": f"mailto:{user.email.strip()}"})
    if user.linkedin_url.strip():
        contacts.append({"text": linkedin_display(user.linkedin_url.strip()), "href": user.linkedin_url.strip()})
    if user.github_url.strip():
        contacts.append({"text": github_display(user.github_url.strip()), "href": user.github_url.strip()})
    if user.portfolio_url.strip():
        contacts.append({"text": url_domain(user.portfolio_url.strip()), "href": user.portfolio_url.strip()})
    return {"name": user.display_name(), "contacts": contacts}


def _summary(data: RenderInput, i18n: Localizer) -> Optional[dict[str, Any]]:
    if not data.show_summary:
        return None
    content = data.resume.generated_content
    text = content.summary.strip() if content is not None else ""
    if not text:
        text = data.user.summary.strip()
    if not text:
        return None
    return {"title": i18n.t("professional_summary"), "text": text}


def _education_details(edu: Education, i18n: Localizer) -> str:
    extras: list[str] = []
    gpa = (edu.gpa or "").strip()
    if gpa:
        try:
            value = float(gpa)
        except ValueError:
            extras.append(f"{i18n.t('gpa')}: {gpa}")
        else:
            extras.append(i18n.format_gpa(value, 10.0 if value > 4.0 else 4.0))
    if edu.honors:
        extras.append(", ".join(edu.honors))
    return " | ".join(extras)


def _education(data: RenderInput, i18n: Localizer) -> Optional[dict[str, Any]]:
    if not data.education:
        return None
    entries = []
    for edu in data.education:
        degree = edu.degree
        if edu.field_of_study:
            degree = f"{degree} in {edu.field_of_study}" if degree else edu.field_of_study
        dates = ""
        if edu.start_date or edu.end_date:
            dates = i18n.format_date_range(edu.start_date, edu.end_date)
        entries.append(
            {
                "institution": edu.institution,
                "location": edu.location or "",
                "degree": degree,
                "dates": dates,
                "details": _education_details(edu, i18n),
            }
        )
    return {"title": i18n.t("education"), "entries": entries}


def _skills(data: RenderInput, i18n: Localizer) -> Optional[dict[str, Any]]:
    content = data.resume.generated_content
    if content is None or not content.skills:
        return None
    return {"title": i18n.t("technical_skills"), "rows": group_skills(content.skills, data.skills)}


def experience_dates(start: str, end: Optional[str], is_current: bool, i18n: Localizer) -> str:
    if not start:
        return ""
    end_text = i18n.t("present")
    if not is_current and end:
        end_text = i18n.format_date_string(end)
    return f"{i18n.format_date_string(start)} – {end_text}"


def _experience(data: RenderInput, i18n: Localizer) -> Optional[dict[str, Any]]:
    content: Optional[ResumeContent] = data.resume.generated_content
    if content is None or not content.experiences:
        return None
    entries = []
    for exp in content.experiences:
        entries.append(
            {
                "title": exp.title,
                "organization": exp.organization,
                "dates": experience_dates(exp.start_date, exp.end_date, exp.is_current, i18n),
                "bullets": [b.tailored_content or b.original_content for b in exp.bullets],
            }
        )
    return {"title": i18n.t("experience"), "entries": entries}


def _projects(data: RenderInput, i18n: Localizer) -> Optional[dict[str, Any]]:
    if not data.projects:
        return None
    entries = []
    for proj in data.projects:
        links = []
        if proj.repository_url:
            links.append(("Source", proj.repository_url))
        if proj.url:
            links.append(("Demo", proj.url))
        dates = ""
        if proj.start_date or proj.end_date:
            dates = i18n.format_date_range(proj.start_date, proj.end_date)
        entries.append(
            {
                "name": proj.name,
                "tech": list(proj.tech_stack),
                "links": links,
                "dates": dates,
                "bullets": [text for text in proj.bullets if text.strip()],
            }
        )
    return {"title": i18n.t("projects"), "entries": entries}


def _languages(data: RenderInput, i18n: Localizer) -> Optional[dict[str, Any]]:
    if not data.languages:
        return None
    entries = [
        (lang.language, i18n.format_proficiency_level(lang.proficiency.value)) for lang in data.languages
    ]
    return {"title": i18n.t("languages"), "entries": entries}


SectionBuilder = Callable[[RenderInput, Localizer], Optional[dict[str, Any]]]

SECTIONS: tuple[tuple[str, SectionBuilder], ...] = (
    ("header", _header),
    ("summary", _summary),
    ("education", _education),
    ("skills", _skills),
    ("experience", _experience),
    ("projects", _projects),
    ("languages", _languages),
)


def render_resume_html(data: RenderInput) -> str:
    i18n = Localizer(data.locale or data.resume.target_language)
    sections = []
    for name, builder in SECTIONS:
        section = builder(data, i18n)
        if section is not None:
            sections.append((name, section))

    template = _env.get_template("resume/document.html")
    return template.render(
        lang=data.resume.target_language or "en",
        title=data.user.display_name(),
        font_size=f"{data.font_size:g}",
        sections=sections,
    )
