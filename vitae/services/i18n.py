"""Locale-aware labels and date formatting for rendered resumes.

English is the fallback for unknown locales and for keys missing from a
locale's table. Everything here is pure.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Optional

EN_US = "en-US"
PT_BR = "pt-BR"
ES_ES = "es-ES"
FR_FR = "fr-FR"
DE_DE = "de-DE"

SUPPORTED_LOCALES: tuple[str, ...] = (EN_US, PT_BR, ES_ES, FR_FR, DE_DE)

_LANGUAGE_NAMES = {
    EN_US: "English",
    PT_BR: "Português (Brasil)",
    ES_ES: "Español",
    FR_FR: "Français",
    DE_DE: "Deutsch",
}

_TRANSLATIONS: dict[str, dict[str, str]] = {
    EN_US: {
        "professional_summary": "Professional Summary",
        "education": "Education",
        "experience": "Experience",
        "projects": "Projects",
        "technical_skills": "Technical Skills",
        "languages": "Languages",
        "present": "Present",
        "gpa": "GPA",
        "grade": "Grade",
        "native": "Native",
        "fluent": "Fluent",
        "advanced": "Advanced",
        "intermediate": "Intermediate",
        "basic": "Basic",
    },
    PT_BR: {
        "professional_summary": "Resumo Profissional",
        "education": "Formação Acadêmica",
        "experience": "Experiência Profissional",
        "projects": "Projetos",
        "technical_skills": "Habilidades Técnicas",
        "languages": "Idiomas",
        "present": "Atual",
        "gpa": "CR",
        "grade": "Média",
        "native": "Nativo",
        "fluent": "Fluente",
        "advanced": "Avançado",
        "intermediate": "Intermediário",
        "basic": "Básico",
    },
    ES_ES: {
        "professional_summary": "Resumen Profesional",
        "education": "Formación Académica",
        "experience": "Experiencia Profesional",
        "projects": "Proyectos",
        "technical_skills": "Habilidades Técnicas",
        "languages": "Idiomas",
        "present": "Actual",
        "gpa": "Promedio",
        "grade": "Nota",
        "native": "Nativo",
        "fluent": "Fluido",
        "advanced": "Avanzado",
        "intermediate": "Intermedio",
        "basic": "Básico",
    },
    FR_FR: {
        "professional_summary": "Résumé Professionnel",
        "education": "Formation",
        "experience": "Expérience Professionnelle",
        "projects": "Projets",
        "technical_skills": "Compétences Techniques",
        "languages": "Langues",
        "present": "Présent",
        "gpa": "Moyenne",
        "grade": "Note",
        "native": "Natif",
        "fluent": "Courant",
        "advanced": "Avancé",
        "intermediate": "Intermédiaire",
        "basic": "Basique",
    },
    DE_DE: {
        "professional_summary": "Berufsprofil",
        "education": "Ausbildung",
        "experience": "Berufserfahrung",
        "projects": "Projekte",
        "technical_skills": "Technische Fähigkeiten",
        "languages": "Sprachen",
        "present": "Aktuell",
        "gpa": "Notendurchschnitt",
        "grade": "Note",
        "native": "Muttersprache",
        "fluent": "Fließend",
        "advanced": "Fortgeschritten",
        "intermediate": "Mittelstufe",
        "basic": "Grundkenntnisse",
    },
}

_MONTHS: dict[str, tuple[str, ...]] = {
    EN_US: ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"),
    PT_BR: ("Jan", "Fev", "Mar", "Abr", "Mai", "Jun", "Jul", "Ago", "Set", "Out", "Nov", "Dez"),
    ES_ES: ("Ene", "Feb", "Mar", "Abr", "May", "Jun", "Jul", "Ago", "Sep", "Oct", "Nov", "Dic"),
    FR_FR: ("Jan", "Fév", "Mar", "Avr", "Mai", "Juin", "Juil", "Août", "Sep", "Oct", "Nov", "Déc"),
    DE_DE: ("Jan", "Feb", "Mär", "Apr", "Mai", "Jun", "Jul", "Aug", "Sep", "Okt", "Nov", "Dez"),
}

_PROFICIENCY_KEYS = frozenset({"native", "fluent", "advanced", "intermediate", "basic"})
_PROFICIENCY_ALIASES = {"beginner": "basic"}

_ISO_DAY_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_ISO_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")
_MONTH_YEAR_RE = re.compile(r"^([A-Za-z]{3}) (\d{4})$")
_EN_MONTH_INDEX = {name.lower(): idx for idx, name in enumerate(_MONTHS[EN_US], start=1)}


def parse_locale(raw: str | None) -> str:
    """Map any language tag (``pt_BR``, ``de``, ``fr-CA``...) to a supported locale."""
    tag = (raw or "").strip().lower().replace("_", "-")
    if tag.startswith("pt"):
        return PT_BR
    if tag.startswith("es"):
        return ES_ES
    if tag.startswith("fr"):
        return FR_FR
    if tag.startswith("de"):
        return DE_DE
    return EN_US


def supported_locales() -> list[str]:
    return list(SUPPORTED_LOCALES)


def language_name(locale: str) -> str:
    return _LANGUAGE_NAMES[parse_locale(locale)]


def _parse_date_string(value: str) -> Optional[date]:
    match = _ISO_DAY_RE.match(value)
    if match:
        try:
            return datetime.strptime(value, "%Y-%m-%d").date()
        except ValueError:
            return None
    match = _ISO_MONTH_RE.match(value)
    if match:
        month = int(match.group(2))
        if 1 <= month <= 12:
            return date(int(match.group(1)), month, 1)
        return None
    match = _MONTH_YEAR_RE.match(value)
    if match:
        month = _EN_MONTH_INDEX.get(match.group(1).lower())
        if month:
            return date(int(match.group(2)), month, 1)
    return None


class Localizer:
    def __init__(self, locale: str | None = None):
        self.locale = parse_locale(locale)

    def t(self, key: str) -> str:
        table = _TRANSLATIONS.get(self.locale, {})
        if key in table:
            return table[key]
        return _TRANSLATIONS[EN_US].get(key, key)

    def format_date(self, value: date) -> str:
        if self.locale == PT_BR:
            return f"{value.month:02d}/{value.year}"
        months = _MONTHS.get(self.locale, _MONTHS[EN_US])
        return f"{months[value.month - 1]} {value.year}"

    def format_date_string(self, value: str | None) -> str:
        """Format ``YYYY-MM-DD``, ``YYYY-MM`` or ``Mon YYYY``; return anything else unchanged."""
        if not value:
            return ""
        parsed = _parse_date_string(value.strip())
        if parsed is None:
            return value
        return self.format_date(parsed)

    def format_date_range(self, start: str | date | None, end: str | date | None) -> str:
        start_text = self._format_any(start)
        end_text = self._format_any(end) or self.t("present")
        if not start_text:
            return end_text
        return f"{start_text} – {end_text}"

    def format_gpa(self, gpa: float, scale: float = 4.0) -> str:
        if scale == 10:
            return f"{self.t('gpa')}: {gpa:.1f}"
        return f"{self.t('gpa')}: {gpa:.2f}"

    def format_proficiency_level(self, level: str) -> str:
        key = (level or "").strip().lower()
        key = _PROFICIENCY_ALIASES.get(key, key)
        if key in _PROFICIENCY_KEYS:
            return self.t(key)
        return level

    def _format_any(self, value: str | date | None) -> str:
        if value is None:
            return ""
        if isinstance(value, date):
            return self.format_date(value)
        return self.format_date_string(value)
