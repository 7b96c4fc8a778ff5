from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from vitae.core.config import settings

_CATALOG_CACHE: dict[str, "TemplateSpec"] | None = None
_CATALOG_PATH = Path(__file__).resolve().parents[1] / "config" / "templates.yaml"


@dataclass(frozen=True)
class TemplateSpec:
    name: str
    display_name: str
    description: str
    font_size: float = 11.0
    show_summary: bool = True
    margin_in: float = 0.4


def _parse_template(name: str, raw: Any) -> TemplateSpec:
    if not isinstance(raw, dict):
        raise RuntimeError(f"Invalid template entry '{name}' in '{_CATALOG_PATH}': expected a mapping.")
    return TemplateSpec(
        name=name,
        display_name=str(raw.get("display_name") or name),
        description=str(raw.get("description") or ""),
        font_size=float(raw.get("font_size", 11)),
        show_summary=bool(raw.get("show_summary", True)),
        margin_in=float(raw.get("margin_in", 0.4)),
    )


def load_template_catalog() -> dict[str, TemplateSpec]:
    """Load the template catalog from vitae/config/templates.yaml and cache it."""
    global _CATALOG_CACHE

    if _CATALOG_CACHE is not None:
        return _CATALOG_CACHE

    try:
        raw = _CATALOG_PATH.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(f"Failed to read template catalog '{_CATALOG_PATH}': {exc}") from exc

    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"Invalid YAML in template catalog '{_CATALOG_PATH}': {exc}") from exc

    if not isinstance(parsed, dict) or not isinstance(parsed.get("templates"), dict):
        raise RuntimeError(f"Invalid template catalog '{_CATALOG_PATH}': expected a 'templates' mapping.")

    catalog = {
        str(name).strip().lower(): _parse_template(str(name).strip().lower(), entry)
        for name, entry in parsed["templates"].items()
    }
    if not catalog:
        raise RuntimeError(f"Template catalog '{_CATALOG_PATH}' is empty.")

    _CATALOG_CACHE = catalog
    return _CATALOG_CACHE


def resolve_template(name: str | None) -> TemplateSpec:
    catalog = load_template_catalog()
    key = (name or "").strip().lower()
    if key in catalog:
        return catalog[key]
    if settings.default_template in catalog:
        return catalog[settings.default_template]
    return next(iter(catalog.values()))
