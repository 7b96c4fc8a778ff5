from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any

import yaml

from vitae.core.config import settings
from vitae.core.library_store import SQLiteStore
from vitae.domain import Bullet, Education, Experience, Project, Skill, SpokenLanguage, User

logger = logging.getLogger(__name__)


def _records(raw: dict[str, Any], key: str) -> list[dict[str, Any]]:
    value = raw.get(key) or []
    if not isinstance(value, list):
        raise RuntimeError(f"'{key}' must be a list")
    return value


def import_library(store: SQLiteStore, raw: dict[str, Any]) -> User:
    """Load one user's content library; records are upserted by ID."""
    user = User.model_validate(raw.get("user") or {})
    store.put_record(user, owner_id=user.id)

    for order, item in enumerate(_records(raw, "experiences")):
        bullets = item.get("bullets") or []
        fields = {k: v for k, v in item.items() if k != "bullets"}
        experience = Experience.model_validate({**fields, "user_id": user.id})
        store.put_record(experience, owner_id=user.id, sort_key=order)
        for bullet_order, entry in enumerate(bullets):
            if isinstance(entry, str):
                entry = {"content": entry}
            bullet = Bullet.model_validate(
                {"display_order": bullet_order, **entry, "experience_id": experience.id}
            )
            store.put_record(bullet, owner_id=user.id, sort_key=order * 1000 + bullet.display_order)

    for model, key in (
        (Skill, "skills"),
        (Education, "education"),
        (Project, "projects"),
        (SpokenLanguage, "languages"),
    ):
        for order, item in enumerate(_records(raw, key)):
            record = model.model_validate({**item, "user_id": user.id})
            store.put_record(record, owner_id=user.id, sort_key=order)

    return user


def main() -> None:
    parser = argparse.ArgumentParser(description="Import a YAML content library into the resume store.")
    parser.add_argument("--file", required=True, help="Library YAML file")
    parser.add_argument("--db", default=settings.database_path, help="SQLite database path")
    args = parser.parse_args()

    logging.basicConfig(level=settings.log_level, format="%(message)s")
    raw = yaml.safe_load(Path(args.file).read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise RuntimeError("Library file must contain a top-level mapping")

    store = SQLiteStore(args.db)
    try:
        user = import_library(store, raw)
    finally:
        store.close()
    logger.info("library_imported user_id=%s db=%s", user.id, args.db)
    print(f"Imported library for user {user.id} into {args.db}")


if __name__ == "__main__":
    main()
