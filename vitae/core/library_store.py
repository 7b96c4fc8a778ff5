"""SQLite persistence for resumes and the user's content library.

Library records are stored as JSON documents keyed by kind; resumes get
their own table with a version column for optimistic concurrency.
"""

from __future__ import annotations

import logging
import os
import sqlite3
import threading
from typing import Optional, Sequence, Type, TypeVar

from pydantic import BaseModel

from vitae.domain import (
    Bullet,
    ConcurrentModification,
    Education,
    Experience,
    ExperienceNotFound,
    Project,
    Resume,
    ResumeNotFound,
    ResumeStatus,
    Skill,
    SpokenLanguage,
    User,
    UserNotFound,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS library_records (
        kind TEXT NOT NULL,
        id TEXT NOT NULL,
        owner_id TEXT NOT NULL,
        sort_key INTEGER NOT NULL DEFAULT 0,
        payload_json TEXT NOT NULL,
        PRIMARY KEY (kind, id)
    );
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_library_records_owner
    ON library_records (kind, owner_id, sort_key);
    """,
    """
    CREATE TABLE IF NOT EXISTS resumes (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        status TEXT NOT NULL,
        version INTEGER NOT NULL,
        created_at TEXT NOT NULL,
        payload_json TEXT NOT NULL
    );
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_resumes_user
    ON resumes (user_id, created_at);
    """,
)

_KINDS: dict[Type[BaseModel], str] = {
    User: "user",
    Experience: "experience",
    Bullet: "bullet",
    Skill: "skill",
    Education: "education",
    Project: "project",
    SpokenLanguage: "spoken_language",
}


class SQLiteStore:
    def __init__(self, db_path: str):
        self.db_path = db_path
        self.lock = threading.Lock()
        self._conn: sqlite3.Connection | None = None

    def connection(self) -> sqlite3.Connection:
        with self.lock:
            if self._conn is not None:
                return self._conn

            directory = os.path.dirname(self.db_path)
            if directory:
                os.makedirs(directory, exist_ok=True)

            conn = sqlite3.connect(
                self.db_path,
                check_same_thread=False,
                timeout=5,
                isolation_level=None,
            )
            if self.db_path != ":memory:":
                conn.execute("PRAGMA journal_mode=WAL;")
            conn.execute("PRAGMA synchronous=NORMAL;")
            conn.execute("PRAGMA busy_timeout=5000;")
            for statement in _SCHEMA:
                conn.execute(statement)
            self._conn = conn
            logger.info("library_store_ready path=%s", self.db_path)
            return self._conn

    def close(self) -> None:
        with self.lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def put_record(self, record: BaseModel, owner_id: str, sort_key: int = 0) -> None:
        conn = self.connection()
        with self.lock:
            conn.execute(
                """
                INSERT INTO library_records (kind, id, owner_id, sort_key, payload_json)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT (kind, id) DO UPDATE SET
                    owner_id = excluded.owner_id,
                    sort_key = excluded.sort_key,
                    payload_json = excluded.payload_json
                """,
                (_KINDS[type(record)], record.id, owner_id, sort_key, record.model_dump_json()),
            )

    def get_record(self, model: Type[ModelT], record_id: str) -> Optional[ModelT]:
        conn = self.connection()
        with self.lock:
            row = conn.execute(
                "SELECT payload_json FROM library_records WHERE kind = ? AND id = ?",
                (_KINDS[model], record_id),
            ).fetchone()
        if row is None:
            return None
        return model.model_validate_json(row[0])

    def list_records(self, model: Type[ModelT], owner_id: str) -> list[ModelT]:
        conn = self.connection()
        with self.lock:
            rows = conn.execute(
                """
                SELECT payload_json FROM library_records
                WHERE kind = ? AND owner_id = ?
                ORDER BY sort_key, rowid
                """,
                (_KINDS[model], owner_id),
            ).fetchall()
        return [model.model_validate_json(row[0]) for row in rows]

    def list_records_by_ids(self, model: Type[ModelT], record_ids: Sequence[str]) -> list[ModelT]:
        ids = [rid for rid in dict.fromkeys(record_ids) if rid]
        if not ids:
            return []
        conn = self.connection()
        placeholders = ",".join("?" for _ in ids)
        with self.lock:
            rows = conn.execute(
                f"""
                SELECT id, payload_json FROM library_records
                WHERE kind = ? AND id IN ({placeholders})
                """,
                (_KINDS[model], *ids),
            ).fetchall()
        by_id = {row[0]: model.model_validate_json(row[1]) for row in rows}
        return [by_id[rid] for rid in ids if rid in by_id]


class SQLiteResumeRepository:
    def __init__(self, store: SQLiteStore):
        self._store = store

    def create(self, resume: Resume) -> None:
        conn = self._store.connection()
        with self._store.lock:
            conn.execute(
                """
                INSERT INTO resumes (id, user_id, status, version, created_at, payload_json)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    resume.id,
                    resume.user_id,
                    resume.status.value,
                    resume.version,
                    resume.created_at.isoformat(),
                    resume.model_dump_json(),
                ),
            )

    def get(self, resume_id: str) -> Resume:
        conn = self._store.connection()
        with self._store.lock:
            row = conn.execute("SELECT payload_json FROM resumes WHERE id = ?", (resume_id,)).fetchone()
        if row is None:
            raise ResumeNotFound()
        return Resume.model_validate_json(row[0])

    def update(self, resume: Resume) -> None:
        expected = resume.version
        resume.version = expected + 1
        conn = self._store.connection()
        with self._store.lock:
            cursor = conn.execute(
                """
                UPDATE resumes
                SET status = ?, version = ?, payload_json = ?
                WHERE id = ? AND version = ?
                """,
                (resume.status.value, resume.version, resume.model_dump_json(), resume.id, expected),
            )
            updated = cursor.rowcount
            exists = updated or conn.execute("SELECT 1 FROM resumes WHERE id = ?", (resume.id,)).fetchone()
        if not updated:
            resume.version = expected
            if not exists:
                raise ResumeNotFound()
            logger.warning("resume_update_conflict resume_id=%s expected_version=%s", resume.id, expected)
            raise ConcurrentModification()

    def delete(self, resume_id: str) -> None:
        conn = self._store.connection()
        with self._store.lock:
            cursor = conn.execute("DELETE FROM resumes WHERE id = ?", (resume_id,))
        if cursor.rowcount == 0:
            raise ResumeNotFound()

    def list_by_user(
        self,
        user_id: str,
        status: Optional[ResumeStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[Resume], int]:
        where = "user_id = ?"
        params: list[object] = [user_id]
        if status is not None:
            where += " AND status = ?"
            params.append(status.value)
        conn = self._store.connection()
        with self._store.lock:
            total = conn.execute(f"SELECT COUNT(*) FROM resumes WHERE {where}", params).fetchone()[0]
            rows = conn.execute(
                f"""
                SELECT payload_json FROM resumes WHERE {where}
                ORDER BY created_at DESC, rowid DESC
                LIMIT ? OFFSET ?
                """,
                (*params, limit, offset),
            ).fetchall()
        return [Resume.model_validate_json(row[0]) for row in rows], int(total)


class SQLiteUserRepository:
    def __init__(self, store: SQLiteStore):
        self._store = store

    def get(self, user_id: str) -> User:
        user = self._store.get_record(User, user_id)
        if user is None:
            raise UserNotFound()
        return user


class SQLiteExperienceRepository:
    def __init__(self, store: SQLiteStore):
        self._store = store

    def get(self, experience_id: str) -> Experience:
        experience = self._store.get_record(Experience, experience_id)
        if experience is None:
            raise ExperienceNotFound()
        return experience

    def list_by_user(self, user_id: str) -> list[Experience]:
        return self._store.list_records(Experience, user_id)


class SQLiteBulletRepository:
    def __init__(self, store: SQLiteStore):
        self._store = store

    def list_by_user(self, user_id: str) -> list[Bullet]:
        return self._store.list_records(Bullet, user_id)

    def list_by_ids(self, bullet_ids: Sequence[str]) -> list[Bullet]:
        return self._store.list_records_by_ids(Bullet, bullet_ids)


class _OwnedListRepository:
    model: Type[BaseModel]

    def __init__(self, store: SQLiteStore):
        self._store = store

    def list_by_user(self, user_id: str) -> list:
        return self._store.list_records(self.model, user_id)


class SQLiteSkillRepository(_OwnedListRepository):
    model = Skill


class SQLiteEducationRepository(_OwnedListRepository):
    model = Education


class SQLiteProjectRepository(_OwnedListRepository):
    model = Project


class SQLiteSpokenLanguageRepository(_OwnedListRepository):
    model = SpokenLanguage
