from __future__ import annotations

import logging

from sqlalchemy import text as sql_text

from life_dashboards.db import get_engine
from life_dashboards.settings import get_settings

logger = logging.getLogger(__name__)

USERS_TABLE = "users"
JOURNAL_TABLE = "journal_entries"
TODOS_TABLE = "todos"
HABIT_LOGS_TABLE = "habit_logs"
FILES_TABLE = "files"


def ensure_directories() -> None:
    settings = get_settings()
    for path in (settings.data_dir, settings.uploads_dir, settings.files_dir, settings.avatars_dir):
        path.mkdir(parents=True, exist_ok=True)


async def init_db():
    ensure_directories()
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {USERS_TABLE} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    email TEXT,
                    username TEXT,
                    avatar_path TEXT
                )
                """
            )
        )
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {JOURNAL_TABLE} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL DEFAULT 1,
                    entry_date TEXT NOT NULL,
                    title TEXT,
                    content TEXT,
                    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
                )
                """
            )
        )
        await conn.execute(
            sql_text(
                f"CREATE UNIQUE INDEX IF NOT EXISTS idx_journal_unique "
                f"ON {JOURNAL_TABLE} (user_id, entry_date, title)"
            )
        )
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {TODOS_TABLE} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL DEFAULT 1,
                    label TEXT NOT NULL,
                    is_done INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
                )
                """
            )
        )
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {HABIT_LOGS_TABLE} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL DEFAULT 1,
                    habit_name TEXT NOT NULL,
                    log_date TEXT NOT NULL,
                    completed INTEGER NOT NULL DEFAULT 1,
                    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
                )
                """
            )
        )
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {FILES_TABLE} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL DEFAULT 1,
                    original_name TEXT NOT NULL,
                    stored_name TEXT NOT NULL,
                    mime_type TEXT,
                    size_bytes INTEGER,
                    stored_path TEXT NOT NULL,
                    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
                )
                """
            )
        )
    logger.info("Database schema ready")
