from __future__ import annotations

from sqlalchemy import text as sql_text

from life_dashboards.db import get_sessionmaker
from life_dashboards.db_init import (
    USERS_TABLE,
    JOURNAL_TABLE,
    TODOS_TABLE,
    HABIT_LOGS_TABLE,
    FILES_TABLE,
)

FILE_SELECT_COLUMNS = [
    "id",
    "user_id",
    "original_name",
    "stored_name",
    "mime_type",
    "size_bytes",
    "stored_path",
    "created_at",
]


async def save_journal_entry(user_id: int, entry_date: str, title: str, content: str) -> dict:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(
                f"""
                INSERT INTO {JOURNAL_TABLE} (user_id, entry_date, title, content)
                VALUES (:user_id, :entry_date, :title, :content)
                ON CONFLICT(user_id, entry_date, title) DO UPDATE SET content=excluded.content
                """
            ),
            {"user_id": user_id, "entry_date": entry_date, "title": title, "content": content},
        )
        row = (await session.execute(
            sql_text(
                f"SELECT id, user_id, entry_date, title, content, created_at FROM {JOURNAL_TABLE} "
                "WHERE user_id = :user_id AND entry_date = :entry_date AND title = :title"
            ),
            {"user_id": user_id, "entry_date": entry_date, "title": title},
        )).mappings().fetchone()
        await session.commit()
    return dict(row) if row else {}


async def get_journal_sections(user_id: int, entry_date: str) -> dict[str, str]:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        rows = (await session.execute(
            sql_text(
                f"SELECT title, content FROM {JOURNAL_TABLE} "
                "WHERE user_id = :user_id AND entry_date = :entry_date"
            ),
            {"user_id": user_id, "entry_date": entry_date},
        )).fetchall()
    return {row[0]: row[1] or "" for row in rows}


async def add_todo(user_id: int, label: str, created_at: str | None = None) -> int:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        if created_at:
            result = await session.execute(
                sql_text(
                    f"INSERT INTO {TODOS_TABLE} (user_id, label, created_at) "
                    "VALUES (:user_id, :label, :created_at)"
                ),
                {"user_id": user_id, "label": label, "created_at": created_at},
            )
        else:
            result = await session.execute(
                sql_text(f"INSERT INTO {TODOS_TABLE} (user_id, label) VALUES (:user_id, :label)"),
                {"user_id": user_id, "label": label},
            )
        await session.commit()
    return int(result.lastrowid)


async def log_habit(user_id: int, habit_name: str, log_date: str, completed: bool = True) -> int:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        result = await session.execute(
            sql_text(
                f"INSERT INTO {HABIT_LOGS_TABLE} (user_id, habit_name, log_date, completed) "
                "VALUES (:user_id, :habit_name, :log_date, :completed)"
            ),
            {"user_id": user_id, "habit_name": habit_name, "log_date": log_date, "completed": int(completed)},
        )
        await session.commit()
    return int(result.lastrowid)


async def activity_counts(user_id: int, start_iso: str, end_iso: str) -> list[dict[str, int]]:
    """Per-date row counts for journal entries, todos and habit logs, in that order."""
    params = {"user_id": user_id, "start_date": start_iso, "end_date": end_iso}
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        journal_rows = (await session.execute(
            sql_text(
                f"""
                SELECT entry_date AS d, COUNT(*) AS c
                FROM {JOURNAL_TABLE}
                WHERE user_id = :user_id
                  AND entry_date BETWEEN :start_date AND :end_date
                GROUP BY entry_date
                """
            ),
            params,
        )).fetchall()
        todo_rows = (await session.execute(
            sql_text(
                f"""
                SELECT substr(created_at, 1, 10) AS d, COUNT(*) AS c
                FROM {TODOS_TABLE}
                WHERE user_id = :user_id
                  AND substr(created_at, 1, 10) BETWEEN :start_date AND :end_date
                GROUP BY substr(created_at, 1, 10)
                """
            ),
            params,
        )).fetchall()
        habit_rows = (await session.execute(
            sql_text(
                f"""
                SELECT log_date AS d, COUNT(*) AS c
                FROM {HABIT_LOGS_TABLE}
                WHERE user_id = :user_id
                  AND log_date BETWEEN :start_date AND :end_date
                GROUP BY log_date
                """
            ),
            params,
        )).fetchall()
    return [
        {str(row[0]): int(row[1]) for row in rows}
        for rows in (journal_rows, todo_rows, habit_rows)
    ]


async def create_file_record(
    user_id: int,
    original_name: str,
    stored_name: str,
    mime_type: str | None,
    size_bytes: int,
    stored_path: str,
) -> dict:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        result = await session.execute(
            sql_text(
                f"""
                INSERT INTO {FILES_TABLE} (user_id, original_name, stored_name, mime_type, size_bytes, stored_path)
                VALUES (:user_id, :original_name, :stored_name, :mime_type, :size_bytes, :stored_path)
                """
            ),
            {
                "user_id": user_id,
                "original_name": original_name,
                "stored_name": stored_name,
                "mime_type": mime_type,
                "size_bytes": size_bytes,
                "stored_path": stored_path,
            },
        )
        await session.commit()
    return {
        "id": int(result.lastrowid),
        "user_id": user_id,
        "original_name": original_name,
        "stored_name": stored_name,
        "mime_type": mime_type,
        "size_bytes": size_bytes,
        "stored_path": stored_path,
    }


async def get_file(user_id: int, file_id: int) -> dict | None:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        row = (await session.execute(
            sql_text(
                f"SELECT {', '.join(FILE_SELECT_COLUMNS)} FROM {FILES_TABLE} "
                "WHERE id = :id AND user_id = :user_id"
            ),
            {"id": file_id, "user_id": user_id},
        )).mappings().fetchone()
    return dict(row) if row else None


async def list_recent_files(user_id: int, limit: int = 10) -> list[dict]:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        rows = (await session.execute(
            sql_text(
                f"""
                SELECT id, original_name, mime_type
                FROM {FILES_TABLE}
                WHERE user_id = :user_id
                ORDER BY created_at DESC, id DESC
                LIMIT :limit
                """
            ),
            {"user_id": user_id, "limit": limit},
        )).mappings().all()
    return [dict(row) for row in rows]


async def get_avatar_path(user_id: int) -> str | None:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        row = (await session.execute(
            sql_text(f"SELECT avatar_path FROM {USERS_TABLE} WHERE id = :id"),
            {"id": user_id},
        )).fetchone()
    return row[0] if row and row[0] else None


async def set_avatar_path(user_id: int, avatar_path: str | None) -> None:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(
                f"INSERT INTO {USERS_TABLE} (id, avatar_path) VALUES (:id, :avatar_path) "
                "ON CONFLICT(id) DO UPDATE SET avatar_path=excluded.avatar_path"
            ),
            {"id": user_id, "avatar_path": avatar_path},
        )
        await session.commit()
