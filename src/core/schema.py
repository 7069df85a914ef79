"""SQLite schema for devboard (code-first approach)."""

import logging

from src.core import db_client


logger = logging.getLogger(__name__)


TABLE_SCHEMAS: dict[str, str] = {
    "users": """CREATE TABLE IF NOT EXISTS users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        username TEXT UNIQUE NOT NULL,
        email TEXT UNIQUE NOT NULL,
        password TEXT NOT NULL,
        temp_password INTEGER NOT NULL DEFAULT 0,
        role TEXT NOT NULL DEFAULT 'developer'
            CHECK (role IN ('developer', 'community_manager', 'admin')),
        profile_picture TEXT,
        custom_link TEXT UNIQUE,
        developer_code TEXT,
        last_security_check TEXT,
        created_at TEXT NOT NULL
    )""",
    "tasks": """CREATE TABLE IF NOT EXISTS tasks (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title TEXT NOT NULL CHECK (length(trim(title)) > 0),
        description TEXT NOT NULL DEFAULT '',
        status TEXT NOT NULL DEFAULT 'not-started'
            CHECK (status IN ('not-started', 'in-progress', 'done')),
        priority TEXT NOT NULL DEFAULT 'medium'
            CHECK (priority IN ('low', 'medium', 'high')),
        assigned_to INTEGER REFERENCES users(id),
        created_by INTEGER REFERENCES users(id),
        due_date TEXT,
        game TEXT,
        claimable INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        CHECK (NOT (claimable = 1 AND assigned_to IS NOT NULL))
    )""",
    "notifications": """CREATE TABLE IF NOT EXISTS notifications (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id INTEGER NOT NULL REFERENCES users(id),
        title TEXT NOT NULL,
        message TEXT NOT NULL,
        read INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL
    )""",
}

INDEXES: list[str] = [
    "CREATE INDEX IF NOT EXISTS idx_tasks_assigned_to ON tasks (assigned_to)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_claimable ON tasks (claimable, assigned_to)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_created_at ON tasks (created_at)",
    "CREATE INDEX IF NOT EXISTS idx_notifications_user_id ON notifications (user_id)",
]


async def init_db(*, db_path: str | None = None) -> None:
    """Create all tables and indexes if they do not exist yet."""
    conn = await db_client.get_connection(db_path=db_path)
    for table_name, ddl in TABLE_SCHEMAS.items():
        await conn.execute(ddl)
        logger.debug("Ensured table", extra={"table": table_name})
    for ddl in INDEXES:
        await conn.execute(ddl)
    await conn.commit()
    logger.info("Database schema initialized", extra={"tables": list(TABLE_SCHEMAS)})
