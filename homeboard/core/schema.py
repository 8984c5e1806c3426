"""SQLite schema for homeboard (code-first approach)."""

import logging

from homeboard.core.db_client import Database


logger = logging.getLogger(__name__)


# Creation order matters: referenced tables come first
TABLE_SCHEMAS: dict[str, str] = {
    "users": """CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY,
        created TEXT NOT NULL,
        updated TEXT NOT NULL,
        email TEXT NOT NULL UNIQUE,
        name TEXT NOT NULL
    )""",
    "houses": """CREATE TABLE IF NOT EXISTS houses (
        id TEXT PRIMARY KEY,
        created TEXT NOT NULL,
        updated TEXT NOT NULL,
        name TEXT NOT NULL,
        description TEXT
    )""",
    "house_members": """CREATE TABLE IF NOT EXISTS house_members (
        id TEXT PRIMARY KEY,
        created TEXT NOT NULL,
        updated TEXT NOT NULL,
        user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        house_id TEXT NOT NULL REFERENCES houses(id) ON DELETE CASCADE,
        display_name TEXT NOT NULL,
        role TEXT NOT NULL CHECK (role IN ('OWNER', 'MEMBER')),
        UNIQUE (user_id, house_id),
        UNIQUE (display_name, house_id)
    )""",
    "categories": """CREATE TABLE IF NOT EXISTS categories (
        id TEXT PRIMARY KEY,
        created TEXT NOT NULL,
        updated TEXT NOT NULL,
        name TEXT NOT NULL,
        color TEXT,
        house_id TEXT NOT NULL REFERENCES houses(id) ON DELETE CASCADE,
        UNIQUE (name, house_id)
    )""",
    "tasks": """CREATE TABLE IF NOT EXISTS tasks (
        id TEXT PRIMARY KEY,
        created TEXT NOT NULL,
        updated TEXT NOT NULL,
        title TEXT NOT NULL,
        description TEXT,
        status TEXT NOT NULL DEFAULT 'PENDING' CHECK (status IN ('PENDING', 'COMPLETED')),
        priority TEXT NOT NULL DEFAULT 'MEDIUM' CHECK (priority IN ('LOW', 'MEDIUM', 'HIGH')),
        due_date TEXT,
        completed_at TEXT,
        house_id TEXT NOT NULL REFERENCES houses(id) ON DELETE CASCADE,
        category_id TEXT REFERENCES categories(id) ON DELETE SET NULL,
        created_by_id TEXT REFERENCES house_members(id) ON DELETE SET NULL
    )""",
    "task_assignees": """CREATE TABLE IF NOT EXISTS task_assignees (
        id TEXT PRIMARY KEY,
        created TEXT NOT NULL,
        updated TEXT NOT NULL,
        task_id TEXT NOT NULL REFERENCES tasks(id) ON DELETE CASCADE,
        house_member_id TEXT NOT NULL REFERENCES house_members(id) ON DELETE CASCADE,
        UNIQUE (task_id, house_member_id)
    )""",
}

INDEXES: list[str] = [
    "CREATE INDEX IF NOT EXISTS idx_house_members_house ON house_members (house_id)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_house ON tasks (house_id)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_created_by ON tasks (created_by_id)",
    "CREATE INDEX IF NOT EXISTS idx_task_assignees_member ON task_assignees (house_member_id)",
    "CREATE INDEX IF NOT EXISTS idx_categories_house ON categories (house_id)",
]


async def init_db(db: Database) -> None:
    """Create all tables and indexes if they do not exist yet."""
    script = ";\n".join([*TABLE_SCHEMAS.values(), *INDEXES]) + ";"
    await db.execute_script(script)
    logger.info("Database schema initialized", extra={"tables": list(TABLE_SCHEMAS)})
