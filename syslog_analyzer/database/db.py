"""
SQLite database connection and initialization.
"""

from pathlib import Path

import aiosqlite

from syslog_analyzer.config import get_settings


DATABASE_PATH = Path(get_settings().database_path)


async def init_database():
    """Initialize the database with required tables."""
    # Ensure data directory exists
    DATABASE_PATH.parent.mkdir(parents=True, exist_ok=True)

    async with aiosqlite.connect(DATABASE_PATH) as db:
        # Rules only; log entries live in memory for the process lifetime
        await db.execute("""
            CREATE TABLE IF NOT EXISTS rules (
                id TEXT PRIMARY KEY,
                position INTEGER NOT NULL,
                name TEXT NOT NULL,
                description TEXT DEFAULT '',
                pattern TEXT NOT NULL,
                is_regex INTEGER DEFAULT 1,
                category TEXT NOT NULL,
                severity TEXT NOT NULL,
                enabled INTEGER DEFAULT 1,
                preset INTEGER DEFAULT 0,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        await db.execute(
            "CREATE INDEX IF NOT EXISTS idx_rules_position ON rules(position)"
        )

        await db.commit()


async def get_db():
    """Get database connection as async context manager."""
    DATABASE_PATH.parent.mkdir(parents=True, exist_ok=True)
    return aiosqlite.connect(DATABASE_PATH)
