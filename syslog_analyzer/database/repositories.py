"""
Data access layer for pattern rules.
"""

from typing import Iterable, List, Optional

from syslog_analyzer.database.db import get_db
from syslog_analyzer.models.rule import Rule, RuleSnapshot


class RuleRepository:
    """
    Repository for rule CRUD operations.

    Rules are kept in insertion order; that order is their evaluation
    priority.
    """

    @staticmethod
    async def add(rule: Rule) -> str:
        """Append a rule after all existing rules."""
        await RuleRepository.add_many([rule])
        return rule.id

    @staticmethod
    async def add_many(rules: Iterable[Rule]) -> List[str]:
        """Append several rules, keeping their relative order."""
        ids = []
        async with await get_db() as db:
            # Hold the write lock from reading MAX(position) until commit
            await db.execute("BEGIN IMMEDIATE")
            cursor = await db.execute("SELECT COALESCE(MAX(position), -1) FROM rules")
            (position,) = await cursor.fetchone()

            for rule in rules:
                position += 1
                await db.execute(
                    """
                    INSERT INTO rules (
                        id, position, name, description, pattern,
                        is_regex, category, severity, enabled, preset
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (rule.id, position, *_rule_values(rule)),
                )
                ids.append(rule.id)

            await db.commit()
        return ids

    @staticmethod
    async def update(rule: Rule) -> bool:
        """Replace a rule's fields, keeping its position."""
        async with await get_db() as db:
            cursor = await db.execute(
                """
                UPDATE rules SET
                    name = ?, description = ?, pattern = ?, is_regex = ?,
                    category = ?, severity = ?, enabled = ?, preset = ?
                WHERE id = ?
                """,
                (*_rule_values(rule), rule.id)
            )
            await db.commit()
            return cursor.rowcount > 0

    @staticmethod
    async def delete(rule_id: str) -> bool:
        """Delete a rule by ID."""
        async with await get_db() as db:
            cursor = await db.execute("DELETE FROM rules WHERE id = ?", (rule_id,))
            await db.commit()
            return cursor.rowcount > 0

    @staticmethod
    async def get_by_id(rule_id: str) -> Optional[Rule]:
        """Retrieve a rule by ID."""
        async with await get_db() as db:
            db.row_factory = _dict_factory
            cursor = await db.execute(
                "SELECT * FROM rules WHERE id = ?",
                (rule_id,)
            )
            row = await cursor.fetchone()

            if not row:
                return None

            return _row_to_rule(row)

    @staticmethod
    async def get_all() -> List[Rule]:
        """Retrieve all rules in evaluation order."""
        async with await get_db() as db:
            db.row_factory = _dict_factory
            cursor = await db.execute("SELECT * FROM rules ORDER BY position ASC, rowid ASC")
            rows = await cursor.fetchall()

            return [_row_to_rule(row) for row in rows]

    @staticmethod
    async def snapshot() -> RuleSnapshot:
        """Immutable ordered copy of the current rules."""
        return tuple(await RuleRepository.get_all())


def _rule_values(rule: Rule) -> tuple:
    return (
        rule.name,
        rule.description,
        rule.pattern,
        int(rule.is_regex),
        rule.category.value,
        rule.severity.value,
        int(rule.enabled),
        int(rule.preset),
    )


def _dict_factory(cursor, row):
    """Convert SQLite row to dictionary."""
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


def _row_to_rule(row: dict) -> Rule:
    """Convert database row to Rule model."""
    return Rule(
        id=row["id"],
        name=row["name"],
        description=row.get("description") or "",
        pattern=row["pattern"],
        is_regex=bool(row.get("is_regex", 1)),
        category=row["category"],
        severity=row["severity"],
        enabled=bool(row.get("enabled", 1)),
        preset=bool(row.get("preset", 0)),
    )
