"""
Table definitions for both engines.

The two DDL sets carry the same tables and columns; they differ only in
identity syntax, float type and timestamp type.
"""

import logging
from typing import List

from .adapter import DbAdapter

logger = logging.getLogger(__name__)

PG_SCHEMA: List[str] = [
    """
    CREATE TABLE IF NOT EXISTS financial_data (
        id SERIAL PRIMARY KEY,
        month TEXT NOT NULL,
        revenue DOUBLE PRECISION DEFAULT 0,
        expenses DOUBLE PRECISION DEFAULT 0,
        cash_on_hand DOUBLE PRECISION DEFAULT 0,
        category TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS decisions (
        id SERIAL PRIMARY KEY,
        timestamp TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        decision_text TEXT NOT NULL,
        context TEXT,
        expected_outcome TEXT,
        actual_outcome TEXT,
        status TEXT DEFAULT 'pending'
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS agent_logs (
        id SERIAL PRIMARY KEY,
        timestamp TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        agent_name TEXT NOT NULL,
        action TEXT NOT NULL,
        recommendation TEXT,
        impact_score DOUBLE PRECISION
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS models (
        id SERIAL PRIMARY KEY,
        name TEXT NOT NULL,
        version TEXT NOT NULL DEFAULT '1',
        config TEXT,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS agents (
        id SERIAL PRIMARY KEY,
        name TEXT NOT NULL UNIQUE,
        type TEXT NOT NULL,
        config TEXT,
        status TEXT NOT NULL DEFAULT 'idle',
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS integrations (
        id SERIAL PRIMARY KEY,
        provider TEXT NOT NULL,
        type TEXT NOT NULL,
        status TEXT NOT NULL DEFAULT 'disconnected',
        config TEXT,
        last_sync_at TIMESTAMP,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS users (
        id SERIAL PRIMARY KEY,
        email TEXT NOT NULL UNIQUE,
        password_hash TEXT NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
]

SQLITE_SCHEMA: List[str] = [
    """
    CREATE TABLE IF NOT EXISTS financial_data (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        month TEXT NOT NULL,
        revenue REAL DEFAULT 0,
        expenses REAL DEFAULT 0,
        cash_on_hand REAL DEFAULT 0,
        category TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS decisions (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        timestamp DATETIME DEFAULT CURRENT_TIMESTAMP,
        decision_text TEXT NOT NULL,
        context TEXT,
        expected_outcome TEXT,
        actual_outcome TEXT,
        status TEXT DEFAULT 'pending'
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS agent_logs (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        timestamp DATETIME DEFAULT CURRENT_TIMESTAMP,
        agent_name TEXT NOT NULL,
        action TEXT NOT NULL,
        recommendation TEXT,
        impact_score REAL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS models (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        version TEXT NOT NULL DEFAULT '1',
        config TEXT,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS agents (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL UNIQUE,
        type TEXT NOT NULL,
        config TEXT,
        status TEXT NOT NULL DEFAULT 'idle',
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS integrations (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        provider TEXT NOT NULL,
        type TEXT NOT NULL,
        status TEXT NOT NULL DEFAULT 'disconnected',
        config TEXT,
        last_sync_at DATETIME,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        email TEXT NOT NULL UNIQUE,
        password_hash TEXT NOT NULL,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP
    )
    """,
]

TABLES = ("financial_data", "decisions", "agent_logs", "models", "agents", "integrations", "users")


def schema_for(dialect: str) -> List[str]:
    if dialect == "postgresql":
        return PG_SCHEMA
    if dialect == "sqlite":
        return SQLITE_SCHEMA
    raise ValueError(f"Unsupported dialect: {dialect}")


async def init_schema(db: DbAdapter) -> None:
    """Create every table that does not exist yet. Safe to call repeatedly."""
    statements = schema_for(db.dialect)
    for statement in statements:
        await db.exec(statement.strip() + ";")
    logger.info(f"Schema ready ({db.dialect}, {len(statements)} tables)")
