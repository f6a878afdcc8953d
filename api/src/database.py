"""
Database engine creation and schema initialization.

Accepts either a SQLAlchemy URL or an ADO-style connection string
("Data Source=app.db", "Server=...;Database=...;"). ADO-style strings are
routed to SQLite or SQL Server by a simple heuristic:
a string containing both "Data Source=" and ".db" is SQLite, anything
else is SQL Server.
"""

from typing import Dict
from urllib.parse import quote_plus

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from api.src.models.auth import Base, Role, RoleModel

logger = structlog.get_logger(__name__)

SQLITE_DRIVER = "sqlite+aiosqlite"
SQLSERVER_DRIVER = "mssql+aioodbc"
SQLSERVER_ODBC_DRIVER = "ODBC Driver 18 for SQL Server"


# ============================================================================
# CONNECTION STRING HANDLING
# ============================================================================


def is_sqlite_connection_string(connection_string: str) -> bool:
    """
    Classify an ADO-style connection string.

    Args:
        connection_string: Raw connection string

    Returns:
        True if the string points at a SQLite file
    """
    return "Data Source=" in connection_string and ".db" in connection_string


def parse_connection_string(connection_string: str) -> Dict[str, str]:
    """
    Split "Key=Value;Key=Value" into a dict with lower-cased keys.

    Args:
        connection_string: Raw connection string

    Returns:
        Mapping of keys to values (empty segments are skipped)
    """
    parts: Dict[str, str] = {}
    for segment in connection_string.split(";"):
        if not segment.strip() or "=" not in segment:
            continue
        key, _, value = segment.partition("=")
        parts[key.strip().lower()] = value.strip()
    return parts


def resolve_database_url(connection_string: str) -> str:
    """
    Turn a configured connection string into an async SQLAlchemy URL.

    Args:
        connection_string: SQLAlchemy URL or ADO-style connection string

    Returns:
        SQLAlchemy URL using an async driver
    """
    if "://" in connection_string:
        return connection_string

    if is_sqlite_connection_string(connection_string):
        path = parse_connection_string(connection_string).get("data source", "")
        return f"{SQLITE_DRIVER}:///{path}"

    odbc = connection_string
    if "driver=" not in connection_string.lower():
        odbc = f"DRIVER={{{SQLSERVER_ODBC_DRIVER}}};{connection_string}"
    return f"{SQLSERVER_DRIVER}:///?odbc_connect={quote_plus(odbc)}"


def is_sqlite(url: str) -> bool:
    """Whether a SQLAlchemy URL targets SQLite."""
    return url.startswith("sqlite")


# ============================================================================
# ENGINE AND SCHEMA
# ============================================================================


def create_engine(connection_string: str, echo: bool = False) -> AsyncEngine:
    """
    Create an async engine for the configured database.

    Args:
        connection_string: SQLAlchemy URL or ADO-style connection string
        echo: Echo SQL statements to the log

    Returns:
        Async SQLAlchemy engine
    """
    url = resolve_database_url(connection_string)
    engine = create_async_engine(url, echo=echo, pool_pre_ping=not is_sqlite(url))

    logger.info(
        "database_engine_created",
        dialect=engine.dialect.name,
        driver=engine.dialect.driver
    )
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Session factory producing sessions that keep loaded state after commit."""
    return async_sessionmaker(engine, expire_on_commit=False)


async def init_schema(engine: AsyncEngine) -> None:
    """
    Create missing tables and seed the default roles.

    Safe to call on every startup.

    Args:
        engine: Async engine
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = create_session_factory(engine)
    async with session_factory() as session:
        result = await session.execute(select(RoleModel.name))
        existing = set(result.scalars().all())

        missing = [role.value for role in Role if role.value not in existing]
        for name in missing:
            session.add(RoleModel(name=name))

        if missing:
            await session.commit()

    logger.info("database_schema_initialized", seeded_roles=missing)
