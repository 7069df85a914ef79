"""SQLite database client wrapper with CRUD operations."""

import asyncio
import logging
import re
import threading
from collections.abc import Sequence
from datetime import UTC, date, datetime
from enum import Enum
from pathlib import Path
from typing import Any

import aiosqlite

from src.core.config import settings
from src.core.errors import ConflictError, DatabaseError, NotFoundError, ValidationError


logger = logging.getLogger(__name__)

SqlParam = str | int | float | bool | None

# Only allow: column_name [ASC|DESC][, column_name [ASC|DESC]]...
_SORT_PATTERN = re.compile(
    r"^[A-Za-z_]\w*(\s+(ASC|DESC))?(\s*,\s*[A-Za-z_]\w*(\s+(ASC|DESC))?)*$",
    re.IGNORECASE,
)


def _validate_collection_name(collection: str) -> None:
    """Validate that a collection name contains only alphanumeric characters and underscores."""
    if not re.match(r"^[a-zA-Z_][a-zA-Z0-9_]*$", collection):
        msg = f"Invalid collection name: {collection}. Only alphanumeric characters and underscores are allowed."
        raise ValueError(msg)


def utc_now() -> str:
    """Current UTC time as an ISO-8601 string (the storage format for timestamps)."""
    return datetime.now(UTC).isoformat()


def _to_sql_value(value: Any) -> SqlParam:
    """Convert Python values to types SQLite accepts."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime | date):
        return value.isoformat()
    if isinstance(value, bool):
        return int(value)
    return value


def _raise_for_integrity(collection: str, error: aiosqlite.IntegrityError) -> None:
    """Translate SQLite constraint failures into request-level errors."""
    text = str(error)
    if "UNIQUE" in text:
        msg = f"Duplicate value in {collection}: {text}"
        raise ConflictError(msg) from error
    msg = f"Constraint failed in {collection}: {text}"
    raise ValidationError(msg) from error


def get_db_path(db_path: str | None = None) -> Path:
    """Get the resolved SQLite database file path."""
    path_str = db_path or settings.sqlite_db_path
    return Path(path_str).resolve()


_db_connections: dict[tuple[int, int, str], aiosqlite.Connection] = {}
_db_locks: dict[int, asyncio.Lock] = {}


def _get_lock(loop_id: int) -> asyncio.Lock:
    """Return the connection-cache lock for one event loop (locks cannot cross loops)."""
    lock = _db_locks.get(loop_id)
    if lock is None:
        lock = _db_locks[loop_id] = asyncio.Lock()
    return lock


async def get_connection(*, db_path: str | None = None) -> aiosqlite.Connection:
    """Get or create a cached connection for the current thread, loop, and db path."""
    thread_id = threading.get_ident()
    loop = asyncio.get_running_loop()
    loop_id = id(loop)
    path = get_db_path(db_path)
    cache_key = (thread_id, loop_id, str(path))

    if cache_key in _db_connections:
        return _db_connections[cache_key]

    async with _get_lock(loop_id):
        # Double-check after acquiring lock
        if cache_key in _db_connections:
            return _db_connections[cache_key]

        path.parent.mkdir(parents=True, exist_ok=True)

        conn = await aiosqlite.connect(str(path))
        conn.row_factory = aiosqlite.Row
        await conn.execute("PRAGMA foreign_keys = ON")
        await conn.execute("PRAGMA journal_mode = WAL")

        _db_connections[cache_key] = conn

        logger.info(
            "Created new SQLite connection",
            extra={"db_path": str(path), "thread_id": thread_id, "loop_id": loop_id},
        )
        return conn


async def close_connection(*, db_path: str | None = None) -> None:
    """Close the cached SQLite connection for the current thread, loop, and db path."""
    thread_id = threading.get_ident()
    loop_id = id(asyncio.get_running_loop())
    path = get_db_path(db_path)
    cache_key = (thread_id, loop_id, str(path))

    async with _get_lock(loop_id):
        conn = _db_connections.pop(cache_key, None)
        if conn is None:
            return
        try:
            await conn.close()
            logger.info("Closed SQLite connection", extra={"db_path": str(path)})
        except aiosqlite.Error as e:
            logger.warning("Error closing SQLite connection", extra={"error": str(e), "db_path": str(path)})


async def init_db(*, db_path: str | None = None) -> None:
    """Initialize the database schema by delegating to schema.init_db()."""
    from src.core import schema

    await schema.init_db(db_path=db_path)


async def create_record(*, collection: str, data: dict[str, Any]) -> dict[str, Any]:
    """Insert a new record and return it with its assigned id.

    Raises:
        ConflictError: If a UNIQUE constraint is violated
        ValidationError: If a CHECK or foreign-key constraint is violated
        DatabaseError: For any other storage failure
    """
    _validate_collection_name(collection)
    columns = list(data.keys())
    columns_str = ", ".join(columns)
    placeholders_str = ", ".join("?" for _ in columns)
    values = [_to_sql_value(data[key]) for key in columns]

    query = f"INSERT INTO {collection} ({columns_str}) VALUES ({placeholders_str})"  # noqa: S608 - collection is validated
    try:
        conn = await get_connection()
        cursor = await conn.execute(query, values)
        await conn.commit()
    except aiosqlite.IntegrityError as e:
        _raise_for_integrity(collection, e)
        raise
    except aiosqlite.Error as e:
        logger.error("create_record_failed", extra={"collection": collection, "error": str(e)})
        msg = f"Failed to create record in {collection}: {e}"
        raise DatabaseError(msg) from e

    record_id = cursor.lastrowid
    logger.info("Created record", extra={"collection": collection, "record_id": record_id})
    return await get_record(collection=collection, record_id=record_id)


async def get_record(*, collection: str, record_id: int) -> dict[str, Any]:
    """Fetch a single record by ID, raising NotFoundError if not found."""
    _validate_collection_name(collection)
    query = f"SELECT * FROM {collection} WHERE id = ?"  # noqa: S608 - collection is validated
    row = await fetch_one(query, (record_id,))
    if row is None:
        msg = f"Record not found in {collection}: {record_id}"
        raise NotFoundError(msg)
    return row


async def update_record(*, collection: str, record_id: int, data: dict[str, Any]) -> int:
    """Update a record by ID and return the number of rows changed (0 or 1)."""
    if not data:
        msg = "Empty update payload"
        raise ValueError(msg)

    _validate_collection_name(collection)
    set_clause = ", ".join(f"{key} = ?" for key in data)
    values = [_to_sql_value(val) for val in data.values()]
    values.append(record_id)

    query = f"UPDATE {collection} SET {set_clause} WHERE id = ?"  # noqa: S608 - collection is validated
    return await execute(query, values, collection=collection)


async def delete_record(*, collection: str, record_id: int) -> int:
    """Delete a record by ID and return the number of rows removed (0 or 1)."""
    _validate_collection_name(collection)
    query = f"DELETE FROM {collection} WHERE id = ?"  # noqa: S608 - collection is validated
    return await execute(query, (record_id,), collection=collection)


async def list_records(
    *,
    collection: str,
    where: str = "",
    params: Sequence[Any] = (),
    sort: str = "id ASC",
) -> list[dict[str, Any]]:
    """List records with an optional parameterised WHERE clause and sort."""
    _validate_collection_name(collection)

    safe_sort = "id ASC"
    if _SORT_PATTERN.match(sort.strip()):
        safe_sort = sort.strip()
    else:
        logger.warning("Invalid sort parameter, using default", extra={"sort": sort})

    where_clause = f"WHERE {where}" if where else ""
    query = f"SELECT * FROM {collection} {where_clause} ORDER BY {safe_sort}"  # noqa: S608 - collection is validated
    return await fetch_all(query, params)


async def execute(query: str, params: Sequence[Any] = (), *, collection: str = "") -> int:
    """Run a single mutating statement, commit, and return the affected row count.

    A single statement is atomic in SQLite, so conditional updates written as one
    ``UPDATE ... WHERE`` behave as a compare-and-swap.
    """
    values = [_to_sql_value(v) for v in params]
    try:
        conn = await get_connection()
        cursor = await conn.execute(query, values)
        await conn.commit()
    except aiosqlite.IntegrityError as e:
        _raise_for_integrity(collection or "database", e)
        raise
    except aiosqlite.Error as e:
        logger.error("execute_failed", extra={"collection": collection, "error": str(e)})
        msg = f"Failed to execute statement on {collection or 'database'}: {e}"
        raise DatabaseError(msg) from e

    logger.debug("Executed statement", extra={"collection": collection, "rowcount": cursor.rowcount})
    return cursor.rowcount


async def fetch_all(query: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
    """Run a SELECT and return every row as a dict."""
    values = [_to_sql_value(v) for v in params]
    try:
        conn = await get_connection()
        cursor = await conn.execute(query, values)
        rows = await cursor.fetchall()
    except aiosqlite.Error as e:
        logger.error("fetch_all_failed", extra={"error": str(e)})
        msg = f"Failed to query database: {e}"
        raise DatabaseError(msg) from e
    return [dict(row) for row in rows]


async def fetch_one(query: str, params: Sequence[Any] = ()) -> dict[str, Any] | None:
    """Run a SELECT and return the first row as a dict, or None."""
    values = [_to_sql_value(v) for v in params]
    try:
        conn = await get_connection()
        cursor = await conn.execute(query, values)
        row = await cursor.fetchone()
    except aiosqlite.Error as e:
        logger.error("fetch_one_failed", extra={"error": str(e)})
        msg = f"Failed to query database: {e}"
        raise DatabaseError(msg) from e
    return dict(row) if row is not None else None
