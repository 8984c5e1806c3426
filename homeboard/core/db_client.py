"""SQLite database handle with collection-style CRUD and explicit transactions."""

import asyncio
import logging
import re
import uuid
from collections.abc import AsyncIterator, Iterable, Mapping
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

import aiosqlite

from homeboard.core.config import constants


logger = logging.getLogger(__name__)

_IDENTIFIER_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")
_SORT_PATTERN = re.compile(r"^([+-]?)([A-Za-z_][A-Za-z0-9_]*)$")
_UNIQUE_FAILURE_PATTERN = re.compile(r"UNIQUE constraint failed: (.+)$")


class DatabaseError(Exception):
    """Raised when a store operation fails."""


class RecordNotFoundError(DatabaseError):
    """Raised when a record lookup by ID finds nothing."""


class UniqueViolationError(DatabaseError):
    """Raised when an insert or update breaks a UNIQUE constraint."""

    def __init__(self, message: str, *, columns: list[str]) -> None:
        super().__init__(message)
        self.columns = columns


def _validate_identifier(name: str) -> None:
    """Validate that a table or column name contains only alphanumeric characters and underscores."""
    if not _IDENTIFIER_PATTERN.match(name):
        msg = f"Invalid identifier: {name}. Only alphanumeric characters and underscores are allowed."
        raise ValueError(msg)


def utc_now_iso() -> str:
    """Current UTC time in the ISO format stored by every table."""
    return to_iso(datetime.now(UTC))


def to_iso(value: datetime) -> str:
    """Normalise a datetime to a lexically sortable UTC ISO string.

    Naive datetimes are assumed to already be UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="microseconds").replace("+00:00", "Z")


def _to_sql_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return to_iso(value)
    if isinstance(value, Enum):
        return value.value
    return value


def build_where(where: Mapping[str, Any] | None) -> tuple[str, list[Any]]:
    """Build an equality WHERE clause; ``None`` values match NULL."""
    if not where:
        return "", []

    conditions = []
    params = []
    for column, value in where.items():
        _validate_identifier(column)
        if value is None:
            conditions.append(f"{column} IS NULL")
        else:
            conditions.append(f"{column} = ?")
            params.append(_to_sql_value(value))

    return "WHERE " + " AND ".join(conditions), params


def build_order_by(sort: str) -> str:
    """Translate ``"-created,+name"`` style sort specs into ORDER BY terms."""
    if not sort:
        return "rowid ASC"

    terms = []
    for raw_term in sort.split(","):
        match = _SORT_PATTERN.match(raw_term.strip())
        if not match:
            msg = f"Invalid sort parameter: {sort}"
            raise ValueError(msg)
        direction = "DESC" if match.group(1) == "-" else "ASC"
        terms.append(f"{match.group(2)} {direction}")

    # rowid keeps insertion order as a stable tiebreaker for equal timestamps
    terms.append("rowid DESC" if terms[0].endswith("DESC") else "rowid ASC")
    return ", ".join(terms)


def _translate_integrity_error(error: aiosqlite.IntegrityError, table: str) -> DatabaseError:
    match = _UNIQUE_FAILURE_PATTERN.search(str(error))
    if match:
        columns = [part.strip().split(".")[-1] for part in match.group(1).split(",")]
        return UniqueViolationError(f"Duplicate value in {table}: {', '.join(columns)}", columns=columns)
    return DatabaseError(f"Integrity error in {table}: {error}")


class Database:
    """Async SQLite handle passed explicitly to every service call.

    A single connection is shared per handle. Writes outside ``transaction()``
    autocommit; inside it they join one ``BEGIN IMMEDIATE`` transaction that
    holds the SQLite write lock from its first statement.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = str(path)
        self._conn: aiosqlite.Connection | None = None
        self._lock = asyncio.Lock()
        self._tx_task: asyncio.Task[Any] | None = None

    async def connect(self) -> None:
        """Open the connection (idempotent)."""
        if self._conn is not None:
            return

        if self.path != ":memory:":
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)

        # isolation_level=None: autocommit, transactions are issued explicitly
        self._conn = await aiosqlite.connect(self.path, isolation_level=None)
        self._conn.row_factory = aiosqlite.Row
        await self._conn.execute("PRAGMA foreign_keys = ON")
        if self.path != ":memory:":
            await self._conn.execute("PRAGMA journal_mode = WAL")

        logger.info("Opened SQLite connection", extra={"db_path": self.path})

    async def close(self) -> None:
        """Close the connection if open."""
        if self._conn is None:
            return
        try:
            await self._conn.close()
            logger.info("Closed SQLite connection", extra={"db_path": self.path})
        finally:
            self._conn = None

    @property
    def connection(self) -> aiosqlite.Connection:
        if self._conn is None:
            msg = "Database is not connected. Call connect() first."
            raise DatabaseError(msg)
        return self._conn

    def _in_transaction(self) -> bool:
        return self._tx_task is not None and self._tx_task is asyncio.current_task()

    @asynccontextmanager
    async def _guard(self) -> AsyncIterator[aiosqlite.Connection]:
        """Keep statements from other coroutines out of an open transaction."""
        if self._in_transaction():
            yield self.connection
            return
        async with self._lock:
            yield self.connection

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Run the enclosed statements atomically.

        Commits on normal exit, rolls back on any exception. Nested calls from
        the same task join the outer transaction.
        """
        if self._in_transaction():
            yield
            return

        async with self._lock:
            conn = self.connection
            await conn.execute("BEGIN IMMEDIATE")
            self._tx_task = asyncio.current_task()
            try:
                yield
            except BaseException:
                await conn.execute("ROLLBACK")
                logger.warning("Rolled back transaction", extra={"db_path": self.path})
                raise
            else:
                await conn.execute("COMMIT")
            finally:
                self._tx_task = None

    async def execute_script(self, script: str) -> None:
        """Execute a multi-statement DDL script."""
        async with self._guard() as conn:
            await conn.executescript(script)

    async def fetch_all(self, query: str, params: Iterable[Any] = ()) -> list[dict[str, Any]]:
        """Run a read query and return rows as dictionaries."""
        try:
            async with self._guard() as conn:
                cursor = await conn.execute(query, [_to_sql_value(p) for p in params])
                rows = await cursor.fetchall()
            return [dict(row) for row in rows]
        except aiosqlite.Error as e:
            logger.error("fetch_all_failed", extra={"error": str(e)})
            msg = f"Failed to run query: {e}"
            raise DatabaseError(msg) from e

    async def fetch_value(self, query: str, params: Iterable[Any] = ()) -> Any:
        """Run a read query and return the first column of the first row."""
        try:
            async with self._guard() as conn:
                cursor = await conn.execute(query, [_to_sql_value(p) for p in params])
                row = await cursor.fetchone()
            return row[0] if row is not None else None
        except aiosqlite.Error as e:
            logger.error("fetch_value_failed", extra={"error": str(e)})
            msg = f"Failed to run query: {e}"
            raise DatabaseError(msg) from e

    async def create_record(self, *, collection: str, data: Mapping[str, Any]) -> dict[str, Any]:
        """Insert a new record and return it with its assigned id and timestamps."""
        _validate_identifier(collection)
        now = utc_now_iso()
        record = {"id": str(uuid.uuid4()), "created": now, "updated": now, **data}
        for column in record:
            _validate_identifier(column)

        columns_str = ", ".join(record)
        placeholders_str = ", ".join("?" for _ in record)
        query = f"INSERT INTO {collection} ({columns_str}) VALUES ({placeholders_str})"  # noqa: S608 - identifiers are validated

        try:
            async with self._guard() as conn:
                await conn.execute(query, [_to_sql_value(v) for v in record.values()])
        except aiosqlite.IntegrityError as e:
            logger.warning("create_record_rejected", extra={"collection": collection, "error": str(e)})
            raise _translate_integrity_error(e, collection) from e
        except aiosqlite.Error as e:
            logger.error("create_record_failed", extra={"collection": collection, "error": str(e)})
            msg = f"Failed to create record in {collection}: {e}"
            raise DatabaseError(msg) from e

        logger.info("Created record", extra={"collection": collection, "record_id": record["id"]})
        return await self.get_record(collection=collection, record_id=record["id"])

    async def create_records(self, *, collection: str, rows: list[Mapping[str, Any]]) -> int:
        """Insert several records sharing the same columns. Returns the inserted count."""
        if not rows:
            return 0

        _validate_identifier(collection)
        now = utc_now_iso()
        records = [{"id": str(uuid.uuid4()), "created": now, "updated": now, **row} for row in rows]
        columns = list(records[0])
        for column in columns:
            _validate_identifier(column)

        query = (
            f"INSERT INTO {collection} ({', '.join(columns)}) "  # noqa: S608 - identifiers are validated
            f"VALUES ({', '.join('?' for _ in columns)})"
        )

        try:
            async with self._guard() as conn:
                await conn.executemany(query, [[_to_sql_value(r[c]) for c in columns] for r in records])
        except aiosqlite.IntegrityError as e:
            logger.warning("create_records_rejected", extra={"collection": collection, "error": str(e)})
            raise _translate_integrity_error(e, collection) from e
        except aiosqlite.Error as e:
            logger.error("create_records_failed", extra={"collection": collection, "error": str(e)})
            msg = f"Failed to create records in {collection}: {e}"
            raise DatabaseError(msg) from e

        logger.info("Created records", extra={"collection": collection, "count": len(records)})
        return len(records)

    async def get_record(self, *, collection: str, record_id: str) -> dict[str, Any]:
        """Fetch a single record by ID, raising RecordNotFoundError if not found."""
        record = await self.get_first_record(collection=collection, where={"id": record_id})
        if record is None:
            msg = f"Record not found in {collection}: {record_id}"
            raise RecordNotFoundError(msg)
        return record

    async def get_first_record(self, *, collection: str, where: Mapping[str, Any]) -> dict[str, Any] | None:
        """Return the first record matching all ``where`` equalities, or None."""
        records = await self.list_records(collection=collection, where=where, per_page=1)
        return records[0] if records else None

    async def list_records(
        self,
        *,
        collection: str,
        where: Mapping[str, Any] | None = None,
        sort: str = "",
        page: int = 1,
        per_page: int = constants.DEFAULT_PER_PAGE_LIMIT,
    ) -> list[dict[str, Any]]:
        """List records with optional equality filtering, sorting, and pagination."""
        _validate_identifier(collection)
        where_clause, params = build_where(where)
        order_by = build_order_by(sort)
        offset = (page - 1) * per_page

        query = f"SELECT * FROM {collection} {where_clause} ORDER BY {order_by} LIMIT ? OFFSET ?"  # noqa: S608 - identifiers are validated
        try:
            async with self._guard() as conn:
                cursor = await conn.execute(query, [*params, per_page, offset])
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            logger.error("list_records_failed", extra={"collection": collection, "error": str(e)})
            msg = f"Failed to list records from {collection}: {e}"
            raise DatabaseError(msg) from e

        return [dict(row) for row in rows]

    async def count_records(self, *, collection: str, where: Mapping[str, Any] | None = None) -> int:
        """Count records matching all ``where`` equalities."""
        _validate_identifier(collection)
        where_clause, params = build_where(where)
        query = f"SELECT COUNT(*) FROM {collection} {where_clause}"  # noqa: S608 - identifiers are validated
        return int(await self.fetch_value(query, params) or 0)

    async def update_record(self, *, collection: str, record_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        """Update a record by ID and return the updated record."""
        if not data:
            msg = "Empty update payload"
            raise ValueError(msg)

        _validate_identifier(collection)
        changes = {**data, "updated": utc_now_iso()}
        for column in changes:
            _validate_identifier(column)

        set_clause = ", ".join(f"{column} = ?" for column in changes)
        query = f"UPDATE {collection} SET {set_clause} WHERE id = ?"  # noqa: S608 - identifiers are validated

        try:
            async with self._guard() as conn:
                cursor = await conn.execute(query, [*(_to_sql_value(v) for v in changes.values()), record_id])
                rowcount = cursor.rowcount
        except aiosqlite.IntegrityError as e:
            logger.warning("update_record_rejected", extra={"collection": collection, "record_id": record_id})
            raise _translate_integrity_error(e, collection) from e
        except aiosqlite.Error as e:
            logger.error("update_record_failed", extra={"collection": collection, "record_id": record_id, "error": str(e)})
            msg = f"Failed to update record in {collection}: {e}"
            raise DatabaseError(msg) from e

        if rowcount == 0:
            msg = f"Record not found in {collection}: {record_id}"
            raise RecordNotFoundError(msg)

        logger.info("Updated record", extra={"collection": collection, "record_id": record_id})
        return await self.get_record(collection=collection, record_id=record_id)

    async def delete_record(self, *, collection: str, record_id: str) -> None:
        """Delete a record by ID, raising RecordNotFoundError if not found."""
        deleted = await self.delete_records(collection=collection, where={"id": record_id})
        if deleted == 0:
            msg = f"Record not found in {collection}: {record_id}"
            raise RecordNotFoundError(msg)

    async def delete_records(self, *, collection: str, where: Mapping[str, Any]) -> int:
        """Delete every record matching ``where``. Returns the number removed."""
        if not where:
            msg = "Refusing to delete without a filter"
            raise ValueError(msg)

        _validate_identifier(collection)
        where_clause, params = build_where(where)
        query = f"DELETE FROM {collection} {where_clause}"  # noqa: S608 - identifiers are validated

        try:
            async with self._guard() as conn:
                cursor = await conn.execute(query, params)
                deleted = cursor.rowcount
        except aiosqlite.Error as e:
            logger.error("delete_records_failed", extra={"collection": collection, "error": str(e)})
            msg = f"Failed to delete records from {collection}: {e}"
            raise DatabaseError(msg) from e

        logger.info("Deleted records", extra={"collection": collection, "count": deleted})
        return deleted
