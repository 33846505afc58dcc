"""
Embedded-file engine built on aiosqlite.

SQLite exposes three call shapes with different result semantics: a row query,
a script run that yields no rows, and a single write that reports the change
count and last row id. The statement plan decides which one is used.
"""

from __future__ import annotations

import logging
import sqlite3
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import aiosqlite

from sqlbridge.config import settings
from sqlbridge.errors import ConnectorError, EngineConnectionError, QuerySyntaxError

from ..base import (
    BATCH_MESSAGE,
    ColumnSchema,
    ConnectionHandle,
    EngineAdapter,
    EngineKind,
    ExecutionOutcome,
    QueryResult,
    SchemaInfo,
    TableSchema,
    elapsed_ms,
    positional_rows,
    unique_columns,
)
from ..statements import ExecutionPlan, StatementPlan, classify

LOGGER = logging.getLogger(__name__)

_CONNECTION_FAILURE_MARKERS = ("unable to open", "closed database", "disk i/o", "file is not a database")


def _translate_error(exc: Exception) -> ConnectorError:
    message = str(exc)
    if isinstance(exc, ValueError):
        # aiosqlite raises ValueError once its worker thread has stopped.
        return EngineConnectionError(message)
    if any(marker in message.lower() for marker in _CONNECTION_FAILURE_MARKERS):
        return EngineConnectionError(message)
    return QuerySyntaxError(message)


async def connect(config: Dict[str, Any]) -> aiosqlite.Connection:
    path = config.get("path") or settings.DEFAULT_SQLITE_PATH
    if path != ":memory:":
        Path(path).expanduser().parent.mkdir(parents=True, exist_ok=True)
    try:
        # isolation_level=None leaves transaction control to the submitted SQL.
        return await aiosqlite.connect(path, isolation_level=None)
    except sqlite3.Error as exc:
        LOGGER.error("Unable to open SQLite database %s: %s", path, exc)
        raise EngineConnectionError(f"Unable to open SQLite database: {exc}") from exc


async def close(native_handle: aiosqlite.Connection) -> None:
    await native_handle.close()


async def _fetch_rows(conn: aiosqlite.Connection, sql: str) -> Tuple[List[str], List[List[Any]]]:
    async with conn.execute(sql) as cursor:
        rows = await cursor.fetchall()
        names = [description[0] for description in cursor.description or ()]
    if not rows:
        return [], []
    return unique_columns(names), positional_rows(rows)


async def execute(
    handle: ConnectionHandle,
    sql: str,
    plan: Optional[StatementPlan] = None,
) -> ExecutionOutcome:
    plan = plan or classify(sql)
    conn: aiosqlite.Connection = handle.native_handle
    start = time.perf_counter()
    try:
        if plan.plan is ExecutionPlan.MULTI_READ:
            result_sets: List[QueryResult] = []
            for statement in plan.statements:
                statement_sql = f"{statement};"
                statement_start = time.perf_counter()
                columns, rows = await _fetch_rows(conn, statement_sql)
                result_sets.append(
                    QueryResult(
                        columns=columns,
                        rows=rows,
                        row_count=len(rows),
                        execution_time_ms=elapsed_ms(statement_start),
                        sql=statement_sql,
                    )
                )
            return result_sets

        if plan.plan is ExecutionPlan.SINGLE_READ:
            columns, rows = await _fetch_rows(conn, plan.text)
            return QueryResult(
                columns=columns,
                rows=rows,
                row_count=len(rows),
                execution_time_ms=elapsed_ms(start),
                sql=plan.text,
            )

        if plan.plan is ExecutionPlan.BATCH:
            await conn.executescript(plan.text)
            return QueryResult(
                columns=[],
                rows=[],
                row_count=0,
                execution_time_ms=elapsed_ms(start),
                is_mutating=True,
                message=BATCH_MESSAGE,
                sql=plan.text,
            )

        async with conn.execute(plan.text) as cursor:
            row_count = max(cursor.rowcount, 0)
            last_insert_id = cursor.lastrowid if plan.is_insert else None
        return QueryResult(
            columns=[],
            rows=[],
            row_count=row_count,
            execution_time_ms=elapsed_ms(start),
            is_mutating=True,
            last_insert_id=last_insert_id or None,
            sql=plan.text,
        )
    except (sqlite3.Error, ValueError) as exc:
        LOGGER.error("SQL execution failed on SQLite database: %s", exc)
        raise _translate_error(exc) from exc


async def fetch_schema(handle: ConnectionHandle) -> SchemaInfo:
    conn: aiosqlite.Connection = handle.native_handle
    try:
        async with conn.execute("SELECT name FROM sqlite_master WHERE type='table' ORDER BY name") as cursor:
            table_names = [row[0] for row in await cursor.fetchall()]

        tables: List[TableSchema] = []
        for name in table_names:
            quoted = name.replace('"', '""')
            async with conn.execute(f'PRAGMA table_info("{quoted}")') as cursor:
                # cid, name, type, notnull, dflt_value, pk
                columns = [
                    ColumnSchema(
                        name=row[1],
                        type=row[2],
                        primary_key=bool(row[5]),
                        nullable=not bool(row[3]),
                    )
                    for row in await cursor.fetchall()
                ]
            tables.append(TableSchema(name=name, columns=columns))
        return SchemaInfo(tables=tables)
    except (sqlite3.Error, ValueError) as exc:
        LOGGER.error("Failed to fetch SQLite schema: %s", exc)
        raise _translate_error(exc) from exc


ADAPTER = EngineAdapter(
    kind=EngineKind.SQLITE,
    connect=connect,
    execute=execute,
    close=close,
    fetch_schema=fetch_schema,
)

__all__ = ["ADAPTER", "connect", "execute", "close", "fetch_schema"]
