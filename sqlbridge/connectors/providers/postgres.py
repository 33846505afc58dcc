"""
PostgreSQL engine built on psycopg 3 (async connections, autocommit).
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

import psycopg

from sqlbridge.config import settings
from sqlbridge.errors import ConnectorError, EngineConnectionError, QuerySyntaxError

from ..base import (
    ColumnSchema,
    ConnectionHandle,
    EngineAdapter,
    EngineKind,
    ExecutionOutcome,
    QueryResult,
    SchemaInfo,
    TableSchema,
    request_response_result,
)
from ..statements import ExecutionPlan, StatementPlan, classify

LOGGER = logging.getLogger(__name__)

SCHEMA_SQL = """
    SELECT c.table_name, c.column_name, c.data_type, c.is_nullable,
           (pk.column_name IS NOT NULL) AS is_primary
    FROM information_schema.columns c
    JOIN information_schema.tables t
      ON t.table_schema = c.table_schema AND t.table_name = c.table_name
    LEFT JOIN (
        SELECT ku.table_name, ku.column_name
        FROM information_schema.table_constraints tc
        JOIN information_schema.key_column_usage ku
          ON tc.constraint_name = ku.constraint_name
         AND tc.table_schema = ku.table_schema
        WHERE tc.constraint_type = 'PRIMARY KEY'
          AND tc.table_schema = %(schema)s
    ) pk ON pk.table_name = c.table_name AND pk.column_name = c.column_name
    WHERE c.table_schema = %(schema)s AND t.table_type = 'BASE TABLE'
    ORDER BY c.table_name, c.ordinal_position
"""


def _translate_error(exc: psycopg.Error) -> ConnectorError:
    if isinstance(exc, (psycopg.OperationalError, psycopg.InterfaceError)):
        return EngineConnectionError(str(exc))
    return QuerySyntaxError(str(exc))


def _connection_kwargs(config: Dict[str, Any]) -> Dict[str, Any]:
    kwargs = {
        "host": config.get("host") or "localhost",
        "port": config.get("port") or settings.POSTGRES_DEFAULT_PORT,
        "dbname": config.get("database"),
        "user": config.get("username"),
        "password": config.get("password"),
    }
    return {key: value for key, value in kwargs.items() if value is not None}


async def connect(config: Dict[str, Any]) -> psycopg.AsyncConnection:
    try:
        conn = await psycopg.AsyncConnection.connect(autocommit=True, **_connection_kwargs(config))
        await conn.execute("SELECT NOW()")
        return conn
    except psycopg.Error as exc:
        LOGGER.error("Connection to PostgreSQL failed: %s", exc)
        raise EngineConnectionError(f"Unable to connect to PostgreSQL: {exc}") from exc


async def close(native_handle: psycopg.AsyncConnection) -> None:
    await native_handle.close()


async def execute(
    handle: ConnectionHandle,
    sql: str,
    plan: Optional[StatementPlan] = None,
) -> ExecutionOutcome:
    plan = plan or classify(sql)
    conn: psycopg.AsyncConnection = handle.native_handle
    if plan.plan is ExecutionPlan.MULTI_READ:
        # One round trip per SELECT; the first failure aborts the whole call.
        return [await _run_statement(conn, f"{statement};", plan) for statement in plan.statements]
    return await _run_statement(conn, plan.text, plan)


async def _run_statement(conn: psycopg.AsyncConnection, sql: str, plan: StatementPlan) -> QueryResult:
    start = time.perf_counter()
    try:
        async with conn.cursor() as cursor:
            await cursor.execute(sql)
            field_names: Optional[List[str]] = None
            rows: List[Any] = []
            if cursor.description is not None:
                field_names = [desc.name for desc in cursor.description]
                rows = await cursor.fetchall()
            affected_rows = cursor.rowcount
    except psycopg.Error as exc:
        LOGGER.error("SQL execution failed on PostgreSQL: %s", exc)
        raise _translate_error(exc) from exc

    return request_response_result(
        field_names=field_names,
        rows=rows,
        affected_rows=affected_rows,
        batch=plan.plan is ExecutionPlan.BATCH,
        is_mutating=plan.is_mutating,
        start=start,
        sql=sql,
    )


async def fetch_schema(handle: ConnectionHandle) -> SchemaInfo:
    conn: psycopg.AsyncConnection = handle.native_handle
    schema = handle.config.get("schema") or "public"
    try:
        async with conn.cursor() as cursor:
            await cursor.execute(SCHEMA_SQL, {"schema": schema})
            rows = await cursor.fetchall()
    except psycopg.Error as exc:
        LOGGER.error("Failed to fetch PostgreSQL schema: %s", exc)
        raise _translate_error(exc) from exc

    grouped: Dict[str, List[ColumnSchema]] = {}
    for table_name, column_name, data_type, is_nullable, is_primary in rows:
        grouped.setdefault(table_name, []).append(
            ColumnSchema(
                name=column_name,
                type=data_type,
                primary_key=bool(is_primary),
                nullable=is_nullable == "YES",
            )
        )
    return SchemaInfo(tables=[TableSchema(name=table, columns=cols) for table, cols in grouped.items()])


ADAPTER = EngineAdapter(
    kind=EngineKind.POSTGRES,
    connect=connect,
    execute=execute,
    close=close,
    fetch_schema=fetch_schema,
)

__all__ = ["ADAPTER", "connect", "execute", "close", "fetch_schema"]
