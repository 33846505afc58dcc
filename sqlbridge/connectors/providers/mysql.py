"""
MySQL engine built on aiomysql (PyMySQL protocol and error classes).
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

import aiomysql
from pymysql import err as mysql_errors
from pymysql.constants import CLIENT

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
    SELECT table_name, column_name, data_type, is_nullable, column_key
    FROM information_schema.columns
    WHERE table_schema = DATABASE()
    ORDER BY table_name, ordinal_position
"""


def _translate_error(exc: Exception) -> ConnectorError:
    if isinstance(exc, mysql_errors.InterfaceError):
        return EngineConnectionError(str(exc))
    if isinstance(exc, mysql_errors.OperationalError):
        code = exc.args[0] if exc.args else 0
        # 2000-2999 are client-side (CR_*) errors: lost or refused connections.
        if isinstance(code, int) and 2000 <= code < 3000:
            return EngineConnectionError(str(exc))
        if isinstance(code, int) and code in (1044, 1045):
            return EngineConnectionError(str(exc))
    return QuerySyntaxError(str(exc))


def _connection_kwargs(config: Dict[str, Any]) -> Dict[str, Any]:
    kwargs = {
        "host": config.get("host") or "localhost",
        "port": int(config.get("port") or settings.MYSQL_DEFAULT_PORT),
        "db": config.get("database"),
        "user": config.get("username"),
        "password": config.get("password") or "",
    }
    return {key: value for key, value in kwargs.items() if value is not None}


async def connect(config: Dict[str, Any]) -> aiomysql.Connection:
    try:
        return await aiomysql.connect(
            autocommit=True,
            client_flag=CLIENT.MULTI_STATEMENTS,
            **_connection_kwargs(config),
        )
    except (mysql_errors.MySQLError, OSError) as exc:
        LOGGER.error("Connection to MySQL failed: %s", exc)
        raise EngineConnectionError(f"Unable to connect to MySQL: {exc}") from exc


async def close(native_handle: aiomysql.Connection) -> None:
    await native_handle.ensure_closed()


async def execute(
    handle: ConnectionHandle,
    sql: str,
    plan: Optional[StatementPlan] = None,
) -> ExecutionOutcome:
    plan = plan or classify(sql)
    conn: aiomysql.Connection = handle.native_handle
    if plan.plan is ExecutionPlan.MULTI_READ:
        return [await _run_statement(conn, f"{statement};", plan) for statement in plan.statements]
    return await _run_statement(conn, plan.text, plan)


async def _run_statement(conn: aiomysql.Connection, sql: str, plan: StatementPlan) -> QueryResult:
    start = time.perf_counter()
    try:
        async with conn.cursor() as cursor:
            affected_rows = await cursor.execute(sql)
            field_names: Optional[List[str]] = None
            rows: List[Any] = []
            if cursor.description:
                field_names = [desc[0] for desc in cursor.description]
                rows = list(await cursor.fetchall())
            last_insert_id = cursor.lastrowid if plan.is_insert else None
            # Drain remaining result sets so the session stays usable.
            while await cursor.nextset():
                pass
    except mysql_errors.MySQLError as exc:
        LOGGER.error("SQL execution failed on MySQL: %s", exc)
        raise _translate_error(exc) from exc

    return request_response_result(
        field_names=field_names,
        rows=rows,
        affected_rows=affected_rows or 0,
        batch=plan.plan is ExecutionPlan.BATCH,
        is_mutating=plan.is_mutating,
        start=start,
        sql=sql,
        last_insert_id=last_insert_id,
    )


async def fetch_schema(handle: ConnectionHandle) -> SchemaInfo:
    conn: aiomysql.Connection = handle.native_handle
    try:
        async with conn.cursor() as cursor:
            await cursor.execute(SCHEMA_SQL)
            rows = await cursor.fetchall()
    except mysql_errors.MySQLError as exc:
        LOGGER.error("Failed to fetch MySQL schema: %s", exc)
        raise _translate_error(exc) from exc

    grouped: Dict[str, List[ColumnSchema]] = {}
    for table_name, column_name, data_type, is_nullable, column_key in rows:
        grouped.setdefault(table_name, []).append(
            ColumnSchema(
                name=column_name,
                type=data_type,
                primary_key=column_key == "PRI",
                nullable=is_nullable == "YES",
            )
        )
    return SchemaInfo(tables=[TableSchema(name=table, columns=cols) for table, cols in grouped.items()])


ADAPTER = EngineAdapter(
    kind=EngineKind.MYSQL,
    connect=connect,
    execute=execute,
    close=close,
    fetch_schema=fetch_schema,
)

__all__ = ["ADAPTER", "connect", "execute", "close", "fetch_schema"]
