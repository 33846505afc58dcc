"""
Engine adapter contract and the normalised result types shared by every engine.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Sequence, Union


class EngineKind(str, Enum):
    SQLITE = "sqlite"
    POSTGRES = "postgres"
    MYSQL = "mysql"


BATCH_MESSAGE = "Multiple statements executed successfully."


# ---------------------------------------------------------------------------
# Handles
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class ConnectionHandle:
    """
    A live engine connection owned by the ConnectionRegistry.
    `native_handle` is the driver object and is only lent out for the duration of a call.
    """

    id: str
    engine_kind: EngineKind
    native_handle: Any
    config: Dict[str, Any] = field(default_factory=dict)
    connected: bool = True


# ---------------------------------------------------------------------------
# Result models
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class QueryResult:
    """
    Normalised SQL execution result.
    """

    columns: List[str]
    rows: List[List[Any]]
    row_count: int
    execution_time_ms: float
    is_mutating: bool = False
    last_insert_id: Optional[int] = None
    message: Optional[str] = None
    sql: Optional[str] = None

    def json_safe(self) -> Dict[str, Any]:
        """Return structure suitable for JSON serialization."""
        return {
            "columns": list(self.columns),
            "rows": [[_json_safe(cell) for cell in row] for row in self.rows],
            "rowCount": self.row_count,
            "executionTimeMs": self.execution_time_ms,
            "isMutating": self.is_mutating,
            "lastInsertId": self.last_insert_id,
            "message": self.message,
        }


# Multi-SELECT batches return one QueryResult per statement, in source order.
ResultSetList = List[QueryResult]
ExecutionOutcome = Union[QueryResult, ResultSetList]


def _json_safe(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    if hasattr(value, "isoformat"):
        return value.isoformat()  # datetime/date/time
    try:
        json.dumps(value)
        return value
    except TypeError:
        return str(value)


@dataclass(slots=True)
class ColumnSchema:
    name: str
    type: str
    primary_key: bool = False
    nullable: bool = True


@dataclass(slots=True)
class TableSchema:
    name: str
    columns: List[ColumnSchema] = field(default_factory=list)


@dataclass(slots=True)
class SchemaInfo:
    """
    Describes the available tables/columns behind a connection.
    """

    tables: List[TableSchema] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tables": [
                {
                    "name": t.name,
                    "columns": [
                        {
                            "name": c.name,
                            "type": c.type,
                            "primaryKey": c.primary_key,
                            "nullable": c.nullable,
                        }
                        for c in t.columns
                    ],
                }
                for t in self.tables
            ]
        }


def schema_text(schema: SchemaInfo) -> str:
    """Render schema metadata in the plain-text form used by LLM prompts."""
    parts: List[str] = []
    for table in schema.tables:
        lines = [f"Table: {table.name}", "Columns:"]
        for column in table.columns:
            flags = ""
            if column.primary_key:
                flags += " [PRIMARY KEY]"
            if not column.nullable:
                flags += " [NOT NULL]"
            lines.append(f"  - {column.name} ({column.type}){flags}")
        parts.append("\n".join(lines) + "\n")
    return "\n".join(parts)


# ---------------------------------------------------------------------------
# Normalisation helpers
# ---------------------------------------------------------------------------


def unique_columns(names: Iterable[str]) -> List[str]:
    """Disambiguate repeated column names (`id`, `id_1`, ...) keeping their order."""
    seen: set[str] = set()
    columns: List[str] = []
    for name in names:
        candidate = name
        suffix = 1
        while candidate in seen:
            candidate = f"{name}_{suffix}"
            suffix += 1
        seen.add(candidate)
        columns.append(candidate)
    return columns


def positional_rows(rows: Sequence[Sequence[Any]]) -> List[List[Any]]:
    return [list(row) for row in rows]


def elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 3)


def request_response_result(
    *,
    field_names: Optional[Sequence[str]],
    rows: Sequence[Sequence[Any]],
    affected_rows: int,
    batch: bool,
    is_mutating: bool,
    start: float,
    sql: str,
    last_insert_id: Optional[int] = None,
) -> QueryResult:
    """
    Normalise a client-server response (field descriptors plus row tuples).
    `field_names` is None when the statement produced no result set.
    """
    if batch:
        return QueryResult(
            columns=[],
            rows=[],
            row_count=0,
            execution_time_ms=elapsed_ms(start),
            is_mutating=True,
            message=BATCH_MESSAGE,
            sql=sql,
        )
    if field_names is None:
        return QueryResult(
            columns=[],
            rows=[],
            row_count=max(affected_rows, 0),
            execution_time_ms=elapsed_ms(start),
            is_mutating=is_mutating,
            last_insert_id=last_insert_id or None,
            sql=sql,
        )
    # A read without rows carries no columns, whatever the engine.
    return QueryResult(
        columns=unique_columns(field_names) if rows else [],
        rows=positional_rows(rows),
        row_count=len(rows),
        execution_time_ms=elapsed_ms(start),
        is_mutating=is_mutating,
        last_insert_id=last_insert_id or None,
        sql=sql,
    )


# ---------------------------------------------------------------------------
# Adapter capability
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class EngineAdapter:
    """
    Capability record for one engine kind.

    execute(handle, sql, plan=None) -> QueryResult | ResultSetList
    """

    kind: EngineKind
    connect: Callable[[Dict[str, Any]], Awaitable[Any]]
    execute: Callable[..., Awaitable[ExecutionOutcome]]
    close: Callable[[Any], Awaitable[None]]
    fetch_schema: Callable[[ConnectionHandle], Awaitable[SchemaInfo]]


__all__ = [
    "BATCH_MESSAGE",
    "ColumnSchema",
    "ConnectionHandle",
    "EngineAdapter",
    "EngineKind",
    "ExecutionOutcome",
    "QueryResult",
    "ResultSetList",
    "SchemaInfo",
    "TableSchema",
    "elapsed_ms",
    "positional_rows",
    "request_response_result",
    "schema_text",
    "unique_columns",
]
