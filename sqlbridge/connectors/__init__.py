from .base import (
    BATCH_MESSAGE,
    ColumnSchema,
    ConnectionHandle,
    EngineAdapter,
    EngineKind,
    ExecutionOutcome,
    QueryResult,
    ResultSetList,
    SchemaInfo,
    TableSchema,
    schema_text,
)
from .registry import (
    ConnectionRegistry,
    EngineAdapterRegistry,
    provide_adapter_registry,
    resolve_engine_kind,
)
from .statements import (
    ExecutionPlan,
    StatementPlan,
    build_refetch_query,
    classify,
    split_statements,
)

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
    "schema_text",
    "ConnectionRegistry",
    "EngineAdapterRegistry",
    "provide_adapter_registry",
    "resolve_engine_kind",
    "ExecutionPlan",
    "StatementPlan",
    "build_refetch_query",
    "classify",
    "split_statements",
]
