import logging
from typing import Optional

from sqlbridge.connectors import (
    ConnectionHandle,
    ConnectionRegistry,
    EngineAdapter,
    EngineAdapterRegistry,
    ExecutionOutcome,
    ExecutionPlan,
    QueryResult,
    StatementPlan,
    build_refetch_query,
    classify,
)
from sqlbridge.errors import ConnectionNotFoundError, EngineConnectionError

_MUTATION_VERBS = {
    "INSERT": "inserted",
    "UPDATE": "updated",
    "DELETE": "deleted",
}
STATEMENT_MESSAGE = "Statement executed successfully."


def mutation_message(plan: StatementPlan, row_count: int) -> str:
    verb = _MUTATION_VERBS.get(plan.keyword)
    if verb is None:
        return STATEMENT_MESSAGE
    return f"{row_count} row(s) {verb} successfully"


def _preview(sql: str, limit: int = 120) -> str:
    flat = " ".join(sql.split())
    return flat if len(flat) <= limit else f"{flat[:limit]}..."


class QueryService:
    """Runs raw SQL against a registered connection and normalises the outcome."""

    def __init__(
        self,
        connection_registry: ConnectionRegistry,
        adapter_registry: EngineAdapterRegistry,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._connection_registry = connection_registry
        self._adapter_registry = adapter_registry
        self._logger = logger or logging.getLogger(__name__)

    def _require_handle(self, connection_id: str) -> ConnectionHandle:
        handle = self._connection_registry.lookup(connection_id)
        if handle is None or not handle.connected:
            raise ConnectionNotFoundError(connection_id)
        return handle

    async def run(self, connection_id: str, sql: str) -> ExecutionOutcome:
        handle = self._require_handle(connection_id)
        adapter = self._adapter_registry.get(handle.engine_kind)
        plan = classify(sql)
        self._logger.info(
            "Executing %s on %s connection %s: %s",
            plan.plan.value,
            handle.engine_kind.value,
            connection_id,
            _preview(plan.text),
        )

        try:
            outcome = await adapter.execute(handle, plan.text, plan)
        except EngineConnectionError as exc:
            # The handle may have been removed while the call was in flight.
            current = self._connection_registry.lookup(connection_id)
            if current is None or not current.connected:
                raise ConnectionNotFoundError(connection_id) from exc
            raise

        if isinstance(outcome, list):
            return outcome

        if plan.plan is ExecutionPlan.SINGLE_MUTATE:
            outcome.is_mutating = True
            outcome.message = mutation_message(plan, outcome.row_count)
            if plan.is_update and outcome.row_count > 0:
                refreshed = await self._refetch_updated_rows(handle, adapter, plan.text)
                if refreshed is not None:
                    outcome.columns = refreshed.columns
                    outcome.rows = refreshed.rows
        return outcome

    async def _refetch_updated_rows(
        self,
        handle: ConnectionHandle,
        adapter: EngineAdapter,
        sql: str,
    ) -> Optional[QueryResult]:
        """Re-select the rows an UPDATE touched; returns None on any failure or empty result."""
        refetch_sql = build_refetch_query(sql)
        if refetch_sql is None:
            return None
        try:
            refreshed = await adapter.execute(handle, refetch_sql, classify(refetch_sql))
        except Exception as exc:
            self._logger.warning("Could not fetch updated records: %s", exc)
            return None
        if isinstance(refreshed, list) or refreshed.row_count == 0:
            return None
        return refreshed


__all__ = ["QueryService", "STATEMENT_MESSAGE", "mutation_message"]
