import logging
import re
from typing import Optional

from sqlbridge.assistant import (
    LLM,
    ExtractionResult,
    StatementKind,
    build_prompt,
    extract_statements,
)
from sqlbridge.assistant.extractor import GENERATE_ACTION
from sqlbridge.connectors import ExecutionPlan, classify
from sqlbridge.errors import ExternalServiceError
from sqlbridge.models.assistant import AssistRequest, AssistResponse

from .connection_service import ConnectionService
from .query_service import QueryService

FALLBACK_QUERY = "SELECT * FROM users LIMIT 10;"
FALLBACK_PREFIX = (
    "To use AI features, please add your OPENROUTER_API_KEY to the .env file. "
    "For now, here's a basic suggestion: "
)
PLACEHOLDER_NOTE = (
    "Note: The extracted query contains placeholders like 'NewName'. "
    "Please specify what value you want to set."
)
ZERO_RESULTS_NOTE = "Note: This query returned 0 results."

RESULT_INFO_RE = re.compile(r"Found|record|results?", re.IGNORECASE)
SQL_BLOCK_OPEN_RE = re.compile(r"```sql", re.IGNORECASE)
READ_ONLY_PLANS = (ExecutionPlan.SINGLE_READ, ExecutionPlan.MULTI_READ)


class AssistantService:
    """Drafts SQL with the LLM, extracts runnable statements and previews SELECTs."""

    def __init__(
        self,
        llm: Optional[LLM],
        query_service: QueryService,
        connection_service: ConnectionService,
    ) -> None:
        self._llm = llm
        self._query_service = query_service
        self._connection_service = connection_service
        self._logger = logging.getLogger(__name__)

    @staticmethod
    def _fallback(action: str) -> AssistResponse:
        if action == GENERATE_ACTION:
            suggestion = "Try using SELECT * FROM table_name LIMIT 10;"
            return AssistResponse(
                response=FALLBACK_PREFIX + suggestion,
                query=FALLBACK_QUERY,
                queries=[FALLBACK_QUERY],
            )
        suggestion = "Consider adding indexes on frequently queried columns."
        return AssistResponse(response=FALLBACK_PREFIX + suggestion, query=None, queries=[])

    async def assist(self, request: AssistRequest) -> AssistResponse:
        if self._llm is None:
            return self._fallback(request.action)

        engine_kind = None
        schema = None
        if request.connection_id:
            schema_context = await self._connection_service.get_schema_context(request.connection_id)
            if schema_context is not None:
                engine_kind, schema = schema_context

        prompt = build_prompt(request.action, request.query, engine_kind, schema, request.context)
        try:
            response_text = await self._llm.acomplete(prompt)
        except Exception as exc:
            self._logger.error("LLM request failed: %s", exc)
            raise ExternalServiceError(f"AI assistant request failed: {exc}") from exc

        extraction = extract_statements(response_text, request.action)
        if extraction.primary is None and extraction.placeholder_filtered:
            response_text = f"{response_text}\n\n{PLACEHOLDER_NOTE}"

        if request.action == GENERATE_ACTION and request.connection_id:
            response_text = await self._append_preview(
                response_text, extraction, request.connection_id
            )

        return AssistResponse(
            response=response_text,
            query=extraction.primary.text if extraction.primary else None,
            queries=[query.text for query in extraction.queries],
        )

    async def _append_preview(
        self,
        response_text: str,
        extraction: ExtractionResult,
        connection_id: str,
    ) -> str:
        primary = extraction.primary
        if primary is None or primary.kind is not StatementKind.SELECT:
            return response_text
        if classify(primary.text).plan not in READ_ONLY_PLANS:
            self._logger.info("Skipping preview of a block that mixes reads and writes")
            return response_text
        if RESULT_INFO_RE.search(response_text) or len(SQL_BLOCK_OPEN_RE.findall(response_text)) > 1:
            return response_text

        try:
            outcome = await self._query_service.run(connection_id, primary.text)
        except Exception as exc:
            self._logger.warning("Preview of generated query failed: %s", exc)
            return response_text

        if isinstance(outcome, list):
            row_count = sum(result.row_count for result in outcome)
        else:
            row_count = outcome.row_count
        if row_count == 0:
            return f"{response_text}\n\n{ZERO_RESULTS_NOTE}"
        return f"{response_text}\n\nFound {row_count} record(s)."


__all__ = ["AssistantService"]
