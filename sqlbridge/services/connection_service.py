import logging
import uuid
from typing import Any, Dict, Optional, Tuple

from sqlbridge.config import settings
from sqlbridge.connectors import (
    ConnectionHandle,
    ConnectionRegistry,
    EngineAdapterRegistry,
    EngineKind,
    SchemaInfo,
    resolve_engine_kind,
    schema_text,
)
from sqlbridge.errors import ConnectionNotFoundError, ConnectorError, InvalidRequest
from sqlbridge.models.connections import ConnectRequest, ConnectResponse, DisconnectResponse

_REQUIRED_SERVER_FIELDS = ("host", "database", "username")
_DEFAULT_PORTS = {
    EngineKind.POSTGRES: settings.POSTGRES_DEFAULT_PORT,
    EngineKind.MYSQL: settings.MYSQL_DEFAULT_PORT,
}


class ConnectionService:
    """Connection lifecycle and schema access for registered engines."""

    def __init__(
        self,
        connection_registry: ConnectionRegistry,
        adapter_registry: EngineAdapterRegistry,
    ) -> None:
        self._connection_registry = connection_registry
        self._adapter_registry = adapter_registry
        self._logger = logging.getLogger(__name__)

    def _build_config(self, engine_kind: EngineKind, request: ConnectRequest) -> Dict[str, Any]:
        if engine_kind is EngineKind.SQLITE:
            return {"path": request.path or settings.DEFAULT_SQLITE_PATH}

        missing = [name for name in _REQUIRED_SERVER_FIELDS if not getattr(request, name)]
        if missing:
            raise InvalidRequest(
                "Missing required fields: host, database, username",
                errors={name: "required" for name in missing},
            )
        return {
            "host": request.host,
            "port": request.port or _DEFAULT_PORTS[engine_kind],
            "database": request.database,
            "username": request.username,
            "password": request.password or "",
        }

    async def connect(self, request: ConnectRequest) -> ConnectResponse:
        engine_kind = resolve_engine_kind(request.type)
        adapter = self._adapter_registry.get(engine_kind)
        config = self._build_config(engine_kind, request)

        native_handle = await adapter.connect(config)
        connection_id = f"db_{uuid.uuid4().hex}"
        self._connection_registry.register(
            connection_id,
            ConnectionHandle(
                id=connection_id,
                engine_kind=engine_kind,
                native_handle=native_handle,
                config=config,
            ),
        )
        return ConnectResponse(
            success=True,
            connection_id=connection_id,
            message=f"Connected to {engine_kind.value} database successfully",
        )

    async def disconnect(self, connection_id: str) -> DisconnectResponse:
        handle = self._connection_registry.remove(connection_id)
        if handle is None:
            raise ConnectionNotFoundError(connection_id)
        adapter = self._adapter_registry.get(handle.engine_kind)
        try:
            await adapter.close(handle.native_handle)
        except Exception as exc:
            self._logger.warning("Error closing connection %s: %s", connection_id, exc)
        return DisconnectResponse(success=True, message="Disconnected successfully")

    def _require_handle(self, connection_id: str) -> ConnectionHandle:
        handle = self._connection_registry.lookup(connection_id)
        if handle is None or not handle.connected:
            raise ConnectionNotFoundError(connection_id)
        return handle

    async def get_schema(self, connection_id: str) -> SchemaInfo:
        handle = self._require_handle(connection_id)
        adapter = self._adapter_registry.get(handle.engine_kind)
        try:
            return await adapter.fetch_schema(handle)
        except ConnectorError as exc:
            self._logger.warning("Error getting schema for %s: %s", connection_id, exc)
            return SchemaInfo()

    async def get_schema_context(self, connection_id: str) -> Optional[Tuple[EngineKind, str]]:
        """Engine kind and prompt-ready schema text, or None when unavailable."""
        handle = self._connection_registry.lookup(connection_id)
        if handle is None or not handle.connected:
            return None
        schema = await self.get_schema(connection_id)
        return handle.engine_kind, schema_text(schema)


__all__ = ["ConnectionService"]
