"""
Process-wide connection registry and the engine-kind adapter table.
"""

import logging
from typing import Dict, Iterable, List, Optional

from sqlbridge.errors import UnsupportedEngineError

from .base import ConnectionHandle, EngineAdapter, EngineKind


def resolve_engine_kind(value: str | EngineKind) -> EngineKind:
    if isinstance(value, EngineKind):
        return value
    try:
        return EngineKind(str(value).strip().lower())
    except ValueError as exc:
        supported = ", ".join(kind.value for kind in EngineKind)
        raise UnsupportedEngineError(
            f"Unsupported database type: {value}. Supported: {supported}"
        ) from exc


class EngineAdapterRegistry:
    """Dispatch table from engine kind to its adapter."""

    def __init__(self, adapters: Iterable[EngineAdapter] = ()) -> None:
        self._adapters: Dict[EngineKind, EngineAdapter] = {}
        for adapter in adapters:
            self.register(adapter)

    def register(self, adapter: EngineAdapter) -> None:
        self._adapters[adapter.kind] = adapter

    def get(self, kind: str | EngineKind) -> EngineAdapter:
        engine_kind = resolve_engine_kind(kind)
        adapter = self._adapters.get(engine_kind)
        if adapter is None:
            raise UnsupportedEngineError(f"No adapter registered for database type: {engine_kind.value}")
        return adapter

    def kinds(self) -> List[EngineKind]:
        return list(self._adapters)


class ConnectionRegistry:
    """Registry for live connection handles, keyed by opaque connection id."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._handles: Dict[str, ConnectionHandle] = {}
        self._logger = logger or logging.getLogger(__name__)

    def register(self, connection_id: str, handle: ConnectionHandle) -> None:
        self._handles[connection_id] = handle
        self._logger.info("Registered %s connection %s", handle.engine_kind.value, connection_id)

    def lookup(self, connection_id: str) -> Optional[ConnectionHandle]:
        return self._handles.get(connection_id)

    def remove(self, connection_id: str) -> Optional[ConnectionHandle]:
        handle = self._handles.pop(connection_id, None)
        if handle is not None:
            handle.connected = False
            self._logger.info("Removed connection %s", connection_id)
        return handle

    def ids(self) -> List[str]:
        return list(self._handles)

    def __contains__(self, connection_id: object) -> bool:
        return connection_id in self._handles

    def __len__(self) -> int:
        return len(self._handles)


def provide_adapter_registry() -> EngineAdapterRegistry:
    """
    Construct an EngineAdapterRegistry wired with the built-in engines.
    """
    from .providers import BUILTIN_ADAPTERS

    return EngineAdapterRegistry(BUILTIN_ADAPTERS)


__all__ = [
    "ConnectionRegistry",
    "EngineAdapterRegistry",
    "provide_adapter_registry",
    "resolve_engine_kind",
]
