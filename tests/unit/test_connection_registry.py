import pytest

from sqlbridge.connectors import (
    ConnectionHandle,
    ConnectionRegistry,
    EngineAdapterRegistry,
    EngineKind,
    provide_adapter_registry,
    resolve_engine_kind,
)
from sqlbridge.errors import UnsupportedEngineError


def _handle(connection_id: str) -> ConnectionHandle:
    return ConnectionHandle(id=connection_id, engine_kind=EngineKind.SQLITE, native_handle=object())


def test_register_lookup_and_remove() -> None:
    registry = ConnectionRegistry()
    handle = _handle("db_1")

    registry.register("db_1", handle)
    assert registry.lookup("db_1") is handle
    assert "db_1" in registry
    assert registry.ids() == ["db_1"]

    removed = registry.remove("db_1")
    assert removed is handle
    assert not removed.connected
    assert registry.lookup("db_1") is None
    assert len(registry) == 0


def test_missing_ids_return_none() -> None:
    registry = ConnectionRegistry()

    assert registry.lookup("db_nope") is None
    assert registry.remove("db_nope") is None


def test_builtin_adapters_cover_every_engine_kind() -> None:
    adapters = provide_adapter_registry()

    assert set(adapters.kinds()) == set(EngineKind)
    assert adapters.get("SQLite").kind is EngineKind.SQLITE
    assert adapters.get(EngineKind.MYSQL).kind is EngineKind.MYSQL


def test_unknown_engine_kind_is_rejected() -> None:
    with pytest.raises(UnsupportedEngineError, match="Unsupported database type: oracle"):
        resolve_engine_kind("oracle")


def test_unregistered_kind_is_rejected() -> None:
    with pytest.raises(UnsupportedEngineError):
        EngineAdapterRegistry().get("postgres")
