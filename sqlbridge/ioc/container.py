from dependency_injector import containers, providers

from sqlbridge.assistant import create_llm
from sqlbridge.config import settings
from sqlbridge.connectors import ConnectionRegistry, provide_adapter_registry
from sqlbridge.services import AssistantService, ConnectionService, QueryService


class Container(containers.DeclarativeContainer):
    """Application dependency injection container."""

    wiring_config = containers.WiringConfiguration()

    connection_registry = providers.Singleton(ConnectionRegistry)
    adapter_registry = providers.Singleton(provide_adapter_registry)

    llm = providers.Singleton(create_llm, settings=settings)

    connection_service = providers.Factory(
        ConnectionService,
        connection_registry=connection_registry,
        adapter_registry=adapter_registry,
    )
    query_service = providers.Factory(
        QueryService,
        connection_registry=connection_registry,
        adapter_registry=adapter_registry,
    )
    assistant_service = providers.Factory(
        AssistantService,
        llm=llm,
        query_service=query_service,
        connection_service=connection_service,
    )
