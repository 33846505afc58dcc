from .assistant_service import AssistantService
from .connection_service import ConnectionService
from .query_service import QueryService

__all__ = ["AssistantService", "ConnectionService", "QueryService"]
