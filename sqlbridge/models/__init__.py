from .assistant import AssistRequest, AssistResponse
from .connections import ConnectRequest, ConnectResponse, DisconnectResponse, SchemaResponse
from .query import QueryRequest, QueryResponse

__all__ = [
    "AssistRequest",
    "AssistResponse",
    "ConnectRequest",
    "ConnectResponse",
    "DisconnectResponse",
    "SchemaResponse",
    "QueryRequest",
    "QueryResponse",
]
