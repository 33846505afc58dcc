from .application_errors import (
    ConnectionNotFoundError,
    ExternalServiceError,
    InvalidRequest,
    ResourceNotFound,
)
from .connector_errors import (
    ConnectorError,
    EngineConnectionError,
    QuerySyntaxError,
    UnsupportedEngineError,
)

__all__ = [
    "ConnectionNotFoundError",
    "ExternalServiceError",
    "InvalidRequest",
    "ResourceNotFound",
    "ConnectorError",
    "EngineConnectionError",
    "QuerySyntaxError",
    "UnsupportedEngineError",
]
