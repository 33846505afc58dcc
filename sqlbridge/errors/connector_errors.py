class ConnectorError(RuntimeError):
    """Base error for engine adapter issues."""


class EngineConnectionError(ConnectorError):
    """Raised when the engine behind a handle cannot be reached."""


class QuerySyntaxError(ConnectorError):
    """Raised when the engine rejects a statement."""


class UnsupportedEngineError(ConnectorError):
    """Raised for an engine kind without a registered adapter."""
