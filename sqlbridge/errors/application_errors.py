from typing import Dict, Optional


class ResourceNotFound(Exception):
    pass

class ConnectionNotFoundError(ResourceNotFound):
    """Unknown connection id, or the handle is no longer connected."""

    def __init__(self, connection_id: str):
        super().__init__("Database connection not found or not connected")
        self.connection_id = connection_id

class InvalidRequest(Exception):
    def __init__(self, message: str, errors: Optional[Dict] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or {}

class ExternalServiceError(Exception):
    pass
