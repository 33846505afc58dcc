from typing import Any, Dict, Optional

from pydantic import Field

from .base import _Base


class ConnectRequest(_Base):
    type: str
    path: Optional[str] = None
    host: Optional[str] = None
    port: Optional[int] = None
    database: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None


class ConnectResponse(_Base):
    success: bool = True
    connection_id: str
    message: str


class DisconnectResponse(_Base):
    success: bool = True
    message: str


class SchemaResponse(_Base):
    success: bool = True
    db_schema: Dict[str, Any] = Field(default_factory=lambda: {"tables": []}, alias="schema")
