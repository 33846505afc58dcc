from typing import Any, Dict

from pydantic import Field

from .base import _Base


class QueryRequest(_Base):
    connection_id: str
    query: str = Field(min_length=1)


class QueryResponse(_Base):
    success: bool = True
    # Either a single QueryResult payload or {"resultSets": [...]}.
    results: Dict[str, Any]
    execution_time: float
