from typing import List, Optional

from .base import _Base


class AssistRequest(_Base):
    query: str
    context: Optional[str] = None
    action: str = "generate"
    connection_id: Optional[str] = None


class AssistResponse(_Base):
    success: bool = True
    response: str
    query: Optional[str] = None
    queries: List[str] = []
