from typing import List

from fastapi import APIRouter

from .assistant import router as assistant_router
from .connections import router as connections_router
from .query import router as query_router

v1_routes: List[APIRouter] = [
    connections_router,
    query_router,
    assistant_router,
]

__all__ = [
    "assistant_router",
    "connections_router",
    "query_router",
    "v1_routes",
]
