import time

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends

from sqlbridge.ioc import Container
from sqlbridge.models.query import QueryRequest, QueryResponse
from sqlbridge.services.query_service import QueryService

router = APIRouter(prefix="/db", tags=["query"])


@router.post("/query", response_model=QueryResponse)
@inject
async def execute_query(
    request: QueryRequest,
    query_service: QueryService = Depends(Provide[Container.query_service]),
) -> QueryResponse:
    start = time.perf_counter()
    outcome = await query_service.run(request.connection_id, request.query)
    execution_time = round((time.perf_counter() - start) * 1000, 3)

    if isinstance(outcome, list):
        results = {"resultSets": [result.json_safe() for result in outcome]}
    else:
        results = outcome.json_safe()
    return QueryResponse(results=results, execution_time=execution_time)
