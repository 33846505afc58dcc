from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends

from sqlbridge.ioc import Container
from sqlbridge.models.assistant import AssistRequest, AssistResponse
from sqlbridge.services.assistant_service import AssistantService

router = APIRouter(prefix="/ai", tags=["assistant"])


@router.post("/assist", response_model=AssistResponse)
@inject
async def assist(
    request: AssistRequest,
    assistant_service: AssistantService = Depends(Provide[Container.assistant_service]),
) -> AssistResponse:
    """Draft, optimise or explain SQL with the configured model."""
    return await assistant_service.assist(request)
