from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends

from sqlbridge.ioc import Container
from sqlbridge.models.connections import (
    ConnectRequest,
    ConnectResponse,
    DisconnectResponse,
    SchemaResponse,
)
from sqlbridge.services.connection_service import ConnectionService

router = APIRouter(prefix="/db", tags=["connections"])


@router.post("/connect", response_model=ConnectResponse)
@inject
async def connect_database(
    request: ConnectRequest,
    connection_service: ConnectionService = Depends(Provide[Container.connection_service]),
) -> ConnectResponse:
    return await connection_service.connect(request)


@router.get("/schema/{connection_id}", response_model=SchemaResponse)
@inject
async def get_schema(
    connection_id: str,
    connection_service: ConnectionService = Depends(Provide[Container.connection_service]),
) -> SchemaResponse:
    schema = await connection_service.get_schema(connection_id)
    return SchemaResponse(db_schema=schema.to_dict())


@router.post("/disconnect/{connection_id}", response_model=DisconnectResponse)
@inject
async def disconnect_database(
    connection_id: str,
    connection_service: ConnectionService = Depends(Provide[Container.connection_service]),
) -> DisconnectResponse:
    return await connection_service.disconnect(connection_id)
