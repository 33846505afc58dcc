from contextlib import asynccontextmanager
import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute
from starlette.middleware.cors import CORSMiddleware

import sqlbridge.api
from sqlbridge.api import api_router_v1
from sqlbridge.config import settings
from sqlbridge.ioc import Container
from sqlbridge.middleware import ErrorMiddleware, error_response
from sqlbridge.utils.logger import setup_logging

load_dotenv()
logger = logging.getLogger(__name__)


def custom_generate_unique_id(route: APIRoute) -> str:
    if len(route.tags) == 0:
        return route.name
    return f"{route.tags[0]}-{route.name}"


container = Container()
container.wire(packages=[sqlbridge.api])


async def close_open_connections(container: Container) -> None:
    registry = container.connection_registry()
    adapters = container.adapter_registry()
    for connection_id in registry.ids():
        handle = registry.remove(connection_id)
        if handle is None:
            continue
        try:
            await adapters.get(handle.engine_kind).close(handle.native_handle)
        except Exception as exc:
            logger.warning("Error closing connection %s on shutdown: %s", connection_id, exc)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager to handle startup and shutdown events."""
    setup_logging()
    app.state.container = container
    logger.info("%s starting (environment=%s)", settings.PROJECT_NAME, settings.ENVIRONMENT)

    yield

    await close_open_connections(container)


app = FastAPI(
    title=settings.PROJECT_NAME,
    generate_unique_id_function=custom_generate_unique_id,
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    messages = [
        f"{'.'.join(str(part) for part in error['loc'] if part != 'body')}: {error['msg']}"
        for error in exc.errors()
    ]
    return error_response("; ".join(messages) or "Invalid request", 400)


app.add_middleware(ErrorMiddleware)

if settings.CORS_ENABLED:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["Authorization", "Content-Type"],
    )


app.include_router(
    api_router_v1,
    prefix=settings.API_V1_STR,
)


@app.get("/health", tags=["health"])
async def health() -> dict[str, str]:
    return {"status": "ok", "message": "Server is running"}


@app.get("/", tags=["health"])
async def root() -> dict[str, str]:
    return {"message": f"{settings.PROJECT_NAME} is running", "docs": "/docs"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "sqlbridge.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.UVICORN_RELOAD,
        log_level=settings.LOG_LEVEL.lower(),
    )
