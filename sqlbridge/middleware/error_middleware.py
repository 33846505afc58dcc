import logging

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from sqlbridge.errors import (
    EngineConnectionError,
    ExternalServiceError,
    InvalidRequest,
    QuerySyntaxError,
    ResourceNotFound,
    UnsupportedEngineError,
)


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(content={"success": False, "error": message}, status_code=status_code)


class ErrorMiddleware(BaseHTTPMiddleware):
    def __init__(self, app):
        super().__init__(app)
        self.logger = logging.getLogger(__name__)

    async def dispatch(self, request, call_next):
        try:
            response = await call_next(request)
        except ResourceNotFound as e:
            self.logger.warning("Resource not found: %s", e)
            response = error_response(str(e), 404)
        except InvalidRequest as e:
            self.logger.warning("Invalid request: %s", e)
            response = error_response(str(e), 400)
        except UnsupportedEngineError as e:
            self.logger.warning("Unsupported engine: %s", e)
            response = error_response(str(e), 400)
        except QuerySyntaxError as e:
            self.logger.error("Query rejected by engine: %s", e)
            response = error_response(str(e), 400)
        except EngineConnectionError as e:
            self.logger.error("Engine connection error", exc_info=True)
            response = error_response(str(e), 502)
        except ExternalServiceError as e:
            self.logger.error("External service error", exc_info=True)
            response = error_response(str(e), 500)
        except Exception as e:
            self.logger.error("Unknown error", exc_info=True)
            response = error_response(str(e) or "Internal server error", 500)

        return response
