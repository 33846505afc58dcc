from .error_middleware import ErrorMiddleware, error_response

__all__ = ["ErrorMiddleware", "error_response"]
