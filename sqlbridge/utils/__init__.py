from .logger import get_root_logger, setup_logging

__all__ = ["get_root_logger", "setup_logging"]
