"""
Exception handlers for the ViRA server.

``setup_exception_handlers`` registers the service error handler, the
request validation handler and the global fallback with the FastAPI
application.
"""

from .global_handler import (
    global_exception_handler,
    request_validation_handler,
    setup_exception_handlers,
    vira_error_handler,
)

__all__ = [
    "global_exception_handler",
    "request_validation_handler",
    "setup_exception_handlers",
    "vira_error_handler",
]
