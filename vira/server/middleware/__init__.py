"""
Middleware for the ViRA server.

Cross-cutting request concerns: timing, request logging and tracing.
"""

from .logfire_middleware import LogfireMiddleware

__all__ = ["LogfireMiddleware"]
