"""
Core utilities for ViRA.

This package provides core functionality including logging configuration,
monitoring, database setup and the shared error types.
"""

from vira.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
