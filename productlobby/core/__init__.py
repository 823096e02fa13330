"""
Core utilities and configuration for ProductLobby.

This package provides core functionality including logging configuration,
monitoring, caching, domain errors and the database layer.
"""

from productlobby.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
