"""
Exception handlers for the ProductLobby server.

This package contains the handlers that turn domain errors, HTTP errors,
validation failures and unexpected exceptions into ``{"error": ...}`` JSON
responses, and a setup function to register them with the FastAPI application.
"""

from .global_handler import setup_exception_handlers

__all__ = ["setup_exception_handlers"]
