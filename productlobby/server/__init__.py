"""
ProductLobby Server Package.

This package contains the web server implementation for the ProductLobby platform.

Subpackages:
    api: FastAPI route definitions and endpoint logic.
    core: Settings and server-wide constants.
    exception_handlers: Translation of errors into JSON responses.
    middleware: Request timing and monitoring.
    services: Database-backed glue between repositories and the calculators.
"""
