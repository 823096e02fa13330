"""
Server-wide constants.

Values here are fixed at build time; anything environment dependent lives in
``config.Settings``.
"""

PROJECT_NAME = "ProductLobby"
API_V1_STR = "/api/v1"
API_VERSION = "0.1.0"
SCHEMA_VERSION = "v1"
