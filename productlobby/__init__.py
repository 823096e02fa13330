"""ProductLobby: consumer demand aggregation for products brands have not built yet."""

__version__ = "0.1.0"
