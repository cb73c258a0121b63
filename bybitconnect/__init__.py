"""Client for the Bybit V5 REST and WebSocket APIs."""

__version__ = "1.0.5"