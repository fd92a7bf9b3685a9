"""Send a scheduled broadcast message to an environment's AddMessage API."""

__version__ = "0.1.0"
