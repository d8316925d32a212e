from .app.main import ask, list_servers, logs, send, send_async

__all__ = [
    "ask",
    "list_servers",
    "logs",
    "send",
    "send_async",
]

# stdlib logging defaults: attach NullHandler to prevent 'No handler' warnings
import logging
_logger = logging.getLogger(__name__)
_logger.addHandler(logging.NullHandler())
