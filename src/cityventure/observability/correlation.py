"""Correlation IDs tying pricing log lines to the request that produced them.

The app factory middleware reads or mints an ID per request; JsonFormatter
stamps it on every record logged while that request is served.
"""

import uuid
from contextvars import ContextVar, Token

# Empty outside a request (e.g. in-process calls to the pricing functions)
correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

CORRELATION_ID_HEADER = "X-Correlation-ID"


def generate_correlation_id() -> str:
    """Mint an ID for a request that arrived without X-Correlation-ID."""
    return str(uuid.uuid4())


def get_correlation_id() -> str:
    """Return the ID of the request being served, or "" outside a request."""
    return correlation_id_var.get()


def set_correlation_id(cid: str) -> Token[str]:
    """Bind *cid* for the current request; keep the token to reset it."""
    return correlation_id_var.set(cid)


def reset_correlation_id(token: Token[str]) -> None:
    """Restore the binding that was active before set_correlation_id()."""
    correlation_id_var.reset(token)
