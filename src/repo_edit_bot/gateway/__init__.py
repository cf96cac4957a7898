"""Remote repository content gateway."""

from repo_edit_bot.gateway.content_gateway import ContentGateway
from repo_edit_bot.gateway.exceptions import (
    GatewayAuthError,
    GatewayConflictError,
    GatewayError,
    GatewayNotFoundError,
    GatewayRequestError,
)
from repo_edit_bot.gateway.writer import FreshRevisionWriter

__all__ = [
    "ContentGateway",
    "FreshRevisionWriter",
    "GatewayAuthError",
    "GatewayConflictError",
    "GatewayError",
    "GatewayNotFoundError",
    "GatewayRequestError",
]
