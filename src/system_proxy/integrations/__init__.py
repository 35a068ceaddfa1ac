"""
Framework integrations for system_proxy.
"""
from .fastapi import (
    create_lifespan,
    create_proxy_router,
    get_proxy_channel,
)

__all__ = [
    "create_lifespan",
    "create_proxy_router",
    "get_proxy_channel",
]
