"""
OrderDesk Core
==============

Core utilities shared by the OrderDesk modules.
"""

from .config import Config
from .gateway import SupabaseGateway, GatewayError, GatewayNotFound, GatewayConfigError, get_gateway
from .logging_service import LoggingService, log

__all__ = [
    'Config',
    'SupabaseGateway',
    'GatewayError',
    'GatewayNotFound',
    'GatewayConfigError',
    'get_gateway',
    'LoggingService',
    'log',
]
