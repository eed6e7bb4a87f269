"""
Integrations Package

Remote logistics API client and its error taxonomy.
"""

from opsconsole.integrations.api_client import (
    ApiClient,
    ApiError,
    ApiRequestError,
    NotFoundError,
    TransportError,
    UnauthorizedError,
)

__all__ = [
    'ApiClient',
    'ApiError',
    'ApiRequestError',
    'NotFoundError',
    'TransportError',
    'UnauthorizedError',
]
