"""
Client layer for the remote classroom REST API.

All entity data lives behind the API; this package only knows how to
reach it. Auth endpoints are exposed as plain functions because they are
not collections.
"""

from .client import (
    API_TOKEN_SESSION_KEY,
    API_USER_SESSION_KEY,
    REDIRECT_AFTER_LOGIN_SESSION_KEY,
    ApiClient,
    client_for_request,
)
from .exceptions import TransportError, UnauthorizedError
from .resources import ENTITIES, RemoteCollection, get_collection


def login(client, username, password):
    """POST /auth/login, returns the ``{token, user}`` payload."""
    return client.post('auth/login', {'username': username, 'password': password})


def logout(client):
    return client.post('auth/logout')


def get_roles(client):
    return client.get('role/all') or []


__all__ = [
    'API_TOKEN_SESSION_KEY',
    'API_USER_SESSION_KEY',
    'REDIRECT_AFTER_LOGIN_SESSION_KEY',
    'ApiClient',
    'client_for_request',
    'TransportError',
    'UnauthorizedError',
    'ENTITIES',
    'RemoteCollection',
    'get_collection',
    'login',
    'logout',
    'get_roles',
]
