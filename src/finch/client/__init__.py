"""Outbound HTTP client: verbs plus ordered headers, query params and body.

Public API::

    from finch.client import Client, AsyncClient, Options, Header, QueryParam
"""

from finch.client.options import Header, Options, QueryParam
from finch.client.request import AsyncClient, Client
from finch.errors import RequestError

__all__ = [
    "AsyncClient",
    "Client",
    "Header",
    "Options",
    "QueryParam",
    "RequestError",
]
