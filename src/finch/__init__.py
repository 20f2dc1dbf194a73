"""Finch: a small routing/middleware server and a fluent HTTP client.

Basic usage::

    from finch import Server, handler

    server = Server(5050)

    @handler
    def hello(ctx):
        ctx.send_string("Hello, World!")

    api = server.group("/api")
    api.get("/hello/:name", hello)

    server.listen()

Outbound calls::

    from finch import Client, Header, Options

    with Client() as client:
        response = client.get(
            "https://example.com/accounts",
            Options(headers=[Header("Accept", "application/json")]),
        )
"""

__version__ = "0.1.0"
__all__ = [
    "JSON",
    "AsyncClient",
    "BindError",
    "Client",
    "ConfigurationError",
    "Context",
    "DecodeError",
    "FinchError",
    "HTTPError",
    "Handler",
    "Header",
    "InvalidHandlerType",
    "MethodNotAllowed",
    "MissingHandler",
    "NotFound",
    "Options",
    "QueryParam",
    "Request",
    "RequestError",
    "Response",
    "RouteGroup",
    "Server",
    "ServerConfig",
    "ServerError",
    "UnsupportedFieldType",
    "decode_json",
    "encode_json",
    "handler",
    "join_paths",
    "normalize_handler",
    "to_buffer",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import finch`` fast: httpx is only loaded when the client is used.
    """
    if name == "Server":
        from finch.app import Server

        return Server

    if name == "ServerConfig":
        from finch.config import ServerConfig

        return ServerConfig

    if name == "Context":
        from finch.context import Context

        return Context

    if name in ("Handler", "handler", "normalize_handler"):
        from finch import handlers as _handlers

        return getattr(_handlers, name)

    if name == "Request":
        from finch.http.request import Request

        return Request

    if name == "Response":
        from finch.http.response import Response

        return Response

    if name in ("JSON", "decode_json", "encode_json", "to_buffer"):
        from finch.http import payload as _payload

        return getattr(_payload, name)

    if name in ("RouteGroup", "join_paths"):
        from finch.routing import group as _group

        return getattr(_group, name)

    if name in ("AsyncClient", "Client", "Header", "Options", "QueryParam"):
        from finch import client as _client

        return getattr(_client, name)

    if name in (
        "BindError",
        "ConfigurationError",
        "DecodeError",
        "FinchError",
        "HTTPError",
        "InvalidHandlerType",
        "MethodNotAllowed",
        "MissingHandler",
        "NotFound",
        "RequestError",
        "ServerError",
        "UnsupportedFieldType",
    ):
        from finch import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
