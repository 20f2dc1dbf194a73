"""Accounts API: route groups, middleware and binding.

- ``/api`` is a group guarded by a token check middleware
- ``/api/accounts`` is a child group registered through ``route()``
- request bodies are decoded into a dataclass, query strings bound
  into another
- ``AccountStore`` is an object handler with ``handle(ctx)``

Run:
    python app.py
"""

import time
from dataclasses import dataclass, field

from finch import Context, DecodeError, RouteGroup, Server, ServerError

server = Server(5050)

TOKEN = "secret"

_accounts: dict[str, "Account"] = {}


@dataclass
class Account:
    name: str
    email: str = ""
    admin: bool = False


@dataclass
class Listing:
    limit: int = field(default=10, metadata={"query": "limit"})
    admins_only: bool = field(default=False, metadata={"query": "admins"})


def timing(req, res) -> None:
    res.set_header("X-Started", str(int(time.time())))


def require_token(ctx: Context) -> None:
    if ctx.header("X-Token") != TOKEN:
        raise ServerError("missing or invalid token", status_code=401, content_type="application/json")


def list_accounts(ctx: Context) -> None:
    listing = ctx.bind_query(Listing())
    accounts = [a for a in _accounts.values() if a.admin or not listing.admins_only]
    ctx.json([{"name": a.name, "email": a.email, "admin": a.admin} for a in accounts[: listing.limit]])


def create_account(ctx: Context) -> None:
    try:
        account = ctx.bind_body(Account)
    except DecodeError as exc:
        raise ServerError(exc, status_code=400, content_type="application/json") from exc
    _accounts[account.name] = account
    ctx.status(201).json({"name": account.name})


def show_account(ctx: Context) -> None:
    account = _accounts.get(ctx.param("name"))
    if account is None:
        raise ServerError("account not found", status_code=404, content_type="application/json")
    ctx.json({"name": account.name, "email": account.email, "admin": account.admin})


def delete_account(ctx: Context) -> None:
    if _accounts.pop(ctx.param("name"), None) is None:
        raise ServerError("account not found", status_code=404, content_type="application/json")
    ctx.send_status(204)


class Health:
    def handle(self, ctx: Context) -> None:
        ctx.json({"accounts": len(_accounts)})


def accounts(r: RouteGroup) -> None:
    r.get("/", list_accounts)
    r.post("/", create_account)
    r.get("/{name}", show_account)
    r.delete("/:name", delete_account)


server.use(timing)
server.get("/health", Health())

api = server.group("/api", require_token)
api.route("/accounts", accounts)


if __name__ == "__main__":
    server.listen()
