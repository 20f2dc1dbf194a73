"""Hello World, the simplest finch server.

Demonstrates plain routes, path parameters, JSON responses, chained
status/header setters and tagged errors.

Run:
    python app.py
"""

from finch import Context, Request, Response, Server, ServerError, handler

server = Server(5050)


@handler
def index(ctx: Context) -> None:
    ctx.send_string("Hello, World!")


@handler
def greet(ctx: Context) -> None:
    ctx.send_string(f"Hello, {ctx.param('name', 'stranger')}!")


@handler
async def status(req: Request, res: Response) -> None:
    res.json({"status": "ok", "version": "0.1.0"})


@handler
def custom(ctx: Context) -> None:
    ctx.status(201).set_header("X-Custom", "finch").send_string("Created")


@handler
def teapot(ctx: Context) -> None:
    raise ServerError("short and stout", status_code=418, content_type="application/json")


server.get("/", index)
server.get("/greet/:name", greet)
server.get("/api/status", status)
server.get("/custom", custom)
server.get("/teapot", teapot)


if __name__ == "__main__":
    server.listen()
