"""Users: a small CRUD-ish API on the route tree.

Demonstrates literal and typed parameter segments, several methods on
one node, ``use`` middleware inherited by descendants, an auth gate that
short-circuits, and a request-scoped resource released after the chain.

Run:
    python app.py
"""

from contextlib import asynccontextmanager

import anyio

from sprig import App, Context, MessageResponse, Next, ParamType, Request
from sprig.routing.params import BooleanDecoder

USERS: dict[int, dict[str, object]] = {
    1: {"name": "alice", "admin": True},
    2: {"name": "bob", "admin": False},
}
TOKEN = "Bearer s3cr3t"

app = App()


@asynccontextmanager
async def session():
    yield {"opened": True}


async def open_session(ctx: Context, next: Next) -> Context:
    ctx.state["session"] = await ctx.resources.enter_async_context(session())
    return await next(ctx)


async def require_token(ctx: Context, next: Next) -> Context:
    if ctx.request.headers.get("authorization") != TOKEN:
        ctx.response.set_status(401)
        ctx.response.set_message("Unauthorized")
        return ctx
    return await next(ctx)


def list_users(ctx: Context) -> MessageResponse[list[str]]:
    admins_only = ctx.query.get("admin", False)
    names = [str(u["name"]) for u in USERS.values() if u["admin"] or not admins_only]
    return MessageResponse(names)


def show_user(ctx: Context) -> MessageResponse[str]:
    user = USERS.get(ctx.params["id"])  # type: ignore[arg-type]
    if user is None:
        return MessageResponse("No such user", status=404)
    return MessageResponse(f"user-{user['name']}")


def me(ctx: Context) -> MessageResponse[str]:
    return MessageResponse("you")


async def delete_user(ctx: Context) -> MessageResponse[str]:
    await anyio.sleep(0)
    USERS.pop(ctx.params["id"], None)  # type: ignore[arg-type]
    return MessageResponse("", status=204)


users = app.use(open_session).routes().route("users")
users.get().query("admin", BooleanDecoder()).handler(list_users)
users.fork().path("me").get().handler(me)
user = users.fork().param("id", ParamType.NUMBER)
user.get().handler(show_user)

admin = app.routes().route("admin").use(require_token)
admin.path("users").param("id", ParamType.NUMBER).delete().handler(delete_user)


async def main() -> None:
    for method, url in [("GET", "/users"), ("GET", "/users/1"), ("DELETE", "/admin/users/2")]:
        response = await app.dispatch(Request.from_url(method, url))
        print(method, url, response.status, response.message)


if __name__ == "__main__":
    anyio.run(main)
