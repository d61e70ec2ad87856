"""Async test client for sprig applications.

Uses the same Request and Response types as production.
No wrapper translation layer.
"""

from sprig.app import App
from sprig.context import CancelSignal
from sprig.http.method import Method
from sprig.http.request import Request
from sprig.http.response import Response


class TestClient:
    """Async test client for sprig applications.

    Sends requests straight through ``App.dispatch``, no transport
    involved.

    Usage::

        async with TestClient(app) as client:
            response = await client.get("/users/7")
            assert response.status == 200
    """

    __test__ = False  # Tell pytest this is not a test class
    __slots__ = ("app",)

    def __init__(self, app: App) -> None:
        self.app = app

    async def __aenter__(self) -> "TestClient":
        self.app.freeze()
        return self

    async def __aexit__(self, *args: object) -> None:
        pass

    async def request(
        self,
        method: Method | str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        cancel: CancelSignal | None = None,
    ) -> Response:
        """Send a request with any method."""
        request = Request.from_url(str(method), url, headers=headers)
        return await self.app.dispatch(request, Response(), cancel=cancel)

    async def get(self, url: str, *, headers: dict[str, str] | None = None) -> Response:
        return await self.request(Method.GET, url, headers=headers)

    async def post(self, url: str, *, headers: dict[str, str] | None = None) -> Response:
        return await self.request(Method.POST, url, headers=headers)

    async def put(self, url: str, *, headers: dict[str, str] | None = None) -> Response:
        return await self.request(Method.PUT, url, headers=headers)

    async def delete(self, url: str, *, headers: dict[str, str] | None = None) -> Response:
        return await self.request(Method.DELETE, url, headers=headers)

    async def patch(self, url: str, *, headers: dict[str, str] | None = None) -> Response:
        return await self.request(Method.PATCH, url, headers=headers)

    async def head(self, url: str, *, headers: dict[str, str] | None = None) -> Response:
        return await self.request(Method.HEAD, url, headers=headers)

    async def options(self, url: str, *, headers: dict[str, str] | None = None) -> Response:
        return await self.request(Method.OPTIONS, url, headers=headers)
