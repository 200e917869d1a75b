"""Endpoint and middleware shapes.

An endpoint is any callable taking the host framework's request::

    async def show_article(request) -> Response: ...

A middleware is any callable matching::

    async def my_mw(request, next: Next) -> Response: ...

No base class required. Thicket never calls either during construction;
it only hands references to the host framework, which may invoke them
concurrently.
"""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, TypeAlias

# Route endpoint: user-defined function, sync or async
Endpoint: TypeAlias = Callable[..., Any]

# The next handler in a middleware chain
type Next = Callable[[Any], Awaitable[Any]]


class Middleware(Protocol):
    """Protocol for middleware attached with ``RouteNode.with_``.

    Accepts both functions and callable objects::

        # Function middleware
        async def timing(request, next: Next):
            start = time.monotonic()
            response = await next(request)
            return response.with_header("X-Time", f"{time.monotonic() - start:.3f}")

        # Class middleware
        class RequireToken:
            async def __call__(self, request, next: Next): ...
    """

    async def __call__(self, request: Any, next: Next) -> Any: ...
