"""Handing a flattened route tree to a host framework.

A registrar is anything with a ``register_endpoint`` method. Thicket
defines what it receives and in which order; how a route is installed is
up to the registrar. ``RouteTable`` is a small in-memory implementation
that adapters (and tests) can build on.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, Protocol

from thicket.errors import StructuralBuildError
from thicket.routing.node import RouteNode
from thicket.types import Endpoint, Middleware, Next

logger = logging.getLogger("thicket.registrar")

type Handler = Callable[[Any], Awaitable[Any]]


class Registrar(Protocol):
    """Anything routes can be installed into.

    Example adapter for a framework with per-path method registration::

        class HostAdapter:
            def __init__(self, app) -> None:
                self.app = app

            def register_endpoint(self, path, method, middleware, endpoint) -> None:
                methods = [method] if method else None  # None: any method
                self.app.add_route(path, chain(middleware, endpoint), methods=methods)
    """

    def register_endpoint(
        self,
        path: str,
        method: str | None,
        middleware: Sequence[Middleware],
        endpoint: Endpoint,
    ) -> None: ...


def register(registrar: Registrar, builder: RouteNode) -> int:
    """Flatten *builder* and install every endpoint into *registrar*.

    Endpoints are installed in flattening order. Structural errors in the
    tree are raised before anything is installed. Returns the number of
    endpoints installed.
    """
    descriptors = builder.build()
    for path, method, middleware, endpoint in descriptors:
        registrar.register_endpoint(path, method, middleware, endpoint)
    logger.info("Registered %d endpoints on %s", len(descriptors), type(registrar).__name__)
    return len(descriptors)


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's a coroutine."""
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


def chain(middleware: Sequence[Middleware], endpoint: Endpoint) -> Handler:
    """Wrap *endpoint* in *middleware*, first middleware outermost.

    Middleware follows the ``async (request, next)`` protocol; the
    endpoint may be sync or async. The returned handler takes a request
    and returns whatever the chain returns.
    """

    async def dispatch(request: Any) -> Any:
        return await invoke(endpoint, request)

    handler: Handler = dispatch
    for mw in reversed(middleware):
        outer = handler

        async def make_next(request: Any, _mw: Any = mw, _next: Next = outer) -> Any:
            return await _mw(request, _next)

        handler = make_next
    return handler


class RouteTable:
    """In-memory registrar.

    Stores one composed handler per ``(path, method)`` plus an optional
    catch-all per path. Paths are kept exactly as flattened (placeholders
    included); matching request paths against them is the host's job.

    Usage::

        table = RouteTable()
        register(table, routes)
        handler = table.lookup("/api/v1/articles", "GET")
        response = await handler(request)
    """

    __slots__ = ("_catch_all", "_routes")

    def __init__(self) -> None:
        self._routes: dict[str, dict[str, Handler]] = {}
        self._catch_all: dict[str, Handler] = {}

    def register_endpoint(
        self,
        path: str,
        method: str | None,
        middleware: Sequence[Middleware],
        endpoint: Endpoint,
    ) -> None:
        handler = chain(middleware, endpoint)
        if method is None:
            if path in self._catch_all:
                msg = f"Catch-all for {path} is already registered."
                raise StructuralBuildError(msg)
            self._catch_all[path] = handler
            self._routes.setdefault(path, {})
            return

        methods = self._routes.setdefault(path, {})
        if method in methods:
            msg = f"{method} {path} is already registered."
            raise StructuralBuildError(msg)
        methods[method] = handler

    def lookup(self, path: str, method: str) -> Handler | None:
        """Return the handler for *method* at *path*, else the catch-all, else ``None``."""
        handler = self._routes.get(path, {}).get(method.upper())
        if handler is not None:
            return handler
        return self._catch_all.get(path)

    def paths(self) -> list[str]:
        """Registered paths in registration order."""
        return list(self._routes)

    def methods(self, path: str) -> frozenset[str]:
        """Explicitly bound methods at *path* (catch-all not included)."""
        return frozenset(self._routes.get(path, {}))

    def has_catch_all(self, path: str) -> bool:
        return path in self._catch_all

    def __contains__(self, path: object) -> bool:
        return path in self._routes

    def __len__(self) -> int:
        return sum(len(m) for m in self._routes.values()) + len(self._catch_all)
