"""Route tree builder.

A tree is built in one synchronous pass through nested configuration
callbacks, then flattened into endpoint descriptors::

    routes = (
        root()
        .get(index)
        .at("api/v1", lambda r: r
            .with_(require_token, lambda r: r
                .at("articles", lambda r: r.get(list_articles).post(create_article))
            )
        )
        .build()
    )

Nodes are mutable only while the tree is being built. Nothing here runs
an endpoint or a middleware.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from thicket.config import DEFAULT_CONFIG, RouteConfig
from thicket.errors import StructuralBuildError
from thicket.routing.path import ROOT, PathSegment, RoutePath, join, parse_path
from thicket.routing.reverse import ReverseRouter
from thicket.types import Endpoint, Middleware

if TYPE_CHECKING:
    from thicket.routing.flatten import EndpointDescriptor

# Receives the child node; the return value is ignored
type Configure = Callable[[RouteNode], Any]


class RouteNode:
    """A node of the route tree.

    Holds its own path fragment (relative to the parent), the verbs bound
    here, an optional catch-all endpoint, the middleware it adds, and its
    children in declaration order. Children are either path children
    (created by ``at``) or anonymous middleware scopes (created by
    ``with_``), which share their parent's path.

    Every builder method returns the node it was called on, so calls
    chain. Structural mistakes raise ``StructuralBuildError`` at the call
    that makes them.
    """

    __slots__ = (
        "_catch_all",
        "_children",
        "_config",
        "_endpoints",
        "_fragment",
        "_middleware",
        "_path",
        "_reverse",
    )

    def __init__(
        self,
        fragment: RoutePath = ROOT,
        *,
        path: RoutePath = ROOT,
        middleware: tuple[Middleware, ...] = (),
        reverse_router: ReverseRouter | None = None,
        config: RouteConfig | None = None,
    ) -> None:
        self._config: RouteConfig = config or DEFAULT_CONFIG
        self._fragment = fragment
        self._path = path
        self._middleware = middleware
        self._endpoints: dict[str, Endpoint] = {}
        self._catch_all: Endpoint | None = None
        self._children: list[RouteNode] = []
        if reverse_router is None:
            reverse_router = ReverseRouter(self._config)
        self._reverse = reverse_router

    # -- Tree structure --

    def at(self, sub_path: str | RoutePath, configure: Configure) -> RouteNode:
        """Configure the child addressed by *sub_path*.

        *sub_path* may span several segments (``"api/v1"``); each segment
        becomes its own node so later ``at("api/v2", ...)`` calls share the
        ``api`` node. Existing children are re-entered and extended, never
        replaced, which lets route groups defined in separate functions
        land on the same node. An empty path configures this node.
        """
        fragment = parse_path(sub_path, self._config) if isinstance(sub_path, str) else sub_path
        node = self
        for segment in fragment:
            node = node._child(segment)
        configure(node)
        return self

    def with_(
        self,
        middleware: Middleware | Sequence[Middleware],
        configure: Configure,
    ) -> RouteNode:
        """Apply *middleware* to everything *configure* declares.

        Opens an anonymous scope at this node's path. Endpoints and
        children declared inside the scope inherit the middleware after
        any middleware of their ancestors; siblings declared outside the
        scope do not see it.
        """
        if callable(middleware):
            stack: tuple[Middleware, ...] = (middleware,)
        elif isinstance(middleware, Sequence):
            stack = tuple(middleware)
        else:
            stack = (middleware,)
        if not stack:
            msg = f"with_() at {self._path} needs at least one middleware."
            raise StructuralBuildError(msg)

        scope = RouteNode(
            ROOT,
            path=self._path,
            middleware=stack,
            reverse_router=self._reverse,
            config=self._config,
        )
        self._children.append(scope)
        configure(scope)
        return self

    def _child(self, segment: PathSegment) -> RouteNode:
        fragment = RoutePath((segment,))
        for child in self._children:
            if child._fragment == fragment and not child._middleware:
                return child
        child = RouteNode(
            fragment,
            path=join(self._path, fragment),
            reverse_router=self._reverse,
            config=self._config,
        )
        self._children.append(child)
        return child

    # -- Endpoints --

    def method(self, verb: str, endpoint: Endpoint) -> RouteNode:
        """Bind *endpoint* to HTTP *verb* at this node.

        A verb can be bound once per node; a second binding raises
        ``StructuralBuildError`` rather than replacing the first.
        """
        verb = verb.upper()
        if verb not in self._config.methods:
            msg = f"Unsupported HTTP method {verb!r} at {self._path}."
            raise StructuralBuildError(msg)
        if not callable(endpoint):
            msg = f"Endpoint for {verb} {self._path} must be callable, got {endpoint!r}."
            raise TypeError(msg)
        if verb in self._endpoints:
            msg = f"{verb} {self._path} is already bound to {_describe(self._endpoints[verb])}."
            raise StructuralBuildError(msg)
        self._endpoints[verb] = endpoint
        return self

    def get(self, endpoint: Endpoint) -> RouteNode:
        return self.method("GET", endpoint)

    def head(self, endpoint: Endpoint) -> RouteNode:
        return self.method("HEAD", endpoint)

    def post(self, endpoint: Endpoint) -> RouteNode:
        return self.method("POST", endpoint)

    def put(self, endpoint: Endpoint) -> RouteNode:
        return self.method("PUT", endpoint)

    def delete(self, endpoint: Endpoint) -> RouteNode:
        return self.method("DELETE", endpoint)

    def connect(self, endpoint: Endpoint) -> RouteNode:
        return self.method("CONNECT", endpoint)

    def options(self, endpoint: Endpoint) -> RouteNode:
        return self.method("OPTIONS", endpoint)

    def trace(self, endpoint: Endpoint) -> RouteNode:
        return self.method("TRACE", endpoint)

    def patch(self, endpoint: Endpoint) -> RouteNode:
        return self.method("PATCH", endpoint)

    def all(self, endpoint: Endpoint) -> RouteNode:
        """Set the catch-all endpoint, used when no bound verb matches."""
        if not callable(endpoint):
            msg = f"Catch-all endpoint for {self._path} must be callable, got {endpoint!r}."
            raise TypeError(msg)
        if self._catch_all is not None:
            msg = f"{self._path} already has a catch-all endpoint {_describe(self._catch_all)}."
            raise StructuralBuildError(msg)
        self._catch_all = endpoint
        return self

    # -- Static files --

    def serve_file(self, file: str | Path) -> RouteNode:
        """Serve a single file on ``GET`` at this node.

        Raises ``FileNotFoundError`` immediately if *file* does not exist.
        """
        from thicket.fs import ServeFile

        return self.get(ServeFile(file))

    def serve_dir(self, directory: str | Path, *, param: str = "path") -> RouteNode:
        """Serve the files below *directory* on ``GET`` under this node.

        Registers a wildcard child (``*path`` by default) whose value the
        host framework passes in ``request.path_params``.
        """
        from thicket.fs import ServeDir

        endpoint = ServeDir(directory, param=param)
        return self.at(f"{self._config.wildcard_marker}{param}", lambda r: r.get(endpoint))

    # -- Reverse routing --

    def name(self, route_name: str) -> RouteNode:
        """Register this node's full path under *route_name*.

        Raises ``DuplicateNameError`` if the name is already used anywhere
        in the tree.
        """
        self._reverse.register(route_name, self._path)
        return self

    # -- Output --

    def build(self) -> list[EndpointDescriptor]:
        """Flatten the tree into endpoint descriptors, in declaration order."""
        from thicket.routing.flatten import flatten

        return flatten(self)

    # -- Introspection --

    @property
    def path(self) -> RoutePath:
        """Absolute path of this node."""
        return self._path

    @property
    def fragment(self) -> RoutePath:
        """Path of this node relative to its parent."""
        return self._fragment

    @property
    def middleware(self) -> tuple[Middleware, ...]:
        """Middleware added at this node (not including ancestors)."""
        return self._middleware

    @property
    def methods(self) -> Mapping[str, Endpoint]:
        return MappingProxyType(self._endpoints)

    @property
    def catch_all(self) -> Endpoint | None:
        return self._catch_all

    @property
    def children(self) -> tuple[RouteNode, ...]:
        return tuple(self._children)

    @property
    def reverse_router(self) -> ReverseRouter:
        return self._reverse

    @property
    def config(self) -> RouteConfig:
        return self._config

    def __repr__(self) -> str:
        verbs = ", ".join(self._endpoints)
        kind = "scope" if self._middleware else "node"
        return f"<RouteNode {kind} {self._path} [{verbs}] children={len(self._children)}>"


def root(
    *,
    config: RouteConfig | None = None,
    reverse_router: ReverseRouter | None = None,
) -> RouteNode:
    """Create the root of a route tree.

    Pass *reverse_router* to collect names from several trees into one
    index; by default each root gets a fresh one.
    """
    config = config or DEFAULT_CONFIG
    if reverse_router is None:
        reverse_router = ReverseRouter(config)
    return RouteNode(reverse_router=reverse_router, config=config)


def _describe(endpoint: Endpoint) -> str:
    return getattr(endpoint, "__qualname__", None) or repr(endpoint)
