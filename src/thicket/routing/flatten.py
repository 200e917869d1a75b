"""Tree flattening: route tree to ordered endpoint descriptors.

Depth-first, pre-order. At each node the bound verbs come first (in the
order they were bound), then the catch-all, then the children in the
order they were declared. Middleware accumulates root to leaf.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from thicket.errors import StructuralBuildError
from thicket.routing.path import RoutePath, join
from thicket.types import Endpoint, Middleware

if TYPE_CHECKING:
    from thicket.routing.node import RouteNode

logger = logging.getLogger("thicket.routing")


@dataclass(frozen=True, slots=True)
class EndpointDescriptor:
    """One concrete registration: path, verb, middleware chain, endpoint.

    ``method`` is ``None`` for a catch-all. Unpacks like a tuple::

        for path, method, middleware, endpoint in root.build():
            ...
    """

    path: str
    method: str | None
    middleware: tuple[Middleware, ...]
    endpoint: Endpoint

    def __iter__(self) -> Iterator[Any]:
        return iter((self.path, self.method, self.middleware, self.endpoint))

    @property
    def is_catch_all(self) -> bool:
        return self.method is None


def flatten(node: RouteNode) -> list[EndpointDescriptor]:
    """Flatten the tree below *node* into descriptors.

    The result depends only on the tree, so flattening twice gives equal
    lists. Raises ``StructuralBuildError`` if two scopes bind the same
    verb (or two catch-alls) at the same absolute path.
    """
    descriptors: list[EndpointDescriptor] = []
    _walk(node, node.path, node.middleware, descriptors)

    seen: set[tuple[str, str | None]] = set()
    for descriptor in descriptors:
        key = (descriptor.path, descriptor.method)
        if key in seen:
            verb = descriptor.method or "catch-all"
            msg = f"{verb} {descriptor.path} is bound more than once in the route tree."
            raise StructuralBuildError(msg)
        seen.add(key)

    logger.debug("Flattened route tree at %s into %d endpoints", node.path, len(descriptors))
    return descriptors


def _walk(
    node: RouteNode,
    route_path: RoutePath,
    middleware: tuple[Middleware, ...],
    out: list[EndpointDescriptor],
) -> None:
    path = str(route_path)

    for verb, endpoint in node.methods.items():
        out.append(EndpointDescriptor(path, verb, middleware, endpoint))
        logger.debug("%s %s (%d middleware)", verb, path, len(middleware))

    if node.catch_all is not None:
        out.append(EndpointDescriptor(path, None, middleware, node.catch_all))
        logger.debug("* %s (%d middleware)", path, len(middleware))

    for child in node.children:
        _walk(child, join(route_path, child.fragment), middleware + child.middleware, out)
