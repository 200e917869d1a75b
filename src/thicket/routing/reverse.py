"""Reverse routing: route names back to URLs.

Populated while the route tree is built (``RouteNode.name``) and queried
by application code at request time. Registration is write-once per
name; lookups never mutate the index.
"""

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

from thicket.config import DEFAULT_CONFIG, RouteConfig
from thicket.errors import (
    DuplicateNameError,
    MissingParameterError,
    StructuralBuildError,
    UnknownRouteError,
)
from thicket.routing.path import RoutePath, parse_path

logger = logging.getLogger("thicket.routing")


@dataclass(frozen=True, slots=True)
class RouteTemplate:
    """A named path template and the placeholders it requires."""

    name: str
    path: RoutePath
    params: frozenset[str]

    def __str__(self) -> str:
        return str(self.path)


class ReverseRouter:
    """Index from route name to path template.

    Usage::

        reverse = ReverseRouter()
        reverse.register("article", "/articles/:id")
        reverse.url_for("article", {"id": 42})   # "/articles/42"
        reverse.url_for("article", id=42)        # same
    """

    __slots__ = ("_config", "_templates")

    def __init__(self, config: RouteConfig | None = None) -> None:
        self._config = config or DEFAULT_CONFIG
        self._templates: dict[str, RouteTemplate] = {}

    def register(self, name: str, template: RoutePath | str) -> RouteTemplate:
        """Register *template* under *name*.

        Raises ``DuplicateNameError`` if the name is taken; a route name
        identifies exactly one path across the whole tree.
        """
        if not name:
            msg = "Route names must be non-empty strings."
            raise StructuralBuildError(msg)
        if isinstance(template, str):
            template = parse_path(template, self._config)

        existing = self._templates.get(name)
        if existing is not None:
            raise DuplicateNameError(name, str(existing.path))

        entry = RouteTemplate(name=name, path=template, params=frozenset(template.params))
        self._templates[name] = entry
        logger.debug("Named route %r -> %s", name, template)
        return entry

    def template(self, name: str) -> RouteTemplate:
        """Return the template registered under *name*."""
        try:
            return self._templates[name]
        except KeyError:
            raise UnknownRouteError(name) from None

    def url_for(
        self,
        name: str,
        params: Mapping[str, Any] | None = None,
        /,
        **kwargs: Any,
    ) -> str:
        """Build the URL for route *name*.

        Placeholder values come from *params* and keyword arguments
        (keywords win). Values are converted with ``str()``. Keys the
        template does not use are ignored, so one parameter set can be
        reused across several calls.

        Raises ``UnknownRouteError`` for an unregistered name and
        ``MissingParameterError`` naming the first placeholder without a
        value.
        """
        entry = self.template(name)
        values = {**params, **kwargs} if params else kwargs

        parts: list[str] = []
        for segment in entry.path:
            if segment.name is None:
                parts.append(segment.value)
                continue
            if segment.name not in values:
                raise MissingParameterError(name, segment.name)
            value = str(values[segment.name])
            if self._config.quote_params:
                # Wildcards span several segments, keep their separators
                value = quote(value, safe="/" if segment.kind == "wildcard" else "")
            parts.append(value)
        return "/" + "/".join(parts)

    def names(self) -> list[str]:
        """Registered names in registration order."""
        return list(self._templates)

    def __contains__(self, name: object) -> bool:
        return name in self._templates

    def __iter__(self) -> Iterator[str]:
        return iter(self._templates)

    def __len__(self) -> int:
        return len(self._templates)

    def __repr__(self) -> str:
        return f"ReverseRouter({len(self._templates)} routes)"
