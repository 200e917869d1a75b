"""Path fragments: parsing, joining and rendering.

A fragment is an ordered tuple of segments. Separators are never stored:
they are re-inserted when a fragment is rendered, so joining two
fragments always yields exactly one ``/`` between components and no
trailing ``/`` (except the root, which renders as ``/``).
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Literal

from thicket.config import DEFAULT_CONFIG, RouteConfig
from thicket.errors import StructuralBuildError

type SegmentKind = Literal["static", "param", "wildcard"]


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:    ``users``  (kind="static")
    Param:     ``:id``    (kind="param", name="id")
    Wildcard:  ``*rest``  (kind="wildcard", name="rest")
    """

    value: str
    kind: SegmentKind = "static"
    name: str | None = None

    @property
    def is_placeholder(self) -> bool:
        return self.kind != "static"


@dataclass(frozen=True, slots=True)
class RoutePath:
    """An immutable, already-split path fragment.

    Usage::

        base = parse_path("/api/v1")
        full = base / "articles/:id"
        str(full)     # "/api/v1/articles/:id"
        full.params   # ("id",)
    """

    segments: tuple[PathSegment, ...] = ()

    def __str__(self) -> str:
        return self.to_string()

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self) -> Iterator[PathSegment]:
        return iter(self.segments)

    def __truediv__(self, other: RoutePath | str) -> RoutePath:
        return join(self, other)

    def to_string(self) -> str:
        """Render as a canonical absolute path, always starting with ``/``."""
        return "/" + "/".join(segment.value for segment in self.segments)

    @property
    def is_root(self) -> bool:
        return not self.segments

    @property
    def params(self) -> tuple[str, ...]:
        """Placeholder names in path order."""
        return tuple(s.name for s in self.segments if s.name is not None)

    @property
    def ends_with_wildcard(self) -> bool:
        return bool(self.segments) and self.segments[-1].kind == "wildcard"


ROOT = RoutePath()


def _parse_segment(part: str, path: str, config: RouteConfig) -> PathSegment:
    """Classify a single non-empty path component."""
    if (part.startswith("<") and part.endswith(">")) or (
        part.startswith("{") and part.endswith("}")
    ):
        name = part[1:-1].split(":", 1)[0]
        msg = (
            f"Route path {path!r} uses {part!r}; thicket placeholders are written "
            f"as {config.param_marker}{name} (or {config.wildcard_marker}{name} "
            f"for the rest of the path)."
        )
        raise StructuralBuildError(msg)

    if part[0] == config.param_marker:
        kind: SegmentKind = "param"
    elif part[0] == config.wildcard_marker:
        kind = "wildcard"
    else:
        return PathSegment(value=part)

    name = part[1:]
    if not name:
        msg = f"Empty placeholder name in route path {path!r}."
        raise StructuralBuildError(msg)
    if not name.isidentifier():
        msg = f"Placeholder {part!r} in route path {path!r} is not a valid identifier."
        raise StructuralBuildError(msg)
    return PathSegment(value=part, kind=kind, name=name)


def parse_path(path: str, config: RouteConfig | None = None) -> RoutePath:
    """Parse a route path string into a fragment.

    Empty components are dropped, so leading, trailing and doubled
    separators make no difference::

        "/users"          -> (users)
        "users/"          -> (users)
        "api//v1"         -> (api, v1)
        "articles/:id"    -> (articles, :id)
        "files/*path"     -> (files, *path)
        "/"               -> ()

    Raises ``StructuralBuildError`` for empty or invalid placeholder names,
    ``<id>``/``{id}`` style placeholders, and segments after a wildcard.
    """
    config = config or DEFAULT_CONFIG
    segments: list[PathSegment] = []
    for part in path.split("/"):
        if not part:
            continue
        if segments and segments[-1].kind == "wildcard":
            msg = f"Wildcard {segments[-1].value!r} must be the last segment of {path!r}."
            raise StructuralBuildError(msg)
        segments.append(_parse_segment(part, path, config))
    return RoutePath(tuple(segments))


def join(
    base: RoutePath | str,
    fragment: RoutePath | str,
    config: RouteConfig | None = None,
) -> RoutePath:
    """Concatenate two fragments.

    Strings are parsed first, so ``join("a/", "/b")`` and ``join("a", "b")``
    are the same fragment. Joining is associative.
    """
    if isinstance(base, str):
        base = parse_path(base, config)
    if isinstance(fragment, str):
        fragment = parse_path(fragment, config)
    if not fragment.segments:
        return base
    if base.ends_with_wildcard:
        msg = f"Cannot extend {base} past its wildcard segment with {fragment}."
        raise StructuralBuildError(msg)
    return RoutePath(base.segments + fragment.segments)
