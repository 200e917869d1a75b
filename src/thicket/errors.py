"""Thicket exception hierarchy.

Shared across the builder, flattener, reverse router and registrar so
every module raises and catches the same types.
"""


class ThicketError(Exception):
    """Base for all thicket-specific errors."""


class StructuralBuildError(ThicketError):
    """Raised when a route tree is malformed.

    Duplicate verb bindings, a second catch-all at one node, and path
    components that cannot be parsed all end up here. Raised at the
    offending builder call, or by ``build()`` when the problem only shows
    across the whole tree.
    """


class DuplicateNameError(StructuralBuildError):
    """A route name was registered twice."""

    def __init__(self, name: str, existing: str = "") -> None:
        self.name = name
        self.existing = existing
        detail = f"Route name {name!r} is already registered"
        if existing:
            detail = f"{detail} for {existing!r}"
        super().__init__(f"{detail}.")


class ReverseRoutingError(ThicketError):
    """Base for errors raised by ``url_for``."""


class UnknownRouteError(ReverseRoutingError, LookupError):
    """No route was registered under the requested name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No route named {name!r}.")


class MissingParameterError(ReverseRoutingError, LookupError):
    """``url_for`` was not given a value for a placeholder."""

    def __init__(self, name: str, param: str) -> None:
        self.name = name
        self.param = param
        super().__init__(f"Route {name!r} requires parameter {param!r}.")
