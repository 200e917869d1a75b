"""Routing configuration.

RouteConfig is a frozen dataclass, immutable after creation, shared by
every node of a tree and by its reverse router.
"""

from dataclasses import dataclass

STANDARD_METHODS: tuple[str, ...] = (
    "GET",
    "HEAD",
    "POST",
    "PUT",
    "DELETE",
    "CONNECT",
    "OPTIONS",
    "TRACE",
    "PATCH",
)


@dataclass(frozen=True, slots=True)
class RouteConfig:
    """Route tree configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouteConfig(param_marker="$", quote_params=False)
    """

    # Placeholders
    param_marker: str = ":"  # ":id" matches one segment
    wildcard_marker: str = "*"  # "*rest" matches the remainder of the path

    # Verbs accepted by RouteNode.method()
    methods: tuple[str, ...] = STANDARD_METHODS

    # Reverse routing
    quote_params: bool = True  # Percent-encode values substituted by url_for

    def __post_init__(self) -> None:
        for marker in (self.param_marker, self.wildcard_marker):
            if len(marker) != 1 or marker == "/":
                msg = f"Placeholder markers must be a single non-'/' character, got {marker!r}."
                raise ValueError(msg)
        if self.param_marker == self.wildcard_marker:
            msg = "param_marker and wildcard_marker must differ."
            raise ValueError(msg)
        object.__setattr__(self, "methods", tuple(m.upper() for m in self.methods))


DEFAULT_CONFIG = RouteConfig()
