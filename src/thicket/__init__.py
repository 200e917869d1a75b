"""Thicket: fluent route trees for Python web frameworks.

Describe paths, middleware and endpoints as one nested tree, then hand
the flattened result to whatever framework serves the requests.

Basic usage::

    from thicket import register, root

    routes = (
        root()
        .get(index)
        .at("api/v1", lambda r: r
            .with_(require_token, lambda r: r
                .at("articles/:id", lambda r: r.get(show_article).name("article"))
            )
        )
    )

    register(adapter, routes)
    routes.reverse_router.url_for("article", id=42)  # "/api/v1/articles/42"

Route groups defined in separate functions compose naturally::

    def v1_routes(r):
        r.at("articles", lambda r: r.get(list_articles).post(create_article))

    root().at("api/v1", v1_routes)
"""

__version__ = "0.1.0"
__all__ = [
    "DuplicateNameError",
    "EndpointDescriptor",
    "Middleware",
    "MissingParameterError",
    "Next",
    "Registrar",
    "Response",
    "ReverseRouter",
    "RouteConfig",
    "RouteNode",
    "RoutePath",
    "RouteTable",
    "StructuralBuildError",
    "ThicketError",
    "UnknownRouteError",
    "chain",
    "join",
    "parse_path",
    "register",
    "root",
]


# Public name -> defining module, resolved on first attribute access
_LAZY_IMPORTS: dict[str, str] = {
    "DuplicateNameError": "thicket.errors",
    "EndpointDescriptor": "thicket.routing.flatten",
    "Middleware": "thicket.types",
    "MissingParameterError": "thicket.errors",
    "Next": "thicket.types",
    "Registrar": "thicket.registrar",
    "Response": "thicket.http.response",
    "ReverseRouter": "thicket.routing.reverse",
    "RouteConfig": "thicket.config",
    "RouteNode": "thicket.routing.node",
    "RoutePath": "thicket.routing.path",
    "RouteTable": "thicket.registrar",
    "StructuralBuildError": "thicket.errors",
    "ThicketError": "thicket.errors",
    "UnknownRouteError": "thicket.errors",
    "chain": "thicket.registrar",
    "join": "thicket.routing.path",
    "parse_path": "thicket.routing.path",
    "register": "thicket.registrar",
    "root": "thicket.routing.node",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import thicket`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    from importlib import import_module

    return getattr(import_module(module_name), name)
