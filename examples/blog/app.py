"""Blog API: route groups composed from separate functions.

Shows versioned API groups, a middleware scope, named routes and a
static directory, all flattened into a ``RouteTable``.

Run the tests::

    pytest examples/blog
"""

from pathlib import Path

from thicket import Response, RouteNode, RouteTable, register, root

STATIC_DIR = Path(__file__).parent / "public"

ARTICLES = {"1": "Hello, thicket", "2": "Route trees"}


# -- Endpoints --


async def index(request):
    return Response("blog home")


async def list_articles(request):
    return Response(", ".join(ARTICLES.values()))


async def create_article(request):
    return Response("created", status=201)


async def show_article(request):
    title = ARTICLES.get(request.path_params["id"])
    if title is None:
        return Response("no such article", status=404)
    return Response(title)


async def method_not_allowed(request):
    return Response("method not allowed", status=405)


# -- Middleware --


async def require_token(request, next):
    if request.headers.get("authorization") != "Bearer s3cret":
        return Response("unauthorized", status=401)
    return await next(request)


async def server_header(request, next):
    response = await next(request)
    return response.with_header("Server", "blog")


# -- Route groups --


def v1_routes(r: RouteNode) -> RouteNode:
    return r.at("articles", lambda r: r
        .get(list_articles)
        .with_(require_token, lambda r: r.post(create_article))
        .at(":id", lambda r: r.get(show_article).name("article"))
    )


def v2_routes(r: RouteNode) -> RouteNode:
    return r.at("articles", lambda r: r.get(list_articles).all(method_not_allowed))


def build_routes() -> RouteNode:
    return root().with_(server_header, lambda r: r
        .get(index)
        .name("index")
        .at("api/v1", v1_routes)
        .at("api/v2", v2_routes)
        .at("static", lambda r: r.serve_dir(STATIC_DIR))
    )


def create_table() -> tuple[RouteTable, RouteNode]:
    routes = build_routes()
    table = RouteTable()
    register(table, routes)
    return table, routes
