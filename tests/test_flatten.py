"""Tests for thicket.routing.flatten: tree to ordered endpoint descriptors."""

import logging

import pytest

from thicket.errors import StructuralBuildError
from thicket.routing.flatten import EndpointDescriptor, flatten
from thicket.routing.node import root


async def h1(request):
    return "h1"


async def h2(request):
    return "h2"


async def h3(request):
    return "h3"


async def mw1(request, next):
    return await next(request)


async def mw2(request, next):
    return await next(request)


async def mw3(request, next):
    return await next(request)


class TestDescriptor:
    def test_unpacks_like_tuple(self) -> None:
        path, method, middleware, endpoint = EndpointDescriptor("/", "GET", (mw1,), h1)
        assert (path, method, middleware, endpoint) == ("/", "GET", (mw1,), h1)

    def test_catch_all_flag(self) -> None:
        assert EndpointDescriptor("/", None, (), h1).is_catch_all is True
        assert EndpointDescriptor("/", "GET", (), h1).is_catch_all is False

    def test_frozen(self) -> None:
        descriptor = EndpointDescriptor("/", "GET", (), h1)
        with pytest.raises(AttributeError):
            descriptor.path = "/other"  # type: ignore[misc]


class TestFlatten:
    def test_single_endpoint(self) -> None:
        routes = root().get(h1).build()
        assert routes == [EndpointDescriptor("/", "GET", (), h1)]

    def test_get_and_post_at_root(self) -> None:
        routes = root().get(h1).post(h2).build()
        assert len(routes) == 2
        assert [(d.path, d.method, d.middleware) for d in routes] == [
            ("/", "GET", ()),
            ("/", "POST", ()),
        ]

    def test_count_matches_bindings(self) -> None:
        node = root().get(h1).post(h2).put(h3).delete(h1).all(h2)
        assert len(node.build()) == 5

    def test_sub_endpoints(self) -> None:
        routes = root().at("sub_path", lambda r: r.get(h1).post(h2)).build()
        assert len(routes) == 2
        assert {d.path for d in routes} == {"/sub_path"}

    def test_nested_path(self) -> None:
        routes = root().at("path", lambda r: r.at("subpath", lambda r: r.get(h1))).build()
        assert len(routes) == 1
        assert routes[0].path == "/path/subpath"
        assert routes[0].method == "GET"

    def test_path_starts_with_slash(self) -> None:
        assert root().get(h1).build()[0].path == "/"

    def test_with_inside_at(self) -> None:
        routes = root().at("api/v1", lambda r: r.with_(mw1, lambda r2: r2.get(h1))).build()
        assert routes == [EndpointDescriptor("/api/v1", "GET", (mw1,), h1)]

    def test_catch_all_after_verbs(self) -> None:
        routes = root().all(h3).get(h1).post(h2).build()
        assert [d.method for d in routes] == ["GET", "POST", None]
        assert routes[-1].endpoint is h3

    def test_node_endpoints_before_children(self) -> None:
        routes = (
            root()
            .at("child", lambda r: r.get(h2))
            .get(h1)
        ).build()
        assert [d.path for d in routes] == ["/", "/child"]

    def test_siblings_in_declaration_order(self) -> None:
        routes = (
            root()
            .at("b", lambda r: r.get(h1))
            .at("a", lambda r: r.get(h1))
            .at("c", lambda r: r.get(h1))
        ).build()
        assert [d.path for d in routes] == ["/b", "/a", "/c"]

    def test_deterministic(self) -> None:
        node = (
            root()
            .get(h1)
            .at("api/v1", lambda r: r.with_(mw1, lambda r: r.get(h2).at(":id", lambda r: r.put(h3))))
            .at("api/v2", lambda r: r.all(h1))
        )
        assert node.build() == node.build()

    def test_flatten_function_matches_build(self) -> None:
        node = root().get(h1).at("x", lambda r: r.post(h2))
        assert flatten(node) == node.build()


class TestMiddleware:
    def test_collect_middleware(self) -> None:
        routes = (
            root()
            .at("path", lambda r: r
                .with_(mw1, lambda r: r
                    .at("subpath", lambda r: r.with_(mw2, lambda r: r.get(h1)))
                    .get(h2)
                )
            )
        ).build()

        assert routes[0].path == "/path"
        assert routes[0].middleware == (mw1,)
        assert routes[1].path == "/path/subpath"
        assert routes[1].middleware == (mw1, mw2)

    def test_not_applied_to_siblings_outside_scope(self) -> None:
        routes = (
            root()
            .at("api/v1", lambda r: r
                .with_(mw1, lambda r: r.get(h1))
                .post(h2)
            )
        ).build()
        by_method = {d.method: d for d in routes}
        assert by_method["GET"].middleware == (mw1,)
        assert by_method["POST"].middleware == ()

    def test_not_inherited_upwards(self) -> None:
        routes = (
            root()
            .get(h1)
            .at("inner", lambda r: r.with_(mw1, lambda r: r.get(h2)))
        ).build()
        assert routes[0].middleware == ()

    def test_ancestors_form_prefix(self) -> None:
        routes = (
            root()
            .with_(mw1, lambda r: r
                .at("a", lambda r: r
                    .with_([mw2, mw3], lambda r: r
                        .get(h1)
                        .at("b/c", lambda r: r.with_(mw1, lambda r: r.get(h2)))
                    )
                )
            )
        ).build()
        assert routes[0].middleware == (mw1, mw2, mw3)
        assert routes[1].path == "/a/b/c"
        assert routes[1].middleware[: len(routes[0].middleware)] == routes[0].middleware
        # The same middleware may appear at several depths
        assert routes[1].middleware == (mw1, mw2, mw3, mw1)

    def test_shared_instances(self) -> None:
        routes = root().with_(mw1, lambda r: r.get(h1).at("x", lambda r: r.get(h1))).build()
        assert routes[0].middleware[0] is routes[1].middleware[0]
        assert routes[0].endpoint is routes[1].endpoint


class TestCrossScopeDuplicates:
    def test_same_verb_in_two_scopes(self) -> None:
        node = root().get(h1).with_(mw1, lambda r: r.get(h2))
        with pytest.raises(StructuralBuildError, match="GET / is bound more than once"):
            node.build()

    def test_two_catch_alls_at_one_path(self) -> None:
        node = root().at("x", lambda r: r.all(h1).with_(mw1, lambda r: r.all(h2)))
        with pytest.raises(StructuralBuildError, match="catch-all /x"):
            node.build()

    def test_different_verbs_in_scopes_are_fine(self) -> None:
        node = root().get(h1).with_(mw1, lambda r: r.post(h2))
        assert [d.method for d in node.build()] == ["GET", "POST"]


class TestLogging:
    def test_debug_summary(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="thicket.routing"):
            root().get(h1).post(h2).build()
        assert "into 2 endpoints" in caplog.text
