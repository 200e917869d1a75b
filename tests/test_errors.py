"""Tests for thicket.errors: exception hierarchy and error messages."""

import pytest

from thicket.errors import (
    DuplicateNameError,
    MissingParameterError,
    ReverseRoutingError,
    StructuralBuildError,
    ThicketError,
    UnknownRouteError,
)


class TestHierarchy:
    def test_structural_is_thicket_error(self) -> None:
        assert issubclass(StructuralBuildError, ThicketError)

    def test_duplicate_name_is_structural(self) -> None:
        assert issubclass(DuplicateNameError, StructuralBuildError)

    def test_reverse_errors(self) -> None:
        assert issubclass(UnknownRouteError, ReverseRoutingError)
        assert issubclass(MissingParameterError, ReverseRoutingError)
        assert issubclass(ReverseRoutingError, ThicketError)

    def test_reverse_errors_are_lookup_errors(self) -> None:
        assert issubclass(UnknownRouteError, LookupError)
        assert issubclass(MissingParameterError, LookupError)


class TestMessages:
    def test_duplicate_name(self) -> None:
        err = DuplicateNameError("home")
        assert err.name == "home"
        assert str(err) == "Route name 'home' is already registered."

    def test_duplicate_name_with_existing_path(self) -> None:
        err = DuplicateNameError("home", "/index")
        assert str(err) == "Route name 'home' is already registered for '/index'."

    def test_unknown_route(self) -> None:
        assert str(UnknownRouteError("nope")) == "No route named 'nope'."

    def test_missing_parameter(self) -> None:
        err = MissingParameterError("article", "id")
        assert (err.name, err.param) == ("article", "id")
        assert str(err) == "Route 'article' requires parameter 'id'."

    def test_catchable_as_base(self) -> None:
        with pytest.raises(ThicketError):
            raise MissingParameterError("article", "id")
