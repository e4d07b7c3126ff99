"""Unit tests for the client exception hierarchy."""

from client.exceptions import (
    APIError,
    ConnectionError,
    InvalidOperationError,
    NotFoundError,
    PrivateProfileError,
    ServerError,
    SocialClientError,
    TimeoutError,
    UnauthorizedError,
    ValidationError,
)


class TestHierarchy:
    def test_api_errors_share_base(self) -> None:
        for exc_class in (
            ValidationError,
            InvalidOperationError,
            UnauthorizedError,
            PrivateProfileError,
            NotFoundError,
            ServerError,
        ):
            assert issubclass(exc_class, APIError)
            assert issubclass(exc_class, SocialClientError)

    def test_transport_errors_are_not_api_errors(self) -> None:
        assert not issubclass(ConnectionError, APIError)
        assert not issubclass(TimeoutError, APIError)

    def test_shadowed_builtins(self) -> None:
        """The client's ConnectionError is distinct from the builtin."""
        import builtins

        assert ConnectionError is not builtins.ConnectionError


class TestAttributes:
    def test_str_includes_status_and_type(self) -> None:
        exc = InvalidOperationError("You cannot follow yourself")
        assert str(exc) == "[HTTP 400] [InvalidOperation] You cannot follow yourself"

    def test_private_profile_account_defaults_empty(self) -> None:
        exc = PrivateProfileError("This account is private")
        assert exc.status_code == 403
        assert exc.account == {}

    def test_not_found_resource_type(self) -> None:
        exc = NotFoundError("story not found", resource_type="story")
        assert exc.resource_type == "story"
        assert exc.error_type == "NotFound"

    def test_validation_status_override(self) -> None:
        assert ValidationError("bad").status_code == 400
        assert ValidationError("bad", status_code=422).status_code == 422
