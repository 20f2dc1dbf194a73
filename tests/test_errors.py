"""Tests for finch.errors: hierarchy and messages."""

import httpx
import pytest

from finch.errors import (
    BindError,
    ConfigurationError,
    DecodeError,
    FinchError,
    HTTPError,
    InvalidHandlerType,
    MethodNotAllowed,
    MissingHandler,
    NotFound,
    RequestError,
    ServerError,
    UnsupportedFieldType,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "exc_type",
        [ConfigurationError, InvalidHandlerType, MissingHandler, HTTPError, ServerError,
         RequestError, BindError, UnsupportedFieldType, DecodeError],
    )
    def test_all_are_finch_errors(self, exc_type: type[Exception]) -> None:
        assert issubclass(exc_type, FinchError)

    def test_registration_errors_are_configuration_errors(self) -> None:
        assert issubclass(InvalidHandlerType, ConfigurationError)
        assert issubclass(MissingHandler, ConfigurationError)

    def test_builtin_bases(self) -> None:
        assert issubclass(InvalidHandlerType, TypeError)
        assert issubclass(MissingHandler, ValueError)
        assert issubclass(BindError, ValueError)
        assert issubclass(UnsupportedFieldType, TypeError)
        assert issubclass(DecodeError, ValueError)


class TestInvalidHandlerType:
    def test_plain_message(self) -> None:
        exc = InvalidHandlerType(42)
        assert str(exc) == (
            "invalid handler type: int - must be a Handler, an object with handle(ctx), "
            "a (request, response) callable or a (ctx) callable"
        )

    def test_reason_appended(self) -> None:
        assert str(InvalidHandlerType(42, reason="not callable")).endswith("(not callable)")

    def test_type_name_for_classes(self) -> None:
        assert "type[HTTPError]" in str(InvalidHandlerType(HTTPError))

    def test_type_name_for_user_objects(self) -> None:
        class Widget:
            pass

        assert "Widget" in str(InvalidHandlerType(Widget()))

    def test_at_locates_copy(self) -> None:
        exc = InvalidHandlerType("x", reason="not callable")
        located = exc.at(3, "middleware")

        assert located is not exc
        assert (located.position, located.role, located.reason) == (3, "middleware", "not callable")
        assert str(located).startswith("middleware at position 3: ")
        assert exc.position is None


class TestHTTPErrors:
    def test_not_found(self) -> None:
        exc = NotFound()
        assert exc.status == 404
        assert str(exc) == "404: Not Found"

    def test_method_not_allowed_allow_header(self) -> None:
        exc = MethodNotAllowed(frozenset({"POST", "GET"}))
        assert exc.status == 405
        assert exc.headers == (("Allow", "GET, POST"),)

    def test_status_only(self) -> None:
        assert str(HTTPError(status=418)) == "418"


class TestServerError:
    def test_defaults(self) -> None:
        exc = ServerError("boom")
        assert exc.status_code == 500
        assert exc.content_type.startswith("text/plain")
        assert exc.message == "boom"
        assert not exc.is_json

    @pytest.mark.parametrize("content_type", ["application/json", "application/json; charset=utf-8"])
    def test_is_json(self, content_type: str) -> None:
        assert ServerError("x", content_type=content_type).is_json

    def test_wraps_exception(self) -> None:
        cause = KeyError("account")
        exc = ServerError(cause, status_code=404)
        assert exc.message == str(cause)
        assert exc.__cause__ is cause


class TestRequestError:
    def test_without_response(self) -> None:
        exc = RequestError(502)
        assert str(exc) == "request failed with status 502"
        assert exc.body == ""

    def test_body_is_truncated(self) -> None:
        response = httpx.Response(500, text="x" * 500)
        exc = RequestError(500, response)
        assert exc.body == "x" * 200
        assert exc.response is response


class TestBindingErrors:
    def test_bind_error_without_field(self) -> None:
        assert str(BindError("1.5", "int")) == "cannot convert '1.5' to int"

    def test_unsupported_field(self) -> None:
        exc = UnsupportedFieldType("list[str]", "tags")
        assert str(exc) == "unsupported type: list[str] (field 'tags')"
