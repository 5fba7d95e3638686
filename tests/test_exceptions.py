"""Tests for the itc.exceptions module."""

import pytest

from itc.exceptions import (
    ConfigError,
    ConfigFetchError,
    ITCError,
    NotAuthenticatedError,
    ServiceError,
    SessionError,
    SignInError,
    TransportError,
    UnexpectedStatusError,
)
from itc.models import ServiceErrorDetail


class TestITCError:
    """Tests for the base ITCError exception."""

    def test_itc_error_default_message(self):
        """Test ITCError has a default message."""
        error = ITCError()
        assert error.message == "An error occurred with iTunes Connect"
        assert str(error) == "An error occurred with iTunes Connect"

    def test_itc_error_custom_message(self):
        error = ITCError("Custom error message")
        assert error.message == "Custom error message"
        assert str(error) == "Custom error message"


@pytest.mark.parametrize(
    "error_class",
    [
        ConfigError,
        ConfigFetchError,
        SignInError,
        SessionError,
        NotAuthenticatedError,
        TransportError,
    ],
)
class TestSimpleErrors:
    """Tests shared by the message-only exceptions."""

    def test_inherits_from_itc_error(self, error_class):
        assert isinstance(error_class(), ITCError)

    def test_caught_as_itc_error(self, error_class):
        with pytest.raises(ITCError):
            raise error_class()

    def test_has_default_message(self, error_class):
        assert error_class().message

    def test_custom_message(self, error_class):
        error = error_class("Something specific")
        assert error.message == "Something specific"
        assert str(error) == "Something specific"


class TestDefaultMessages:
    def test_sign_in_error_mentions_credentials(self):
        assert "Apple ID" in SignInError().message

    def test_config_error_mentions_env_vars(self):
        assert "ITC_APPLEID" in ConfigError().message


class TestServiceError:
    """Tests for ServiceError."""

    def test_joins_errors(self):
        error = ServiceError(
            [ServiceErrorDetail(code="A", message="bad"), ServiceErrorDetail(code="B", message="worse")],
            status_code=400,
        )
        assert error.message == "iTunes Connect Service Error: bad (A); worse (B)"
        assert error.status_code == 400
        assert len(error.errors) == 2
        assert isinstance(error, ITCError)


class TestUnexpectedStatusError:
    """Tests for UnexpectedStatusError."""

    def test_message_has_status_and_reason(self):
        error = UnexpectedStatusError(404, "Not Found")
        assert error.message == "Error (404): Not Found"
        assert error.status_code == 404
        assert error.reason == "Not Found"
