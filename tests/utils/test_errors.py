"""Tests for backend error classification."""

import pytest

from rosa_mcp.utils.errors import (
    AUTHENTICATION_FAILED_PREFIX,
    CredentialError,
    ErrorCode,
    InvalidArgumentError,
    OCMError,
    classify,
    extract_detail,
)


class _SDKError(Exception):
    """Stand-in for a third-party error carrying OCM detail as attributes."""

    def __init__(self, code: str, reason: str, operation_id: str | None = None) -> None:
        super().__init__(f"{code}: {reason}")
        self.code = code
        self.reason = reason
        self.operation_id = operation_id


class TestOCMError:
    """Test parsing of OCM error bodies."""

    def test_ocm_error_body(self) -> None:
        error = OCMError.from_response_body(
            {
                "kind": "Error",
                "code": "CLUSTERS-MGMT-404",
                "reason": "Cluster 'abc' not found",
                "operation_id": "op-1",
            },
            404,
        )
        assert error.ocm_code == "CLUSTERS-MGMT-404"
        assert error.reason == "Cluster 'abc' not found"
        assert error.operation_id == "op-1"
        assert error.code == ErrorCode.BACKEND_REJECTED

    def test_sso_error_body(self) -> None:
        error = OCMError.from_response_body(
            {"error": "invalid_grant", "error_description": "Token is not active"}, 400
        )
        assert error.ocm_code == "invalid_grant"
        assert error.reason == "Token is not active"

    def test_unstructured_body(self) -> None:
        error = OCMError.from_response_body("upstream timeout", 504)
        assert error.ocm_code == "HTTP-504"
        assert error.reason == "upstream timeout"

    def test_empty_body(self) -> None:
        error = OCMError.from_response_body(None, 500)
        assert error.reason == "no details"

    def test_status_401_is_expiry(self) -> None:
        error = OCMError("SOME-CODE", "nope", status_code=401)
        assert error.is_credential_expired

    def test_other_status_is_not_expiry(self) -> None:
        error = OCMError("CLUSTERS-MGMT-400", "bad request", status_code=400)
        assert not error.is_credential_expired


class TestClassifyExpiry:
    """Errors signalling an expired or invalid credential."""

    def test_access_token_expired(self) -> None:
        result = classify(
            OCMError("CLUSTERS-MGMT-401", "access token expired"), "get clusters"
        )

        assert result.is_error
        assert result.text.startswith("AUTHENTICATION_FAILED:")
        assert "expired" in result.text

    @pytest.mark.parametrize(
        ("code", "reason"),
        [
            ("ACCT-MGMT-401", "Unauthorized"),
            ("AUTHZ-401", "denied"),
            ("invalid_grant", "Offline user session not found"),
            ("invalid_token", "bad token"),
            ("SERVICE-LOGS-401", "no auth"),
            ("CLUSTERS-MGMT-500", "Token is expired"),
            ("ACCT-MGMT-7", "Account is not authenticated"),
        ],
    )
    def test_expiry_set(self, code: str, reason: str) -> None:
        result = classify(OCMError(code, reason), "get account")

        assert result.text.startswith(AUTHENTICATION_FAILED_PREFIX)
        assert code in result.text
        assert reason in result.text

    def test_attribute_bearing_error(self) -> None:
        """Detail exposed as code/reason attributes is classified too."""
        result = classify(_SDKError("CLUSTERS-MGMT-401", "access token expired"), "get cluster")
        assert result.text.startswith(AUTHENTICATION_FAILED_PREFIX)


class TestClassifyBackendRejection:
    """Structured errors outside the expiry set."""

    def test_code_and_reason_verbatim(self) -> None:
        reason = "Cluster name 'My_Cluster' is invalid: must match ^[a-z]"
        result = classify(OCMError("CLUSTERS-MGMT-400", reason, "op-9"), "create cluster")

        assert result.is_error
        assert not result.text.startswith(AUTHENTICATION_FAILED_PREFIX)
        assert "CLUSTERS-MGMT-400" in result.text
        assert reason in result.text
        assert "op-9" in result.text

    @pytest.mark.parametrize(
        ("code", "reason", "status_code"),
        [
            (
                "CLUSTERS-MGMT-400",
                "Cluster version 'openshift-v4.12.0' has expired and is no longer supported",
                400,
            ),
            ("ACCT-MGMT-403", "Subscription trial expired for organization 'acme'", 403),
            ("CLUSTERS-MGMT-403", "Unauthorized to create clusters in region 'us-east-1'", 403),
        ],
    )
    def test_unrelated_expiry_wording(self, code: str, reason: str, status_code: int) -> None:
        """Rejections that mention expiry of something other than the token."""
        result = classify(OCMError(code, reason, "op1", status_code), "create cluster")

        assert result.is_error
        assert not result.text.startswith(AUTHENTICATION_FAILED_PREFIX)
        assert result.text == f"OCM API Error [{code}]: {reason} (operation ID: op1)"

    def test_without_operation_id(self) -> None:
        result = classify(OCMError("CLUSTERS-MGMT-404", "not found"), "get cluster")
        assert result.text == "OCM API Error [CLUSTERS-MGMT-404]: not found"


class TestClassifyUnstructured:
    """Errors without backend detail."""

    def test_plain_exception(self) -> None:
        result = classify(ValueError("boom"), "setup htpasswd identity provider")

        assert result.is_error
        assert result.text == "setup htpasswd identity provider failed: boom"

    def test_exception_without_message(self) -> None:
        result = classify(RuntimeError(), "get clusters")
        assert result.text == "get clusters failed: RuntimeError"

    def test_rosa_error_uses_message(self) -> None:
        result = classify(InvalidArgumentError("state", "missing required argument: state"), "x")
        assert result.text == "x failed: missing required argument: state"

    def test_non_string_attributes_ignored(self) -> None:
        error = _SDKError("CLUSTERS-MGMT-401", "expired")
        error.code = 401  # type: ignore[assignment]
        assert extract_detail(error) is None
        assert classify(error, "op").text.startswith("op failed:")

    def test_never_raises_on_broken_error(self) -> None:
        class Broken(Exception):
            @property
            def code(self) -> str:
                raise RuntimeError("inspection failed")

        result = classify(Broken("bad"), "get cluster")
        assert result.is_error
        assert result.text == "get cluster failed: bad"


class TestErrorCodes:
    def test_credential_error_default_code(self) -> None:
        assert CredentialError("missing").code == ErrorCode.MISSING_CREDENTIAL

    def test_invalid_argument_names_argument(self) -> None:
        error = InvalidArgumentError("cluster_id", "missing required argument: cluster_id")
        assert error.argument == "cluster_id"
        assert error.code == ErrorCode.INVALID_ARGUMENT
