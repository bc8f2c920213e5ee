"""Custom exceptions for authzforce-client.

All exceptions derive from AuthzForceClientError so callers can catch the
whole family at once. They fall into four groups:

Transport (the PDP could not be reached or refused the call):
    - TransportError: Network failure or non-2xx HTTP status

Document (the PDP answered, but not with what we can use):
    - ParseError: Response body is not well-formed XML
    - ProtocolViolation: Well-formed XML lacks a required element
    - DecodeError: XACML Response without a usable Decision

Input (rejected before any network call):
    - PolicyExtractionError: Policy XML has no usable PolicySetId/PolicyId
    - ConfigurationError: Invalid config file or environment value

A failed evaluation never yields a default decision. Callers either get one
of the four XACML outcomes or one of these exceptions.

Usage:
    from authzforce_client.exceptions import DecodeError, TransportError
"""

from __future__ import annotations

__all__ = [
    "AuthzForceClientError",
    "ConfigurationError",
    "DecodeError",
    "ParseError",
    "PolicyExtractionError",
    "ProtocolViolation",
    "TransportError",
]


class AuthzForceClientError(Exception):
    """Base class for all authzforce-client errors."""

    pass


# =============================================================================
# Transport
# =============================================================================


class TransportError(AuthzForceClientError):
    """Raised when a PDP call fails at the HTTP level.

    The underlying httpx exception is chained as __cause__.

    Attributes:
        message: Human-readable description including the operation.
        status_code: HTTP status if the PDP responded, None for network errors.
        response_body: Body of the error response, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        response_body: str | None = None,
    ) -> None:
        if status_code is not None:
            super().__init__(f"{message} (HTTP {status_code})")
        else:
            super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_body = response_body


# =============================================================================
# Document
# =============================================================================


class ParseError(AuthzForceClientError):
    """Raised when a document is not well-formed XML.

    Attributes:
        diagnostic: The parser's own error text (line/column and reason).
    """

    def __init__(self, diagnostic: str) -> None:
        super().__init__(f"XML parsing error: {diagnostic}")
        self.diagnostic = diagnostic


class ProtocolViolation(AuthzForceClientError):
    """Raised when a well-formed response lacks an expected element or attribute.

    Examples: no link element after domain creation, no version in the
    policy upload response.
    """

    pass


class DecodeError(ProtocolViolation):
    """Raised when a XACML Response has no Decision, or an unknown one.

    Always fatal; the client never substitutes a default decision.
    """

    pass


# =============================================================================
# Input
# =============================================================================


class PolicyExtractionError(AuthzForceClientError, ValueError):
    """Raised when a policy's identity cannot be determined from its XML.

    Raised before upload, so no unidentifiable policy reaches the PDP.
    """

    pass


class ConfigurationError(AuthzForceClientError, ValueError):
    """Raised when configuration cannot be loaded or validated."""

    pass
