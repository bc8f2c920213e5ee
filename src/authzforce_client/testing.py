"""Helpers for policy test suites run against a live PDP.

Decision cases are kept as JSON so one suite can drive many requests
against the same policy:

    {
      "testSuite": "Role-based access",
      "policy": "role-based-policy.xml",
      "testCases": [
        {
          "name": "Admin can read",
          "request": {"subject": {"role": "admin"}, "action": {"action-id": "read"}},
          "expected": {"decision": "Permit"}
        }
      ]
    }

Usage in a pytest module:
    suite = load_decision_suite(Path("test-data/role-based-tests.json"))
    for case in suite.test_cases:
        result = await client.evaluate_request(domain_id, case.request)
        assert_decision(result, case.expected, case.name)
"""

from __future__ import annotations

__all__ = [
    "DecisionCase",
    "DecisionSuite",
    "ExpectedDecision",
    "assert_decision",
    "generate_domain_id",
    "load_decision_suite",
]

import json
import secrets
import string
import time
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from authzforce_client.exceptions import ConfigurationError
from authzforce_client.xacml.decision import Decision, DecisionResult
from authzforce_client.xacml.model import AccessQuery

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_domain_id(prefix: str = "test") -> str:
    """Generate a unique external id for a test domain.

    Format: {prefix}-{epoch milliseconds}-{6 random base36 chars}.
    """
    timestamp = int(time.time() * 1000)
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(6))
    return f"{prefix}-{timestamp}-{suffix}"


# =============================================================================
# Decision cases
# =============================================================================


class ExpectedDecision(BaseModel):
    """What a decision case expects back from the PDP.

    obligations and advice list directive ids that must all be present in
    the result; extra directives in the result are allowed.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    decision: Decision = Decision.PERMIT
    status: str | None = None
    obligations: list[str] | None = None
    advice: list[str] | None = None


class DecisionCase(BaseModel):
    """One request with its expected outcome."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = "Unnamed test case"
    description: str = ""
    request: AccessQuery = Field(default_factory=AccessQuery)
    expected: ExpectedDecision = Field(default_factory=ExpectedDecision)


class DecisionSuite(BaseModel):
    """A JSON test data file: optional metadata plus the cases."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    test_suite: str | None = Field(default=None, alias="testSuite")
    description: str = ""
    policy: str | None = None
    test_cases: list[DecisionCase] = Field(alias="testCases")


def load_decision_suite(path: Path | str) -> DecisionSuite:
    """Load decision cases from a JSON file.

    Args:
        path: Path to the test data file.

    Returns:
        Validated DecisionSuite.

    Raises:
        ConfigurationError: If the file is unreadable, not JSON, or does not
            hold a testCases array of valid cases.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Failed to load test data from {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Failed to load test data from {path}: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("testCases"), list):
        raise ConfigurationError(f"Test data {path} must contain a testCases array")

    try:
        return DecisionSuite.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid test data in {path}: {e}") from e


def assert_decision(actual: DecisionResult, expected: ExpectedDecision, message: str = "") -> None:
    """Assert that a decision result satisfies an expectation.

    Args:
        actual: Result returned by the PDP.
        expected: Expected decision, and optionally status and directive ids.
        message: Prefix for the assertion message (e.g. the case name).

    Raises:
        AssertionError: On the first mismatch.
    """
    prefix = f"{message}: " if message else ""

    if actual.decision != expected.decision:
        raise AssertionError(
            f"{prefix}expected decision {expected.decision.value}, got {actual.decision.value}"
        )

    if expected.status is not None and actual.status != expected.status:
        raise AssertionError(f"{prefix}expected status {expected.status}, got {actual.status}")

    if expected.obligations is not None:
        missing = set(expected.obligations) - {o.id for o in actual.obligations}
        if missing:
            raise AssertionError(f"{prefix}missing obligations: {', '.join(sorted(missing))}")

    if expected.advice is not None:
        missing = set(expected.advice) - {a.id for a in actual.advice}
        if missing:
            raise AssertionError(f"{prefix}missing advice: {', '.join(sorted(missing))}")
