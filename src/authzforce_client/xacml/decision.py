"""Decision types decoded from XACML 3.0 Response documents.

These values are the only successful outcome of an evaluation. A response
that does not yield one of the four Decision values is a DecodeError, never
a default.
"""

from __future__ import annotations

__all__ = [
    "AttributeAssignment",
    "Decision",
    "DecisionResult",
    "PolicyDirective",
]

from dataclasses import dataclass
from enum import Enum
from typing import Literal


class Decision(str, Enum):
    """XACML decision outcome.

    Inherits from str so results compare equal to the wire value
    (Decision.PERMIT == "Permit").

    Attributes:
        PERMIT: Access is granted.
        DENY: Access is refused.
        INDETERMINATE: The PDP could not evaluate (missing attribute, error).
        NOT_APPLICABLE: No policy applied to the request.
    """

    PERMIT = "Permit"
    DENY = "Deny"
    INDETERMINATE = "Indeterminate"
    NOT_APPLICABLE = "NotApplicable"


@dataclass(frozen=True, slots=True)
class AttributeAssignment:
    """One AttributeAssignment carried by an obligation or advice."""

    attribute_id: str
    value: str
    category: str | None = None
    data_type: str | None = None


@dataclass(frozen=True, slots=True)
class PolicyDirective:
    """An Obligation or Advice returned with a decision.

    Passed through to the caller as-is; this client does not act on them.

    Attributes:
        kind: "obligation" or "advice".
        id: ObligationId / AdviceId, None if the PDP omitted it.
        assignments: Attribute assignments in document order.
        xml: The element serialized verbatim, for callers that need more.
    """

    kind: Literal["obligation", "advice"]
    id: str | None
    assignments: tuple[AttributeAssignment, ...] = ()
    xml: str = ""


@dataclass(frozen=True, slots=True)
class DecisionResult:
    """Typed result of a XACML evaluation.

    Attributes:
        decision: Always present.
        status: StatusCode/@Value, None if the PDP sent no status.
        obligations: Obligations, empty if none.
        advice: Advice, empty if none.
    """

    decision: Decision
    status: str | None = None
    obligations: tuple[PolicyDirective, ...] = ()
    advice: tuple[PolicyDirective, ...] = ()

    @property
    def permitted(self) -> bool:
        """True only for Permit."""
        return self.decision is Decision.PERMIT
