"""Shared enums and schemas used across the detector.

JSON field names on the wire are camelCase (``transactionHash``, ``gasUsed``,
``riskDetails``); Python attributes are snake_case. Both spellings are
accepted on input.
"""

from __future__ import annotations

import enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Severity(str, enum.Enum):
    """Risk severity tier."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class RiskType(str, enum.Enum):
    """Risk tags emitted by the correlation and state analyzers.

    Signature findings use the matching rule key (``MINT``, ``SET_FEE``...)
    as their risk type instead.
    """

    SUSPICIOUS_PATTERN = "SUSPICIOUS_PATTERN"
    MULTIPLE_HIGH_RISK_OPS = "MULTIPLE_HIGH_RISK_OPS"
    OWNERSHIP_CONCENTRATION = "OWNERSHIP_CONCENTRATION"
    LARGE_BALANCE_DECREASE = "LARGE_BALANCE_DECREASE"


class _WireModel(BaseModel):
    """Base model with camelCase aliases and lenient number → string coercion."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


# ── Trace ────────────────────────────────────────────────────────────────────


class Call(_WireModel):
    """One internal call of the transaction."""

    from_: str = Field("", alias="from")
    to: str = ""
    input: str = "0x"
    output: str = "0x"
    gas_used: str = "0"
    value: str = "0"


class Log(_WireModel):
    """Event log emitted during execution."""

    address: str = ""
    topics: list[str] = Field(default_factory=list)
    data: str = "0x"


class AccountState(_WireModel):
    """Account snapshot before or after execution.

    ``balance`` is kept as the raw decimal string; it is parsed by the
    analyzers that need it so that a malformed value surfaces as an
    analysis error instead of a rejected request.
    """

    balance: str | None = None
    nonce: int | None = None
    code: str | None = None
    storage: dict[str, str] = Field(default_factory=dict)


class Trace(_WireModel):
    """Enriched transaction trace supplied by the platform."""

    block_number: int = 0
    from_: str = Field("", alias="from")
    to: str = ""
    transaction_hash: str = ""
    input: str = "0x"
    output: str = "0x"
    gas: str = "0"
    gas_used: str = "0"
    value: str = "0"
    calls: list[Call] = Field(default_factory=list)
    logs: list[Log] = Field(default_factory=list)
    pre: dict[str, AccountState] = Field(default_factory=dict)
    post: dict[str, AccountState] = Field(default_factory=dict)


# ── Findings & verdict ───────────────────────────────────────────────────────


class Finding(_WireModel):
    """One detected risk instance."""

    risk_type: str
    severity: Severity
    description: str
    details: dict[str, Any] | None = None


class DetectionInfo(_WireModel):
    """Verdict for one transaction."""

    detected: bool
    error: bool | None = None
    message: str
    risk_details: list[Finding] = Field(default_factory=list)

    @staticmethod
    def from_findings(
        findings: list[Finding], message: str, error: bool = False
    ) -> "DetectionInfo":
        """Build a verdict; ``detected`` holds iff any finding is HIGH."""
        return DetectionInfo(
            detected=any(f.severity == Severity.HIGH for f in findings),
            error=True if error else None,
            message=message,
            risk_details=list(findings),
        )


# ── Platform boundary ────────────────────────────────────────────────────────


class DetectionRequest(_WireModel):
    """Request posted by the security platform."""

    request_id: str | None = Field(
        None,
        validation_alias=AliasChoices("id", "requestId", "request_id"),
        serialization_alias="requestId",
    )
    chain_id: int
    hash: str
    protocol_name: str | None = None
    protocol_address: str | None = None
    detector_name: str | None = None
    trace: Trace


class DetectionResponse(_WireModel):
    """Response returned to the platform: the request echo plus the verdict."""

    request_id: str | None = None
    chain_id: int
    hash: str
    protocol_name: str | None = None
    protocol_address: str | None = None
    detector_name: str | None = None
    detected: bool
    error: bool | None = None
    message: str
    risk_details: list[Finding] = Field(default_factory=list)

    @classmethod
    def from_request(
        cls, request: DetectionRequest, info: DetectionInfo
    ) -> "DetectionResponse":
        return cls(
            request_id=request.request_id,
            chain_id=request.chain_id,
            hash=request.hash,
            protocol_name=request.protocol_name,
            protocol_address=request.protocol_address,
            detector_name=request.detector_name,
            detected=info.detected,
            error=info.error,
            message=info.message,
            risk_details=info.risk_details,
        )

