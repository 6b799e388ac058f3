"""Base analyzer class — all trace analyzers inherit from this."""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from typing import Any

from rugguard.analyzer.signatures import selector_of
from rugguard.core.config import Settings
from rugguard.core.types import AccountState, Call, Finding, Severity, Trace
from rugguard.core.units import parse_units


@dataclass
class AnalyzerContext:
    """Context passed to every analyzer: the trace and the effective settings."""

    trace: Trace
    settings: Settings
    tx_hash: str = ""

    # ── Helper accessors ─────────────────────────────────────────────────

    @property
    def calls(self) -> list[Call]:
        return self.trace.calls

    @property
    def selectors(self) -> list[str]:
        """Selector of every call, in call order."""
        return [selector_of(call.input) for call in self.trace.calls]

    def to_base_units(self, account: AccountState | None) -> int:
        """Balance of ``account`` in base units; missing accounts count as zero."""
        if account is None:
            return 0
        return parse_units(account.balance, self.settings.token_decimals)


@dataclass
class AnalyzerResult:
    """Outcome of one analyzer run: its findings, or the error that stopped it."""

    analyzer_id: str
    findings: list[Finding] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class BaseAnalyzer(abc.ABC):
    """Abstract base class for all trace analyzers.

    Each analyzer implements ``analyze()``, which receives an
    AnalyzerContext and returns its findings.

    Analyzer metadata:
        - ANALYZER_ID: Unique identifier (e.g., "balance-change")
        - NAME: Human-readable analyzer name
        - DESCRIPTION: What this analyzer looks for
        - SEVERITY: Default severity of emitted findings
    """

    ANALYZER_ID: str = ""
    NAME: str = ""
    DESCRIPTION: str = ""
    SEVERITY: Severity = Severity.HIGH

    @abc.abstractmethod
    def analyze(self, context: AnalyzerContext) -> list[Finding]:
        """Run the analyzer against the given context.

        Args:
            context: AnalyzerContext with the trace and settings

        Returns:
            List of findings. Empty if nothing was flagged.
        """
        ...

    def _make_finding(
        self,
        risk_type: str,
        description: str,
        severity: Severity | None = None,
        details: dict[str, Any] | None = None,
    ) -> Finding:
        """Helper to create a Finding with this analyzer's defaults."""
        return Finding(
            risk_type=risk_type,
            severity=severity or self.SEVERITY,
            description=description,
            details=details,
        )
