"""Signature matching — flag calls to known rugpull-capable functions."""

from __future__ import annotations

from rugguard.analyzer.base_analyzer import AnalyzerContext, BaseAnalyzer
from rugguard.analyzer.signatures import evaluate_rule, match_rule
from rugguard.core.types import Finding


class SignatureMatchAnalyzer(BaseAnalyzer):
    """Match every call's selector against the signature table."""

    ANALYZER_ID = "signature-match"
    NAME = "Suspicious Function Calls"
    DESCRIPTION = (
        "Flags calls to ownership, blacklist, pause, self-destruct, upgrade, "
        "mint, burn, fee and liquidity functions. Mint and fee calls are only "
        "flagged above their configured thresholds."
    )

    def analyze(self, context: AnalyzerContext) -> list[Finding]:
        findings: list[Finding] = []

        for call in context.calls:
            rule = match_rule(call.input)
            if rule is None:
                continue

            outcome = evaluate_rule(rule, call.input, context.settings)
            if not outcome.emit:
                continue

            details = None
            if outcome.parameters is not None:
                details = {
                    "function": rule.signature,
                    "parameters": outcome.parameters,
                }
            findings.append(self._make_finding(
                risk_type=rule.key,
                description=rule.description,
                severity=rule.severity,
                details=details,
            ))

        return findings
