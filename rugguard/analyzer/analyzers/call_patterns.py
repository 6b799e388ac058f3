"""Cross-call correlation — risky combinations inside one transaction."""

from __future__ import annotations

from rugguard.analyzer.base_analyzer import AnalyzerContext, BaseAnalyzer
from rugguard.analyzer.signatures import HIGH_RISK_SELECTORS, RULES_BY_KEY, RULES_BY_SELECTOR
from rugguard.core.types import Finding, RiskType

# Operations that turn a fresh owner into a rugpull
SENSITIVE_AFTER_OWNERSHIP = ("MINT", "REMOVE_LIQUIDITY", "SET_FEE")


class CallPatternAnalyzer(BaseAnalyzer):
    """Correlate selectors across the whole call list.

    Matching is by selector only, independent of any parameter threshold.
    """

    ANALYZER_ID = "call-patterns"
    NAME = "Cross-Call Patterns"
    DESCRIPTION = (
        "Flags an ownership transfer combined with minting, liquidity removal "
        "or fee changes, and transactions with more than one high-risk call."
    )

    def analyze(self, context: AnalyzerContext) -> list[Finding]:
        findings: list[Finding] = []
        selectors = context.selectors

        ownership_selector = RULES_BY_KEY["OWNERSHIP_TRANSFER"].selector
        sensitive = {RULES_BY_KEY[key].selector for key in SENSITIVE_AFTER_OWNERSHIP}

        if ownership_selector in selectors:
            seen = [RULES_BY_SELECTOR[s].key for s in selectors if s in sensitive]
            if seen:
                findings.append(self._make_finding(
                    risk_type=RiskType.SUSPICIOUS_PATTERN.value,
                    description=(
                        "Ownership transfer followed by sensitive operations - "
                        "high rugpull risk"
                    ),
                    details={"operations": sorted(set(seen))},
                ))

        high_risk_ops = [s for s in selectors if s in HIGH_RISK_SELECTORS]
        if len(high_risk_ops) > 1:
            findings.append(self._make_finding(
                risk_type=RiskType.MULTIPLE_HIGH_RISK_OPS.value,
                description=(
                    f"Multiple high-risk operations ({len(high_risk_ops)}) "
                    "in single transaction"
                ),
                details={
                    "operationCount": len(high_risk_ops),
                    "operations": high_risk_ops,
                },
            ))

        return findings
