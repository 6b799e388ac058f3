"""Balance change analysis — accounts drained within the transaction."""

from __future__ import annotations

from rugguard.analyzer.base_analyzer import AnalyzerContext, BaseAnalyzer
from rugguard.core.types import Finding, RiskType
from rugguard.core.units import format_units


class BalanceChangeAnalyzer(BaseAnalyzer):
    """Compare pre and post balances of every pre-state address.

    A missing post entry counts as a zero balance. The decrease is flagged
    when it exceeds ``balance_decrease_threshold_pct`` percent of the
    account's own pre balance.
    """

    ANALYZER_ID = "balance-change"
    NAME = "Large Balance Decrease"
    DESCRIPTION = "Flags accounts losing most of their balance in one transaction."

    def analyze(self, context: AnalyzerContext) -> list[Finding]:
        findings: list[Finding] = []
        threshold_pct = context.settings.balance_decrease_threshold_pct
        decimals = context.settings.token_decimals

        for address, account in context.trace.pre.items():
            pre_balance = context.to_base_units(account)
            post_balance = context.to_base_units(context.trace.post.get(address))

            if pre_balance <= post_balance:
                continue

            decrease = pre_balance - post_balance
            if decrease * 100 <= pre_balance * threshold_pct:
                continue

            findings.append(self._make_finding(
                risk_type=RiskType.LARGE_BALANCE_DECREASE.value,
                description="Large balance decrease detected - possible rugpull in progress",
                details={
                    "address": address,
                    "preBalance": format_units(pre_balance, decimals),
                    "postBalance": format_units(post_balance, decimals),
                    "decrease": format_units(decrease, decimals),
                    "percentage": decrease * 100 // pre_balance,
                },
            ))

        return findings
