"""Ownership concentration — one holder dominating the pre-state balances."""

from __future__ import annotations

from rugguard.analyzer.base_analyzer import AnalyzerContext, BaseAnalyzer
from rugguard.core.types import Finding, RiskType
from rugguard.core.units import format_units


class OwnershipConcentrationAnalyzer(BaseAnalyzer):
    """Approximate total supply as the sum of pre-state balances and flag a
    single holder above the concentration threshold."""

    ANALYZER_ID = "ownership-concentration"
    NAME = "Ownership Concentration"
    DESCRIPTION = "Flags a single address holding more than the threshold share of tokens."

    def analyze(self, context: AnalyzerContext) -> list[Finding]:
        total_supply = 0
        largest_balance = 0
        largest_holder = ""

        for address, account in context.trace.pre.items():
            balance = context.to_base_units(account)
            total_supply += balance
            if balance > largest_balance:
                largest_balance = balance
                largest_holder = address

        if total_supply == 0:
            return []

        # Whole percent, floored: 50.5% reads as 50 and stays under a 50 threshold.
        concentration = largest_balance * 100 // total_supply
        if concentration <= context.settings.concentration_threshold_pct:
            return []

        decimals = context.settings.token_decimals
        return [self._make_finding(
            risk_type=RiskType.OWNERSHIP_CONCENTRATION.value,
            description=f"Single address holds {concentration}% of tokens - high rugpull risk",
            details={
                "address": largest_holder,
                "percentage": concentration,
                "balance": format_units(largest_balance, decimals),
                "totalSupply": format_units(total_supply, decimals),
            },
        )]
