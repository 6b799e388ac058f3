"""Trace analyzers, in the order the detector runs them:

  - signature-match:          known rugpull-capable function selectors
  - call-patterns:            cross-call correlation within the transaction
  - ownership-concentration:  single holder above the supply threshold
  - balance-change:           accounts drained between pre and post state
"""

from rugguard.analyzer.analyzers.signature_match import SignatureMatchAnalyzer
from rugguard.analyzer.analyzers.call_patterns import CallPatternAnalyzer
from rugguard.analyzer.analyzers.concentration import OwnershipConcentrationAnalyzer
from rugguard.analyzer.analyzers.balance_change import BalanceChangeAnalyzer

DEFAULT_ANALYZERS: list[type] = [
    SignatureMatchAnalyzer,
    CallPatternAnalyzer,
    OwnershipConcentrationAnalyzer,
    BalanceChangeAnalyzer,
]

__all__ = [
    "DEFAULT_ANALYZERS",
    "SignatureMatchAnalyzer",
    "CallPatternAnalyzer",
    "OwnershipConcentrationAnalyzer",
    "BalanceChangeAnalyzer",
]
