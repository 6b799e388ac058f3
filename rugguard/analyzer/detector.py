"""Rugpull detector — runs every trace analyzer and merges their verdicts.

Pipeline:
  1. Signature matching (known rugpull-capable selectors)
  2. Cross-call pattern correlation
  3. Ownership concentration over pre-state balances
  4. Balance change between pre and post state

Each analyzer runs in isolation: one that raises is recorded as failed and
the others still contribute their findings.
"""

from __future__ import annotations

import logging
import time
from typing import Sequence

from rugguard.analyzer.analyzers import DEFAULT_ANALYZERS
from rugguard.analyzer.base_analyzer import AnalyzerContext, AnalyzerResult, BaseAnalyzer
from rugguard.core.config import Settings, get_settings
from rugguard.core.types import DetectionInfo, DetectionRequest, DetectionResponse, Finding

logger = logging.getLogger(__name__)

NO_RISK_MESSAGE = "No rugpull risks detected"
ERROR_PREFIX = "Error analyzing transaction"


def format_risk_message(findings: list[Finding]) -> str:
    """Format findings for human readability."""
    if not findings:
        return NO_RISK_MESSAGE

    lines = [f"Detected {len(findings)} potential rugpull risks:"]
    lines.extend(
        f"- {f.severity.value} risk [{f.risk_type}]: {f.description}" for f in findings
    )
    return "\n".join(lines)


def format_error_message(failures: list[AnalyzerResult], findings: list[Finding]) -> str:
    """Prefix the findings summary with every analyzer failure."""
    reasons = "; ".join(f"{r.analyzer_id}: {r.error}" for r in failures)
    message = f"{ERROR_PREFIX}: {reasons}"
    if findings:
        message += "\n" + format_risk_message(findings)
    return message


class RugpullDetector:
    """Run the trace analyzers over one detection request."""

    def __init__(
        self,
        analyzers: Sequence[type[BaseAnalyzer]] | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._analyzers = list(analyzers if analyzers is not None else DEFAULT_ANALYZERS)
        self._settings = settings

    @property
    def settings(self) -> Settings:
        return self._settings or get_settings()

    @property
    def analyzer_ids(self) -> list[str]:
        return [a.ANALYZER_ID for a in self._analyzers]

    def run(self, context: AnalyzerContext) -> list[AnalyzerResult]:
        """Run every analyzer against ``context``, isolating failures."""
        results: list[AnalyzerResult] = []

        for analyzer_cls in self._analyzers:
            try:
                findings = analyzer_cls().analyze(context)
            except Exception as e:
                logger.exception(
                    "Analyzer %s failed: %s",
                    analyzer_cls.ANALYZER_ID,
                    e,
                    extra={"analyzer": analyzer_cls.ANALYZER_ID, "tx_hash": context.tx_hash},
                )
                results.append(AnalyzerResult(analyzer_id=analyzer_cls.ANALYZER_ID, error=str(e)))
                continue

            logger.debug(
                "Analyzer %s produced %d finding(s)",
                analyzer_cls.ANALYZER_ID,
                len(findings),
                extra={"analyzer": analyzer_cls.ANALYZER_ID, "tx_hash": context.tx_hash},
            )
            results.append(AnalyzerResult(analyzer_id=analyzer_cls.ANALYZER_ID, findings=findings))

        return results

    def analyze(self, request: DetectionRequest) -> DetectionInfo:
        """Produce the verdict for ``request``.

        ``detected`` holds iff any HIGH finding survived; ``error`` is set when
        any analyzer failed.
        """
        context = AnalyzerContext(
            trace=request.trace,
            settings=self.settings,
            tx_hash=request.hash,
        )
        results = self.run(context)

        findings = [f for r in results for f in r.findings]
        failures = [r for r in results if not r.ok]

        if failures:
            return DetectionInfo.from_findings(
                findings, format_error_message(failures, findings), error=True
            )
        return DetectionInfo.from_findings(findings, format_risk_message(findings))

    def detect(self, request: DetectionRequest) -> DetectionResponse:
        """Analyze ``request`` and wrap the verdict in a platform response.

        Never raises: unexpected errors become an error verdict.
        """
        start = time.perf_counter()
        try:
            info = self.analyze(request)
        except Exception as e:
            logger.exception(
                "Detection failed: %s", e, extra={"tx_hash": request.hash}
            )
            info = DetectionInfo(
                detected=False,
                error=True,
                message=f"{ERROR_PREFIX}: {e}",
            )

        elapsed = (time.perf_counter() - start) * 1000
        logger.info(
            "Analyzed tx on chain %s: detected=%s, %d finding(s) (%.1fms)",
            request.chain_id,
            info.detected,
            len(info.risk_details),
            elapsed,
            extra={
                "chain_id": request.chain_id,
                "tx_hash": request.hash,
                "detected": info.detected,
                "findings": len(info.risk_details),
                "duration_ms": round(elapsed, 1),
            },
        )
        return DetectionResponse.from_request(request, info)


def detect(request: DetectionRequest, settings: Settings | None = None) -> DetectionResponse:
    """Analyze one transaction with the default analyzers."""
    return RugpullDetector(settings=settings).detect(request)
