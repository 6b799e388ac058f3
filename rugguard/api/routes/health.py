"""Health check endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from rugguard import __version__
from rugguard.analyzer.detector import RugpullDetector
from rugguard.analyzer.signatures import SIGNATURE_RULES
from rugguard.api.routes.detect import get_detector

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check() -> dict:
    """Quick liveness probe."""
    return {"status": "healthy", "service": "rugguard-detector", "version": __version__}


@router.get("/health/ready")
async def readiness_check(detector: RugpullDetector = Depends(get_detector)) -> dict:
    """Readiness probe — the rule table and analyzers are loaded."""
    checks = {
        "signature_rules": {"status": "up" if SIGNATURE_RULES else "down", "count": len(SIGNATURE_RULES)},
        "analyzers": {"status": "up" if detector.analyzer_ids else "down", "ids": detector.analyzer_ids},
    }
    overall = all(c["status"] == "up" for c in checks.values())
    return {
        "status": "healthy" if overall else "degraded",
        "service": "rugguard-detector",
        "checks": checks,
    }
