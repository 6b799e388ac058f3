"""Detection endpoint — the platform posts one trace, gets one verdict."""

from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import APIRouter, Depends

from rugguard.analyzer.detector import RugpullDetector
from rugguard.api.errors import ErrorResponse, TraceTooLargeError
from rugguard.core.config import get_settings
from rugguard.core.types import DetectionRequest, DetectionResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@lru_cache
def get_detector() -> RugpullDetector:
    """Return the shared, stateless detector."""
    return RugpullDetector(settings=get_settings())


@router.post(
    "/detect",
    response_model=DetectionResponse,
    response_model_exclude_none=True,
    responses={
        413: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
def detect_transaction(
    request: DetectionRequest,
    detector: RugpullDetector = Depends(get_detector),
) -> DetectionResponse:
    """Analyze one transaction trace for rugpull heuristics.

    Analysis failures are reported in the verdict (``error: true``) with a
    200 status; only malformed or oversized requests are rejected.
    """
    max_calls = detector.settings.max_trace_calls
    if len(request.trace.calls) > max_calls:
        raise TraceTooLargeError(len(request.trace.calls), max_calls)

    return detector.detect(request)
