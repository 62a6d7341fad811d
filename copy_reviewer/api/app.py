import logging
from typing import Optional

from fastapi import FastAPI, HTTPException

from copy_reviewer.config import Settings, load_environment
from copy_reviewer.errors import (
    AuthError,
    CopyReviewError,
    NotFoundError,
    OverloadError,
    ProviderTimeoutError,
    RateLimitError,
)
from copy_reviewer.models import CombinedResult, CopyRequest, ImproveRequest, ImproveResult, ReviewResult
from copy_reviewer.service import CopyReviewService


load_environment()


logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("copy_review_api")


app = FastAPI(title="Copy Review API")
service: Optional[CopyReviewService] = None

ERROR_STATUS = {
    AuthError: 401,
    NotFoundError: 404,
    RateLimitError: 429,
    OverloadError: 503,
    ProviderTimeoutError: 504,
}


def build_service() -> CopyReviewService:
    return CopyReviewService(Settings.from_env())


@app.on_event("startup")
def _startup() -> None:
    global service
    service = build_service()
    logger.info("Copy review service ready | provider=%s", service.settings.provider)


@app.on_event("shutdown")
def _shutdown() -> None:
    if service is not None:
        service.close()


def _require_service() -> CopyReviewService:
    if service is None:
        raise HTTPException(status_code=500, detail="Service not ready")
    return service


def _failure(exc: CopyReviewError, error: str) -> HTTPException:
    status = next((code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls)), 500)
    return HTTPException(status_code=status, detail={"error": error, "message": str(exc)})


@app.get("/api/health")
def health():
    svc = _require_service()
    return {"status": "ok", "provider": svc.settings.provider}


@app.post("/api/review-copy", response_model=ReviewResult, response_model_exclude_none=True)
def review_copy(payload: CopyRequest):
    svc = _require_service()
    try:
        return svc.review_copy(payload.subject_line, payload.body, payload.model)
    except CopyReviewError as exc:
        logger.exception("Error in review-copy endpoint")
        raise _failure(exc, "Review failed") from exc


@app.post("/api/improve", response_model=ImproveResult, response_model_exclude_none=True)
def improve(payload: ImproveRequest):
    svc = _require_service()
    try:
        return svc.improve_copy(payload.subject_line, payload.body, payload.review, payload.model)
    except CopyReviewError as exc:
        logger.exception("Error in improve endpoint")
        raise _failure(exc, "Improvement failed") from exc


@app.post("/api/analyze-and-improve", response_model=CombinedResult, response_model_exclude_none=True)
def analyze_and_improve(payload: CopyRequest):
    svc = _require_service()
    try:
        return svc.analyze_and_improve(payload.subject_line, payload.body, payload.model)
    except CopyReviewError as exc:
        logger.exception("Error in analyze-and-improve endpoint")
        raise HTTPException(
            status_code=500,
            detail={
                "error": "Analysis failed",
                "message": "Failed to analyze and improve the copy. Please try again.",
            },
        ) from exc
