"""FastAPI entry point. Exposes message analysis, report persistence,
per-user history, aggregate stats and the rule catalogue.

Classification and persistence are separate calls: clients POST /analyze,
then optionally POST /reports with the verdict they got back."""

import logging
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from vigilantlink import config
from vigilantlink.auth import current_user
from vigilantlink.classifier import classifier
from vigilantlink.models import (
    AnalyzeRequest,
    PatternInfo,
    SaveReportRequest,
    SaveReportResponse,
    ScamReport,
    ScamStats,
    Verdict,
)
from vigilantlink.store import PersistenceError, ReportStore, build_report_store

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=config.SERVICE_NAME,
    description="Rule-based risk classification for UPI payment messages",
    version=config.VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

report_store: ReportStore = build_report_store()


def get_store() -> ReportStore:
    return report_store


@app.on_event("startup")
async def _on_startup() -> None:
    logger.info(
        f"{config.SERVICE_NAME} v{config.VERSION} started | "
        f"rules={len(classifier.catalogue)} | store={type(report_store).__name__}"
    )


@app.exception_handler(RequestValidationError)
async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.error(f"422 VALIDATION ERROR | {request.url.path} | {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content={"detail": exc.errors(), "message": "Invalid request payload."},
    )


@app.get("/")
async def health_check() -> dict:
    return {
        "status": "online",
        "service": config.SERVICE_NAME,
        "version": config.VERSION,
    }


@app.post("/analyze", response_model=Verdict)
async def analyze_message(request: AnalyzeRequest) -> Verdict:
    """Classify a message. No identity needed and nothing is stored."""
    verdict = classifier.classify(request.message)
    logger.info(
        f"ANALYZE  len={len(request.message)}  "
        f"class={verdict.classification.value}  score={verdict.riskScore}  "
        f"patterns={len(verdict.detectedPatterns)}"
    )
    return verdict


@app.post("/reports", response_model=SaveReportResponse, status_code=status.HTTP_201_CREATED)
def save_report(
    request: SaveReportRequest,
    user_id: Optional[str] = Depends(current_user),
    store: ReportStore = Depends(get_store),
) -> SaveReportResponse:
    """Persist a verdict. Callers without a known API key save anonymously."""
    report = ScamReport(
        message=request.message,
        classification=request.classification,
        riskScore=request.riskScore,
        detectedPatterns=request.detectedPatterns,
        userId=user_id,
    )
    try:
        saved = store.save(report)
    except PersistenceError as exc:
        logger.error(f"Report save failed: {exc}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Persistence failed: {exc}",
        )

    return SaveReportResponse(
        id=saved.id,
        reportedAt=saved.reportedAt,
        userId=saved.userId,
    )


@app.get("/reports/me", response_model=List[ScamReport])
def my_reports(
    limit: int = Query(default=config.HISTORY_LIMIT, ge=1, le=100),
    user_id: Optional[str] = Depends(current_user),
    store: ReportStore = Depends(get_store),
) -> List[ScamReport]:
    """Caller's reports, most recent first. Anonymous callers get none."""
    if not user_id:
        return []
    return store.list_by_user(user_id, limit)


@app.get("/stats", response_model=ScamStats)
def recent_stats(
    limit: int = Query(default=config.STATS_WINDOW, ge=1, le=1000),
    store: ReportStore = Depends(get_store),
) -> ScamStats:
    return store.recent_aggregate(limit)


@app.get("/patterns", response_model=List[PatternInfo])
async def list_patterns() -> List[PatternInfo]:
    return [
        PatternInfo(
            pattern=rule.pattern,
            description=rule.description,
            category=rule.category.value,
            weight=rule.weight,
        )
        for rule in classifier.catalogue.rules
    ]


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
