"""Dashboard JSON API.

Endpoints:
- GET  /api/metrics: mock chart data (quality, complexity, issues)
- POST /api/analyze: review a pull request
- GET  /healthz
"""

import logging
from collections.abc import AsyncIterator

from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from prreview import __version__
from prreview.analysis.mock import METRIC_TYPES, metric_data
from prreview.analysis.orchestrator import ReviewOrchestrator
from prreview.config import PrReviewConfig, load_config
from prreview.github.client import GitHubClient
from prreview.llm.client import LLMClient

logger = logging.getLogger(__name__)


class AnalyzeRequest(BaseModel):
    """Body of POST /api/analyze."""

    model_config = ConfigDict(populate_by_name=True)

    owner: str = Field(min_length=1)
    repo: str = Field(min_length=1)
    pr_number: int = Field(alias="prNumber", ge=1)


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def get_config(request: Request) -> PrReviewConfig:
    return request.app.state.config


async def get_orchestrator(
    config: PrReviewConfig = Depends(get_config),
) -> AsyncIterator[ReviewOrchestrator]:
    """Per-request orchestrator with its own GitHub connection pool."""
    async with GitHubClient(config.github) as github:
        yield ReviewOrchestrator(github, LLMClient(config.llm), config)


router = APIRouter(prefix="/api")


@router.get("/metrics")
def get_metrics(
    repository_id: str | None = Query(default=None, alias="repositoryId"),
    metric_type: str | None = Query(default=None, alias="type"),
    days: int = Query(default=30, ge=0, le=365),
) -> JSONResponse:
    if not repository_id:
        return _error("Repository ID is required", 400)
    if not metric_type:
        return _error("Metric type is required", 400)
    if metric_type not in METRIC_TYPES:
        return _error("Invalid metric type", 400)

    logger.debug("Serving %s metrics for %s (%d days)", metric_type, repository_id, days)
    return JSONResponse({"data": metric_data(repository_id, metric_type, days)})


@router.post("/analyze")
async def analyze_pull_request(
    payload: AnalyzeRequest,
    orchestrator: ReviewOrchestrator = Depends(get_orchestrator),
) -> dict:
    result = await orchestrator.analyze(payload.owner, payload.repo, payload.pr_number)
    return result.to_dict()


def create_app(config: PrReviewConfig | None = None) -> FastAPI:
    """Build the API application.

    Args:
        config: Configuration (loaded from the standard locations if None)
    """
    app = FastAPI(
        title="PR Review Helper",
        description="Pull request analysis and dashboard metrics.",
        version=__version__,
    )
    app.state.config = config or load_config()
    app.include_router(router)

    @app.get("/healthz", tags=["health"])
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return app
