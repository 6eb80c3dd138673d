"""Health check endpoints."""

from fastapi import APIRouter, HTTPException, Request
from starlette import status

from schemas import HealthResponse, ReadyResponse

SERVICE_NAME = "mirror-redirect"

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="healthy", service=SERVICE_NAME)


@router.get(
    "/ready",
    response_model=ReadyResponse,
    responses={
        503: {
            "description": "Service unavailable - mirror rules failed to load",
            "content": {
                "application/json": {
                    "example": {"detail": "Rules file not found: versions.txt"}
                }
            },
        }
    },
)
async def ready(request: Request) -> ReadyResponse:
    """Readiness endpoint.

    Returns 200 only once the rule table has been loaded.
    """
    rules_error = getattr(request.app.state, "rules_error", None)
    if rules_error:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=rules_error,
        )

    rules = getattr(request.app.state, "rules", None)
    if rules is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Starting",
        )

    return ReadyResponse(status="ready", service=SERVICE_NAME, rule_count=len(rules))
