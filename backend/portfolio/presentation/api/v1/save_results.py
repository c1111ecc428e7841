"""HTTP translation of store save outcomes shared by the v1 endpoints."""

from fastapi import HTTPException, status

from portfolio.application.schemas import SaveResultResponse
from portfolio.domain.entities import SaveResult


def raise_if_failed(result: SaveResult) -> SaveResultResponse:
    """Return the response payload, or raise 503 carrying it when nothing was persisted."""
    payload = SaveResultResponse.from_result(result)
    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=payload.model_dump(),
        )
    return payload
