"""URL redirection endpoint."""

from fastapi import APIRouter, Depends, HTTPException, status
from starlette.responses import RedirectResponse
from loguru import logger

from shorturl.api import schemas
from shorturl.api.dependencies import get_shortener_service
from shorturl.services.shortener import ShortenedURLService
from shorturl.services.exceptions import NotFoundError, StorageError

# Create router with tags
router = APIRouter(tags=["redirect"])


@router.get(
    "/{key}",
    response_class=RedirectResponse,
    status_code=status.HTTP_301_MOVED_PERMANENTLY,
    responses={
        404: {"model": schemas.ErrorResponse, "description": "Short URL not found"},
        500: {"model": schemas.ErrorResponse, "description": "Original URL could not be retrieved"}
    }
)
async def redirect_to_original_url(
    key: str,
    shortener_service: ShortenedURLService = Depends(get_shortener_service),
):
    """Redirect to the original URL stored for the key."""
    try:
        original_url = await shortener_service.resolve_key(key)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Short URL not found")
    except StorageError as e:
        logger.error("Storage failure while resolving key", key=key, error=str(e.__cause__ or e))
        raise HTTPException(status_code=500, detail="Failed to retrieve original URL")

    return RedirectResponse(url=original_url, status_code=status.HTTP_301_MOVED_PERMANENTLY)
