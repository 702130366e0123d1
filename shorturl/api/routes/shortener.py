from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger

from shorturl.api import schemas
from shorturl.api.dependencies import get_shortener_service
from shorturl.services.exceptions import (
    KeyExhaustionError,
    StorageError,
    ValidationError,
)
from shorturl.services.shortener import ShortenedURLService

router = APIRouter(tags=["shortener"])


@router.post(
    "/",
    response_model=schemas.URLResponse,
    status_code=status.HTTP_200_OK,
    responses={
        400: {"model": schemas.ErrorResponse, "description": "Malformed request body"},
        500: {"model": schemas.ErrorResponse, "description": "Short URL could not be created"}
    }
)
async def get_or_create_short_url(
    url_data: schemas.URLCreateRequest,
    shortener_service: ShortenedURLService = Depends(get_shortener_service),
):
    """Return the short key for a URL, creating it on first request."""
    try:
        original_url = shortener_service.normalize_original_url(url_data.original_url)
        key = await shortener_service.lookup_or_create(original_url)
    except ValidationError as e:
        logger.info("Rejected shorten request", reason=str(e))
        raise HTTPException(status_code=400, detail="Invalid input")
    except KeyExhaustionError as e:
        logger.error("Key allocation failed", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to create short URL")
    except StorageError as e:
        logger.error("Storage failure while shortening", error=str(e.__cause__ or e))
        raise HTTPException(status_code=500, detail="Failed to create short URL")

    return schemas.URLResponse(original_url=original_url, short_url=key)
