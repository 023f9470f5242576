import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from shortener_app.exceptions import StoreError
from shortener_app.schemas.url import URLCreate
from shortener_app.services.url_service import URLService
from shortener_app.dependencies import get_url_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["urls"])


@router.get("/all", response_class=PlainTextResponse)
async def list_urls(url_service: URLService = Depends(get_url_service)):
    """Every stored mapping, one `alias -> long_url` per line"""
    mappings = await url_service.list_urls()
    return "\n".join(f"{m.alias} -> {m.long_url}" for m in mappings)


@router.post("/new", response_class=PlainTextResponse)
async def create_short_url(
    request: Request,
    url_service: URLService = Depends(get_url_service)
):
    """
    Shorten the long URL sent as the raw request body.

    Returns the alias as plain text. Posting a URL that is already stored
    returns its existing alias.
    """
    body = await request.body()
    try:
        url_data = URLCreate(long_url=body.decode("utf-8"))
    except UnicodeDecodeError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Request body must be UTF-8 text"
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=_first_error(e)
        )

    try:
        return await url_service.create_short_url(url_data.long_url)
    except StoreError:
        logger.exception("Failed to store %s", url_data.long_url)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not save the short URL"
        )


def _first_error(error: ValidationError) -> str:
    details = error.errors()
    if not details:
        return "Invalid URL"
    cause = details[0].get("ctx", {}).get("error")
    return str(cause) if cause else details[0]["msg"]
