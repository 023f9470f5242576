from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import RedirectResponse
from starlette.convertors import Convertor, register_url_convertor

from shortener_app.services.url_service import URLService
from shortener_app.dependencies import get_url_service


class AliasConvertor(Convertor):
    """Path segment made only of alias characters.

    Dotted names such as `index.html` do not match, so they fall through
    to the static file mount.
    """
    regex = "[A-Za-z0-9]+"

    def convert(self, value: str) -> str:
        return value

    def to_string(self, value: str) -> str:
        return value


# Must be registered before the route below is declared
register_url_convertor("alias", AliasConvertor())

router = APIRouter(tags=["redirect"])


@router.get("/{short_code:alias}")
async def redirect_to_long_url(
    short_code: str,
    url_service: URLService = Depends(get_url_service)
):
    """
    Redirect to the original URL.

    Aliases are case-sensitive.
    """
    long_url = await url_service.get_long_url_for_redirect(short_code)

    if not long_url:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Short URL not found"
        )

    return RedirectResponse(url=long_url, status_code=status.HTTP_302_FOUND)
