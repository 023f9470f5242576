from string import ascii_letters, digits
from urllib.parse import urlsplit

from pydantic import BaseModel, Field, field_validator

from shortener_app.storage.store import DELIMITER

ALLOWED_SCHEMES = ("http", "https")

# Unreserved and reserved URI characters plus "%" for escapes. Starlette's
# redirect quoting leaves all of these untouched, so Location == stored URL.
URI_CHARACTERS = frozenset(ascii_letters + digits + "-._~:/?#[]@!$&'()*+,;=%")


class URLCreate(BaseModel):
    """Raw long URL posted to /new.

    The URL is stored verbatim (no normalization), so Location headers
    match exactly what the client sent. Characters that would need
    percent-encoding are rejected instead of rewritten.
    """
    long_url: str = Field(..., description="The original URL to be shortened")

    @field_validator("long_url", mode="before")
    @classmethod
    def strip_whitespace(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("long_url")
    @classmethod
    def validate_long_url(cls, value: str) -> str:
        if not value:
            raise ValueError("URL must not be empty")
        if "\n" in value or "\r" in value:
            raise ValueError("URL must be a single line")
        if DELIMITER in value:
            raise ValueError("URL must not contain spaces")
        invalid = sorted(set(value) - URI_CHARACTERS)
        if invalid:
            raise ValueError(
                f"URL contains characters that must be percent-encoded: {''.join(invalid)!r}"
            )
        if "://" not in value:
            raise ValueError("URL must include a scheme, e.g. https://")

        scheme, _, _ = value.partition("://")
        if scheme.lower() not in ALLOWED_SCHEMES:
            raise ValueError("Only http and https URLs can be shortened")
        try:
            hostname = urlsplit(value).hostname
        except ValueError:
            raise ValueError("URL is malformed")
        if not hostname:
            raise ValueError("URL must include a host")
        return value
