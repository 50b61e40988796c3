# routebatch/services/signer.py

import base64
import binascii
import hashlib
import hmac
from typing import Optional
from urllib.parse import quote

import httpx

from routebatch.core.errors import InvalidUrlError, SigningError
from routebatch.core.logger import logger
from routebatch.models.credentials import (
    Credentials,
    NormalCredentials,
    PremiumCredentials,
)
from routebatch.models.directions import TaggedUrl
from routebatch.models.query import Query

DOMAIN = "https://maps.googleapis.com"
PATH = "/maps/api/directions/json"

# Characters left as-is in the rendered query; everything else (e.g. the
# "|" between avoid tokens) is percent-encoded before signing, so the
# signed string is byte-for-byte what goes on the wire.
_QUERY_SAFE = "=&,:+%"


def build_tagged_url(query: Query, credentials: Credentials) -> TaggedUrl:
    """
    Render the request URL for `query`, authenticated with `credentials`.
    """
    if isinstance(credentials, NormalCredentials):
        url = build_normal_url(query, credentials.api_key)
    elif isinstance(credentials, PremiumCredentials):
        url = build_premium_url(
            query,
            credentials.client_id,
            credentials.private_key,
            credentials.channel,
        )
    else:
        raise TypeError(f"unsupported credentials type: {type(credentials).__name__}")

    return TaggedUrl(id=query.id, url=url)


def build_normal_url(query: Query, api_key: str) -> str:
    url = f"{DOMAIN}{PATH}?{_encode(query.to_query_string())}&key={_encode(api_key)}"
    return parse_url(url)


def build_premium_url(
    query: Query,
    client_id: str,
    private_key: str,
    channel: Optional[str] = None,
) -> str:
    path_and_query = f"{PATH}?{_encode(query.to_query_string())}&client={_encode(client_id)}"
    if channel:
        path_and_query += f"&channel={_encode(channel)}"

    signature = sign_url(path_and_query, private_key)
    return parse_url(f"{DOMAIN}{path_and_query}&signature={signature}")


def sign_url(path_and_query: str, private_key: str) -> str:
    """
    HMAC-SHA1 signature of `path_and_query`, keyed with the URL-safe base64
    decoded private key, returned as URL-safe base64.
    """
    try:
        decoded_key = base64.b64decode(private_key, altchars=b"-_", validate=True)
    except (binascii.Error, ValueError) as exc:
        raise SigningError("private key is not valid URL-safe base64") from exc

    digest = hmac.new(decoded_key, path_and_query.encode("utf-8"), hashlib.sha1).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii")


def parse_url(url: str) -> str:
    """
    Check that `url` is an absolute http(s) URL; return it unchanged.
    """
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise InvalidUrlError(url) from exc

    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise InvalidUrlError(url)

    logger.debug("Built request URL for {}", parsed.path)
    return url


def _encode(text: str) -> str:
    return quote(text, safe=_QUERY_SAFE)
