"""
Daily quote from the hitokoto API.

The check-in e-mail uses fallback_quote() whenever fetch_quote() fails.
"""
from __future__ import annotations

import logging
from typing import Optional

import httpx

from areuok.core.config import settings
from areuok.core.errors import RemoteError
from areuok.schemas.checkin import Quote

logger = logging.getLogger(__name__)


def fallback_quote() -> Quote:
    return Quote(text="Today's check-in is done. Keep it up!", author="areuok")


def fetch_quote(client: Optional[httpx.Client] = None) -> Quote:
    """GET QUOTE_API_URL and map {hitokoto, from, from_who} to a Quote."""
    own_client = client is None
    client = client or httpx.Client(timeout=settings.QUOTE_API_TIMEOUT)
    url = settings.QUOTE_API_URL
    try:
        response = client.get(url)
        response.raise_for_status()
        data = response.json()
        text = data["hitokoto"]
        author = data.get("from_who") or data["from"]
    except httpx.HTTPStatusError as exc:
        raise RemoteError(
            f"Quote API returned {exc.response.status_code}",
            endpoint=url,
            status_code=exc.response.status_code,
        ) from exc
    except httpx.HTTPError as exc:
        raise RemoteError(f"Quote API request failed: {exc}", endpoint=url) from exc
    except (ValueError, KeyError, TypeError) as exc:
        raise RemoteError(f"Failed to parse quote response: {exc}", endpoint=url) from exc
    finally:
        if own_client:
            client.close()
    return Quote(text=text, author=author)


def quote_or_fallback(client: Optional[httpx.Client] = None) -> Quote:
    try:
        return fetch_quote(client)
    except RemoteError as exc:
        logger.warning("Using fallback quote: %s", exc.message)
        return fallback_quote()
