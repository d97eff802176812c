"""Shared HTTP plumbing: async client factory and JSON decoding."""

from typing import Any, Optional

import httpx
import orjson

from ..config.defaults import HttpParams
from ..errors import MalformedResponseError, TransientNetworkError

RATE_LIMIT_STATUS = 429


def create_http_client(params: Optional[HttpParams] = None, **kwargs) -> httpx.AsyncClient:
    """Return a long-lived async HTTP client with the shared defaults."""
    params = params or HttpParams()
    return httpx.AsyncClient(
        timeout=params.timeout_seconds,
        headers={
            "Accept": "application/json",
            "User-Agent": params.user_agent,
        },
        **kwargs,
    )


def is_rate_limited(response: httpx.Response) -> bool:
    return response.status_code == RATE_LIMIT_STATUS


def decode_json(response: httpx.Response, source: str) -> Any:
    """Decode a JSON body with orjson, raising MalformedResponseError on garbage."""
    try:
        return orjson.loads(response.content)
    except orjson.JSONDecodeError as e:
        raise MalformedResponseError(
            f"{source} returned invalid JSON", source=source, expected_format="json"
        ) from e


async def get_json(client: httpx.AsyncClient, url: str, source: str, **kwargs) -> Any:
    """
    GET a JSON document for a degradable lookup.

    Raises:
        TransientNetworkError: transport failure or non-2xx status
        MalformedResponseError: body is not JSON
    """
    try:
        response = await client.get(url, **kwargs)
    except httpx.HTTPError as e:
        raise TransientNetworkError(f"{source} request failed: {e}", source=source) from e

    if not response.is_success:
        raise TransientNetworkError(
            f"{source} returned HTTP {response.status_code}",
            source=source,
            status_code=response.status_code,
        )
    return decode_json(response, source)


async def post_json(client: httpx.AsyncClient, url: str, payload: Any, source: str) -> Any:
    """POST an orjson-encoded body and decode the JSON reply."""
    try:
        response = await client.post(
            url,
            content=orjson.dumps(payload),
            headers={"Content-Type": "application/json; charset=utf-8"},
        )
    except httpx.HTTPError as e:
        raise TransientNetworkError(f"{source} request failed: {e}", source=source) from e

    if not response.is_success:
        raise TransientNetworkError(
            f"{source} returned HTTP {response.status_code}",
            source=source,
            status_code=response.status_code,
        )
    return decode_json(response, source)
