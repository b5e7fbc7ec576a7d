import asyncio
import logging

import aiohttp
from yarl import URL

from .errors import FetchError
from .utils import is_valid_header_value, is_valid_method

logger = logging.getLogger(__name__)


def _parse_url(addr: str) -> URL:
    try:
        url = URL(addr)
    except (ValueError, TypeError) as e:
        raise FetchError(f'parse "{addr}": {e}') from e
    if not url.scheme:
        raise FetchError(f'parse "{addr}": missing protocol scheme')
    if not url.host:
        raise FetchError(f'parse "{addr}": missing host')
    return url


def _release(resp: aiohttp.ClientResponse, addr: str) -> None:
    # A failed release only affects this attempt, so it is logged, not raised.
    try:
        resp.close()
    except Exception as e:
        logger.error(f"Error releasing response body for {addr}: {e}")


async def fetch_url(addr: str, method: str = "GET", host: str = "") -> str:
    """
    Issue one request and return "<status> - <body>".

    TLS certificates are never verified. A non-empty `host` is sent as the
    Host header while the connection still goes to the URL's own host/port.
    The body is only read for a 200; any other status reports an empty body.
    Every failure is raised as a FetchError.
    """
    url = _parse_url(addr)
    method = method or "GET"
    if not is_valid_method(method):
        raise FetchError(f'net/http: invalid method "{method}"')
    if host and not is_valid_header_value(host):
        raise FetchError(f"net/http: invalid Host header {host!r}")

    headers = {"Host": host} if host else None

    # Fresh connector per call: no pooling across attempts.
    connector = aiohttp.TCPConnector(ssl=False)
    try:
        async with aiohttp.ClientSession(connector=connector) as session:
            resp = await session.request(method, url, headers=headers)
            try:
                body = b""
                if resp.status == 200:
                    body = await resp.read()
                status = resp.status
            finally:
                _release(resp, addr)
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
        # ValueError: aiohttp refuses header values such as a Host with CR/LF.
        reason = str(e) or e.__class__.__name__
        logger.debug(f"{method} {addr} failed: {reason}")
        raise FetchError(f"{method} {addr}: {reason}") from e

    logger.debug(f"Fetched {addr}: status={status}, size={len(body)} bytes")
    return f"{status} - {body.decode('utf-8', errors='surrogateescape')}"
