"""
============================================================================
ENDPOINT PINGER - SHARED HTTP CLIENT & LOGGING TRANSPORT
============================================================================
One httpx.AsyncClient is shared by every probe. Its connection pool is
safe for concurrent use, so probes never need a lock.

LoggingTransport is a decorator around the real transport. When enabled
it writes raw request / response dumps (start line + headers, no body) at
debug level. It never changes what is sent or received: errors from the
wrapped transport are logged and re-raised untouched.

License: MIT
============================================================================
"""

from typing import Optional

import httpx

from config.constants import Defaults
from config.models import RunConfig
from utils.logger import get_logger


# ============================================================================
# DUMP HELPERS
# ============================================================================

def dump_request(request: httpx.Request) -> str:
    """Render a request the way it goes on the wire, without the body."""
    target = request.url.raw_path.decode("ascii", errors="replace")
    lines = [f"{request.method} {target} HTTP/1.1"]
    lines.extend(
        f"{name}: {value}" for name, value in request.headers.multi_items()
    )
    return "\r\n".join(lines) + "\r\n"


def dump_response(response: httpx.Response) -> str:
    """Render a response start line and headers, without the body."""
    lines = [
        f"{response.http_version} {response.status_code} {response.reason_phrase}"
    ]
    lines.extend(
        f"{name}: {value}" for name, value in response.headers.multi_items()
    )
    return "\r\n".join(lines) + "\r\n"


# ============================================================================
# LOGGING TRANSPORT
# ============================================================================

class LoggingTransport(httpx.AsyncBaseTransport):
    """
    Transport decorator that traces requests and responses.

    Attributes
    ----------
    enabled : bool
        When False the transport is a pure pass-through.
    """

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        enabled: bool = False,
        logger=None,
    ):
        self._transport = transport or httpx.AsyncHTTPTransport()
        self.enabled = enabled
        self._logger = logger or get_logger("HTTP")

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        if self.enabled:
            self._logger.debug(f"[HTTP Request]\n{dump_request(request)}")

        try:
            response = await self._transport.handle_async_request(request)
        except Exception as e:
            if self.enabled:
                self._logger.debug(
                    f"[HTTP Error] {request.method} {request.url}: {e!r}"
                )
            raise

        if self.enabled:
            self._logger.debug(f"[HTTP Response]\n{dump_response(response)}")

        return response

    async def aclose(self) -> None:
        await self._transport.aclose()


# ============================================================================
# CLIENT FACTORY
# ============================================================================

def build_http_client(
    config: RunConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    logger=None,
) -> httpx.AsyncClient:
    """
    Create the shared client for all probes.

    Parameters
    ----------
    config : RunConfig
        Supplies the timeout (0 disables it) and the HTTP logging flag.
    transport : httpx.AsyncBaseTransport, optional
        Inner transport; defaults to a pooled AsyncHTTPTransport.
    """
    return httpx.AsyncClient(
        timeout=httpx.Timeout(config.timeout),
        transport=LoggingTransport(
            transport,
            enabled=config.http_logging_enabled,
            logger=logger,
        ),
        follow_redirects=True,
        max_redirects=Defaults.MAX_REDIRECTS,
    )
