"""
============================================================================
ENDPOINT PINGER - PROBE EXECUTOR
============================================================================
Performs ONE request against ONE endpoint and reports what happened.

    build request ─┬─ fails ──────────────► log, REQUEST_ERROR
                   └─ send ─┬─ fails ─────► log, TRANSPORT_ERROR
                            └─ response ──► log status + duration, SUCCESS
                                            (body released on every path)

A probe never retries, never raises and never judges the status code:
a 503 is a successful probe that observed a 503. The shared client's
timeout bounds the whole exchange, redirects included; there is no other
cancellation.

License: MIT
============================================================================
"""

import asyncio
import re
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import httpx

from config.constants import Defaults, Headers
from config.models import Endpoint
from utils.helpers import TimeHelper
from utils.logger import get_logger


# RFC 7230 token: what a method name may consist of
_METHOD_TOKEN = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")


# ============================================================================
# PROBE RESULT
# ============================================================================

class ProbeOutcome(str, Enum):
    """How a single probe ended."""
    SUCCESS = "success"
    REQUEST_ERROR = "request_error"
    TRANSPORT_ERROR = "transport_error"


@dataclass(frozen=True)
class ProbeResult:
    """
    Immutable value object describing one probe invocation.

    Attributes
    ----------
    endpoint_name : str
    method : str
        The method actually sent (empty config method means GET).
    url : str
    outcome : ProbeOutcome
    status_code : Optional[int]
        Set only for SUCCESS.
    status_text : Optional[str]
        e.g. "200 OK"; set only for SUCCESS.
    duration : Optional[float]
        Seconds from start to response headers; set only for SUCCESS.
    error : Optional[str]
        Failure description for the two error outcomes.
    """
    endpoint_name: str
    method: str
    url: str
    outcome: ProbeOutcome
    status_code: Optional[int] = None
    status_text: Optional[str] = None
    duration: Optional[float] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is ProbeOutcome.SUCCESS


# ============================================================================
# PROBE EXECUTOR
# ============================================================================

class ProbeExecutor:
    """
    Executes probes through a shared httpx.AsyncClient.

    The logger is injected so tests can capture output; it defaults to
    the "Probe" component logger.
    """

    def __init__(self, logger=None):
        self._logger = logger or get_logger("Probe")

    async def execute(
        self,
        client: httpx.AsyncClient,
        endpoint: Endpoint,
        api_key_header_name: str,
        api_key: str,
        user_agent: str,
    ) -> ProbeResult:
        """
        Probe *endpoint* once.

        Parameters
        ----------
        client : httpx.AsyncClient
            Shared client; enforces the timeout and optional HTTP tracing.
        endpoint : Endpoint
        api_key_header_name : str
            Header carrying the key. Must be non-empty whenever *api_key*
            is set; if it is empty the key is not sent.
        api_key : str
            Sent only when non-empty.
        user_agent : str
            Replaces the client default only when non-empty.

        Returns
        -------
        ProbeResult
        """
        start = time.perf_counter()
        method = (endpoint.method or Defaults.HTTP_METHOD).upper()

        try:
            request = self._build_request(
                client, method, endpoint.url,
                api_key_header_name, api_key, user_agent,
            )
        except (httpx.InvalidURL, ValueError, TypeError) as e:
            self._logger.error(f"[{endpoint.name}] Failed to create request: {e}")
            return ProbeResult(
                endpoint_name=endpoint.name,
                method=method,
                url=endpoint.url,
                outcome=ProbeOutcome.REQUEST_ERROR,
                error=str(e),
            )

        timeout = self._total_timeout(client)
        try:
            response = await asyncio.wait_for(
                client.send(request, stream=True), timeout=timeout
            )
        except asyncio.TimeoutError:
            return self._transport_failure(
                endpoint,
                method,
                httpx.TimeoutException(
                    f"Client timeout of {timeout:g}s exceeded", request=request
                ),
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return self._transport_failure(endpoint, method, e)
        except Exception as e:
            return self._transport_failure(endpoint, method, e, unexpected=True)

        try:
            duration = time.perf_counter() - start
            status_text = f"{response.status_code} {response.reason_phrase}".strip()

            self._logger.info(
                f"[{endpoint.name:<{Defaults.NAME_COLUMN_WIDTH}}] "
                f"{method:<{Defaults.METHOD_COLUMN_WIDTH}} "
                f"Status: {status_text:<{Defaults.STATUS_COLUMN_WIDTH}} "
                f"Duration: {TimeHelper.format_duration(duration)}"
            )

            return ProbeResult(
                endpoint_name=endpoint.name,
                method=method,
                url=endpoint.url,
                outcome=ProbeOutcome.SUCCESS,
                status_code=response.status_code,
                status_text=status_text,
                duration=duration,
            )
        finally:
            await self._release(response, endpoint)

    # ------------------------------------------------------------------
    # INTERNALS
    # ------------------------------------------------------------------

    @staticmethod
    def _total_timeout(client: httpx.AsyncClient) -> Optional[float]:
        """
        Budget for the whole exchange, redirects included.

        httpx only bounds each socket operation, so the client's read
        timeout is reused as the overall limit. None means no limit.
        """
        return client.timeout.read

    @staticmethod
    def _build_request(
        client: httpx.AsyncClient,
        method: str,
        url: str,
        api_key_header_name: str,
        api_key: str,
        user_agent: str,
    ) -> httpx.Request:
        """Build the outgoing request; raises on a malformed method or URL."""
        if not _METHOD_TOKEN.fullmatch(method):
            raise ValueError(f"invalid method {method!r}")

        request = client.build_request(method, url)

        if api_key and api_key_header_name:
            request.headers[api_key_header_name] = api_key

        if user_agent:
            request.headers[Headers.USER_AGENT] = user_agent

        return request

    def _transport_failure(
        self,
        endpoint: Endpoint,
        method: str,
        error: Exception,
        unexpected: bool = False,
    ) -> ProbeResult:
        description = str(error) or type(error).__name__
        if unexpected:
            description = f"unexpected {type(error).__name__}: {description}"
        self._logger.error(f"[{endpoint.name}] Failed with {description}")
        return ProbeResult(
            endpoint_name=endpoint.name,
            method=method,
            url=endpoint.url,
            outcome=ProbeOutcome.TRANSPORT_ERROR,
            error=description,
        )

    async def _release(self, response: httpx.Response, endpoint: Endpoint) -> None:
        """Close the response; a failure here is logged, never raised."""
        try:
            await response.aclose()
        except Exception as e:
            self._logger.warning(
                f"[{endpoint.name}] Failed to close response body: {e}"
            )
