"""HTTP transports for the prediction endpoint.

Two interchangeable transports post a payload to ``{api_base}/predict``
and return the decoded JSON body:

    AiohttpTransport   native asyncio client (default)
    RequestsTransport  pooled requests.Session, run in the loop's executor

Usage:
    import asyncio
    from betrisk.client.transport import AiohttpTransport

    async def main():
        transport = AiohttpTransport("http://localhost:8000")
        body = await transport.predict({"Bet": 10.0, ...})

    asyncio.run(main())
"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional

import aiohttp
import requests
from requests.adapters import HTTPAdapter

from betrisk.constants import JSON_HEADERS, PREDICT_PATH
from betrisk.exceptions import DecodeError, TransportError

logger = logging.getLogger(__name__)


def _predict_url(api_base: str) -> str:
    return f"{api_base.rstrip('/')}{PREDICT_PATH}"


class PredictTransport:
    """Interface for posting a payload to the prediction endpoint."""

    async def predict(self, payload: Dict[str, Any]) -> Any:
        raise NotImplementedError

    def close(self) -> None:
        """Release pooled connections. Nothing to do by default."""


class AiohttpTransport(PredictTransport):
    """
    Async transport built on aiohttp.

    A session is opened per request. Without a configured timeout the
    aiohttp default applies.
    """

    def __init__(self, api_base: str, timeout: Optional[float] = None):
        self.api_base = api_base
        self.url = _predict_url(api_base)
        self.timeout = timeout

    def _client_timeout(self) -> Optional[aiohttp.ClientTimeout]:
        if self.timeout is None:
            return None
        return aiohttp.ClientTimeout(total=self.timeout)

    async def predict(self, payload: Dict[str, Any]) -> Any:
        """
        POST the payload and return the decoded JSON body.

        Raises:
            TransportError: Network failure, timeout or non-2xx status
            DecodeError: 2xx response whose body is not JSON
        """
        session_kwargs = {}
        client_timeout = self._client_timeout()
        if client_timeout is not None:
            session_kwargs["timeout"] = client_timeout

        try:
            async with aiohttp.ClientSession(**session_kwargs) as session:
                async with session.post(
                    self.url,
                    data=json.dumps(payload),
                    headers=JSON_HEADERS,
                ) as response:
                    if not 200 <= response.status < 300:
                        logger.warning("Predict API error: %s", response.status)
                        raise TransportError("unexpected status", status_code=response.status)
                    raw = await response.read()
        except asyncio.TimeoutError as e:
            raise TransportError("request timed out", original_error=e)
        except aiohttp.ClientError as e:
            raise TransportError("network error", original_error=e)

        try:
            return json.loads(raw)
        except ValueError:
            # UnicodeDecodeError is a ValueError
            raise DecodeError("body is not valid JSON", body=raw)


class RequestsTransport(PredictTransport):
    """
    Transport built on a pooled requests.Session.

    The blocking call runs in the event loop's default executor so the
    controller still sees a single awaitable suspension point.
    """

    def __init__(self, api_base: str, timeout: Optional[float] = None):
        self.api_base = api_base
        self.url = _predict_url(api_base)
        self.timeout = timeout

        self._session = requests.Session()
        adapter = HTTPAdapter(
            pool_connections=2,
            pool_maxsize=2,
            max_retries=0  # No automatic retries
        )
        self._session.mount('https://', adapter)
        self._session.mount('http://', adapter)

    @property
    def session(self) -> requests.Session:
        return self._session

    def _post(self, payload: Dict[str, Any]) -> Any:
        try:
            response = self._session.post(
                self.url,
                data=json.dumps(payload),
                headers=JSON_HEADERS,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise TransportError("request timed out", original_error=e)
        except requests.exceptions.ConnectionError as e:
            raise TransportError("connection failed", original_error=e)
        except requests.exceptions.RequestException as e:
            raise TransportError("request failed", original_error=e)

        if not 200 <= response.status_code < 300:
            logger.warning("Predict API error: %s", response.status_code)
            raise TransportError("unexpected status", status_code=response.status_code)

        try:
            return response.json()
        except ValueError:
            raise DecodeError("body is not valid JSON", body=response.text)

    async def predict(self, payload: Dict[str, Any]) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._post, payload)

    def close(self) -> None:
        self._session.close()


def build_transport(config) -> PredictTransport:
    """Create the transport named by ``config.transport``."""
    if config.transport == "requests":
        return RequestsTransport(config.api_base, timeout=config.request_timeout)
    return AiohttpTransport(config.api_base, timeout=config.request_timeout)
