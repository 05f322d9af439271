"""
ethdo Beacon Node Connection

One HTTP connection to a beacon node's REST API, opened per command and
closed when the command finishes. Requests are bounded by the configured
timeout and never retried.
"""

import json
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

import httpx

from ..exceptions import BeaconConnectionError, NetworkError

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text.strip()
    if isinstance(body, dict) and 'message' in body:
        return str(body['message'])
    return response.text.strip()


@contextmanager
def parsing_response(path: str) -> Iterator[None]:
    """Turn a response missing the expected fields into a NetworkError."""
    try:
        yield
    except (KeyError, IndexError, TypeError, ValueError, AttributeError):
        raise NetworkError(f"unexpected response from beacon node for {path}") from None


class BeaconConnection:
    """
    Beacon node connection.

    Usage:
        with connect(config) as conn:
            syncing = fetch_syncing(conn)
    """

    def __init__(self, endpoint: str, timeout: float, transport: Optional[httpx.BaseTransport] = None):
        self.endpoint = endpoint
        self.timeout = timeout
        self._client = httpx.Client(
            base_url=endpoint,
            timeout=timeout,
            transport=transport,
            headers={'Accept': 'application/json'},
        )

    def __enter__(self) -> 'BeaconConnection':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _decode(self, path: str, payload: bytes) -> Any:
        try:
            return json.loads(payload)
        except ValueError as e:
            raise NetworkError(f"invalid response from beacon node for {path}: {e}") from e

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        GET path and return the decoded JSON body.

        Raises:
            NetworkError: On transport failure, non-2xx status or invalid JSON.
        """
        logger.debug("GET %s%s", self.endpoint, path)
        try:
            response = self._client.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise NetworkError(
                f"beacon node returned {e.response.status_code} for {path}: {_error_message(e.response)}"
            ) from e
        except httpx.RequestError as e:
            raise NetworkError(f"failed to contact beacon node at {self.endpoint}: {e}") from e
        return self._decode(path, response.content)

    def post(self, path: str, body: Any) -> Any:
        """POST a JSON body to path and return the decoded JSON response (None if empty)."""
        logger.debug("POST %s%s", self.endpoint, path)
        try:
            response = self._client.post(path, json=body)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise NetworkError(
                f"beacon node returned {e.response.status_code} for {path}: {_error_message(e.response)}"
            ) from e
        except httpx.RequestError as e:
            raise NetworkError(f"failed to contact beacon node at {self.endpoint}: {e}") from e
        if not response.content:
            return None
        return self._decode(path, response.content)

    def exchange(self, path: str, message: Any) -> Any:
        """
        Send one message on a streaming request and read exactly one response.

        Raises:
            NetworkError: If the stream cannot be opened or the node rejects the message.
        """
        logger.debug("STREAM %s%s", self.endpoint, path)
        try:
            with self._client.stream('POST', path, json=message) as response:
                payload = response.read()
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise NetworkError(
                f"failed to send message to beacon node: {e.response.status_code} {_error_message(e.response)}"
            ) from e
        except httpx.RequestError as e:
            raise NetworkError(f"failed to contact beacon node: {e}") from e
        return self._decode(path, payload)


def _normalize_endpoint(connection: str) -> str:
    endpoint = connection.strip()
    if '://' not in endpoint:
        endpoint = f"http://{endpoint}"
    try:
        url = httpx.URL(endpoint)
    except httpx.InvalidURL as e:
        raise BeaconConnectionError(f"invalid connection {connection!r}: {e}") from e
    if url.scheme not in ('http', 'https') or not url.host:
        raise BeaconConnectionError(f"invalid connection {connection!r}")
    return str(url).rstrip('/')


def connect(config, transport: Optional[httpx.BaseTransport] = None) -> BeaconConnection:
    """
    Connect to the beacon node named in the configuration.

    Args:
        config: EthdoConfig supplying ``connection`` and ``timeout``
        transport: Optional httpx transport (tests use httpx.MockTransport)

    Raises:
        BeaconConnectionError: If no connection is configured or it is not a valid endpoint.
    """
    if not config.connection:
        raise BeaconConnectionError("no connection")
    endpoint = _normalize_endpoint(config.connection)
    logger.debug("Connecting to %s", endpoint)
    return BeaconConnection(endpoint, config.timeout, transport=transport)
