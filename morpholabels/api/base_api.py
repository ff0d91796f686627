import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Literal
import aiohttp
import httpx
from morpholabels.exceptions import (MalformedResponse, ResourceNotFoundError,
                                     ServerResponseError, TransportFailure)

logger = logging.getLogger(__name__)


@dataclass
class ApiConfig:
    """Configuration for API client.

    Attributes:
        server_url: Base URL of the server hosting the ``/services`` endpoints.
        timeout: Request timeout in seconds.
    """
    server_url: str
    timeout: float = 30.0


class BaseApi:
    """Base class for all API endpoint handlers."""

    def __init__(self,
                 config: ApiConfig,
                 client: httpx.Client | None = None) -> None:
        """Initialize the base API handler.

        Args:
            config: API configuration containing base URL and timeout.
            client: Optional HTTP client instance. If None, a new one will be created.
        """
        self.config = config
        self.client = client or self._create_client()

    def _create_client(self) -> httpx.Client:
        """Create and configure HTTP client with timeouts."""
        return httpx.Client(base_url=self.config.server_url,
                            timeout=self.config.timeout)

    def _url(self, endpoint: str) -> str:
        return f"{self.config.server_url.rstrip('/')}/{endpoint.lstrip('/')}"

    def _make_request(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        """Make HTTP request with error handling.

        Args:
            method: HTTP method (GET, POST)
            endpoint: API endpoint path
            **kwargs: Additional arguments for the request

        Returns:
            HTTP response object, with a 2xx status.

        Raises:
            TransportFailure: If the server could not be reached.
            ServerResponseError: If the server answered with a non-2xx status.
        """
        url = self._url(endpoint)
        logger.debug(f'Equivalent curl command: "{self._generate_curl_command({"method": method, "url": url, **kwargs})}"')

        try:
            response = self.client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            logger.error(f"Request error for {method} {endpoint}: {e}")
            raise TransportFailure() from e

        self._check_errors_response(status_code=response.status_code,
                                    reason=response.reason_phrase,
                                    text=response.text,
                                    url=url)
        return response

    def _request_json(self, method: str, endpoint: str, **kwargs) -> Any:
        """Like :meth:`_make_request`, returning the decoded JSON body.

        Raises:
            MalformedResponse: If the body is not JSON.
        """
        response = self._make_request(method, endpoint, **kwargs)
        return self._parse_json(response.text)

    def _generate_curl_command(self, request_args: dict) -> str:
        """
        Generate a curl command for debugging purposes.

        Args:
            request_args (dict): Request arguments dictionary containing method, url, params, json, etc.

        Returns:
            str: Equivalent curl command
        """
        method = request_args.get('method', 'GET').upper()
        url = request_args['url']
        headers = request_args.get('headers') or {}
        data = request_args.get('json') or request_args.get('data')
        params = request_args.get('params')

        curl_command = ['curl']

        # Add method if not GET
        if method != 'GET':
            curl_command.extend(['-X', method])

        # Add headers
        for key, value in headers.items():
            curl_command.extend(['-H', f"'{key}: {value}'"])

        # Add query parameters
        if params:
            param_str = '&'.join([f"{k}={v}" for k, v in params.items()])
            url = f"{url}?{param_str}"
        # Add URL
        curl_command.append(f"'{url}'")

        # Add data
        if data:
            if isinstance(data, (dict, list)):
                curl_command.extend(['-H', "'Content-Type: application/json'"])
                curl_command.extend(['-d', f"'{json.dumps(data)}'"])
            else:
                curl_command.extend(['-d', f"'{data}'"])

        return ' '.join(curl_command)

    @staticmethod
    def _error_message(text: str | None) -> str | None:
        """Message carried in the ``message`` or ``error`` field of a JSON error body, if any."""
        if not text:
            return None
        try:
            error_data = json.loads(text)
        except ValueError:
            return None
        if not isinstance(error_data, dict):
            return None
        for key in ('message', 'error'):
            if isinstance(error_data.get(key), str) and error_data[key]:
                return error_data[key]
        return None

    def _check_errors_response(self,
                               status_code: int,
                               reason: str | None,
                               text: str | None,
                               url: str):
        if 200 <= status_code < 300:
            return

        message = BaseApi._error_message(text) or reason or f'HTTP {status_code}'
        if status_code >= 500 and status_code < 600:
            logger.error(f"Error in request to {url}: {status_code} {message}")
        else:
            logger.info(f"Error response from {url}: {text}")

        if status_code == 404:
            raise ResourceNotFoundError('labels', {'url': url},
                                        message=message,
                                        response_text=text)
        raise ServerResponseError(status_code, message, response_text=text)

    @staticmethod
    def _parse_json(text: str) -> Any:
        try:
            return json.loads(text)
        except ValueError as e:
            logger.error(f"Error parsing the response as JSON: {e}. Response starts with: {text[:100]!r}")
            raise MalformedResponse() from e

    async def _make_request_async(self,
                                  method: str,
                                  endpoint: str,
                                  session: aiohttp.ClientSession | None = None,
                                  data_to_get: Literal['json', 'text'] = 'json',
                                  **kwargs) -> Any:
        """Make asynchronous HTTP request with error handling.

        Args:
            method: HTTP method (GET, POST)
            endpoint: API endpoint path
            session: Optional aiohttp session. If None, a new one will be created.
            data_to_get: Whether to return the decoded JSON body or the raw text.
            **kwargs: Additional arguments for the request

        Returns:
            The decoded JSON body or the text of the response.

        Raises:
            TransportFailure: If the server could not be reached.
            ServerResponseError: If the server answered with a non-2xx status.
            MalformedResponse: If ``data_to_get='json'`` and the body is not JSON.
        """
        if data_to_get not in ('json', 'text'):
            raise ValueError("data_to_get must be either 'json' or 'text'")

        url = self._url(endpoint)
        timeout = aiohttp.ClientTimeout(total=self.config.timeout)

        async def make_request(client_session: aiohttp.ClientSession) -> str:
            logger.debug(f"Running request to {url}")
            logger.debug(f'Equivalent curl command: "{self._generate_curl_command({"method": method, "url": url, **kwargs})}"')
            try:
                async with client_session.request(method=method,
                                                  url=url,
                                                  timeout=timeout,
                                                  **kwargs) as response:
                    text = await response.text()
                    self._check_errors_response(status_code=response.status,
                                                reason=response.reason,
                                                text=text,
                                                url=url)
                    return text
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                logger.error(f"Request error for {method} {endpoint}: {e!r}")
                raise TransportFailure() from e

        if session is not None:
            text = await make_request(session)
        else:
            async with aiohttp.ClientSession() as temp_session:
                text = await make_request(temp_session)

        if data_to_get == 'json':
            return self._parse_json(text)
        return text
