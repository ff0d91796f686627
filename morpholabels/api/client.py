import httpx
from .base_api import ApiConfig
from .endpoints import AnnotationsApi
from morpholabels import configs


class Api:
    """Main API client that provides access to all endpoint handlers.

    Create one per backend and pass it to the code that needs it; the project scope
    (including its visibility) is given to each call, not stored here.

    Example:
        .. code-block:: python

            with Api('https://morphobank.org') as api:
                scope = AnnotationScope(project_id=12, media_id=345, link_id=6)
                annotations = api.annotations.get_list(scope)
    """
    DEFAULT_SERVER_URL = 'https://morphobank.org'
    DEFAULT_TIMEOUT = 30.0

    def __init__(self,
                 server_url: str | None = None,
                 timeout: float | None = None,
                 client: httpx.Client | None = None) -> None:
        """Initialize the API client.

        Args:
            server_url: Base URL of the server. Defaults to the configured URL, then to :attr:`DEFAULT_SERVER_URL`.
            timeout: Request timeout in seconds. Defaults to the configured timeout, then to 30 seconds.
            client: Optional HTTP client instance to share. It is not closed by :meth:`close`.
        """
        if server_url is None:
            server_url = configs.get_value(configs.APIURL_KEY)
            if server_url is None:
                server_url = Api.DEFAULT_SERVER_URL
        server_url = server_url.rstrip('/')
        if timeout is None:
            timeout = configs.get_timeout(Api.DEFAULT_TIMEOUT)

        self.config = ApiConfig(
            server_url=server_url,
            timeout=timeout
        )
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(base_url=server_url, timeout=timeout)
        # Initialize endpoint handlers
        self._annotations = None

    @property
    def annotations(self) -> AnnotationsApi:
        """Access to annotation-related endpoints."""
        if self._annotations is None:
            self._annotations = AnnotationsApi(self.config, self._client)
        return self._annotations

    def close(self) -> None:
        """Close the HTTP client connections, if this instance created the client."""
        if self._owns_client:
            self._client.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
