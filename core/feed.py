"""Retrieval of update sets from the feed service."""

import json
import logging

import httpx

from .config import Config
from .errors import FeedDecodeError, FeedTransportError
from .models import UpdateSet

logger = logging.getLogger(__name__)


class UpdateFeedClient:
    """Client for the update set endpoint of the feed service."""

    def __init__(
        self,
        api_endpoint: str,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize feed client.

        Args:
            api_endpoint: Base URL of the service API
            timeout: Request timeout in seconds
            transport: Optional httpx transport, used by tests
        """
        self.api_endpoint = api_endpoint.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def update_set_url(self, update_set_id: str) -> str:
        return f"{self.api_endpoint}/update_sets/{update_set_id}"

    def fetch_update_set(self, update_set_id: str) -> UpdateSet:
        """Fetch and decode one update set.

        Args:
            update_set_id: Opaque identifier of the update set

        Returns:
            Decoded update set

        Raises:
            FeedTransportError: On network failure or error status
            FeedDecodeError: If the body is not a valid update set
        """
        url = self.update_set_url(update_set_id)
        logger.debug("Fetching update set from %s", url)

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.get(url, headers={"Accept": "application/json"})
                response.raise_for_status()
        except httpx.TimeoutException as e:
            raise FeedTransportError(f"Timeout fetching update set {update_set_id}") from e
        except httpx.HTTPStatusError as e:
            raise FeedTransportError(
                f"HTTP error fetching update set {update_set_id}: {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise FeedTransportError(f"Network error fetching update set {update_set_id}: {e}") from e

        try:
            data = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise FeedDecodeError(f"Update set {update_set_id} is not valid JSON: {e}") from e

        update_set = UpdateSet.from_dict(data)
        logger.info(
            "Fetched update set %s (%d ecosystems)", update_set.id, len(update_set.ecosystems())
        )
        return update_set


def fetch_update_set(update_set_id: str, config: Config | None = None) -> UpdateSet:
    """Fetch an update set from the endpoint named in the configuration.

    Args:
        update_set_id: Opaque identifier of the update set
        config: Settings to use; defaults apply when omitted

    Returns:
        Decoded update set
    """
    config = config or Config()
    return UpdateFeedClient(config.api_endpoint).fetch_update_set(update_set_id)
