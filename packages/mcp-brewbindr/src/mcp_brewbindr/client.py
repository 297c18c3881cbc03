"""
HTTP client for importing BeerXML from a URL.
"""

import logging

import httpx

from brewbindr_core.exceptions import FetchError

from mcp_brewbindr.config import BrewbindrConfig

logger = logging.getLogger(__name__)


class BeerXMLClient:
    """
    Downloads BeerXML documents, optionally through a CORS-style proxy.
    """

    def __init__(self, config: BrewbindrConfig):
        """
        Initialize the client.

        Args:
            config: Server configuration holding the proxy prefix
        """
        self.config = config
        self.headers = {
            "Accept": "application/xml, text/xml, */*",
        }

    async def fetch(self, url: str) -> str:
        """
        Download a document and return its text.

        Args:
            url: Address of the BeerXML file

        Returns:
            Document body

        Raises:
            FetchError: On HTTP errors, network errors or an empty body
        """
        target = self.config.fetch_url(url)
        logger.info("Fetching BeerXML from %s", url)

        try:
            async with httpx.AsyncClient(follow_redirects=True) as client:
                response = await client.get(target, headers=self.headers, timeout=30.0)
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise FetchError(f"Could not fetch {url}: {e}") from e

        if not response.text.strip():
            raise FetchError(f"{url} returned an empty document")
        return response.text
