"""
Web search client backed by the Bing Web Search API.

The HTTP request is made with requests in a worker thread so a slow lookup never
blocks audio relay on the event loop.
"""

import asyncio
import logging
from typing import Any, Dict, List

import requests

from app.config.constants import DEFAULT_BING_SEARCH_URL, LOGGER_NAME, SEARCH_TIMEOUT

logger = logging.getLogger(LOGGER_NAME)


class BingSearchClient:
    """
    Client for the Bing Web Search v7 endpoint.

    Results are reduced to name, url, date and snippet, in the order Bing returns them.
    """

    def __init__(self, api_key: str, url: str = DEFAULT_BING_SEARCH_URL, timeout: float = SEARCH_TIMEOUT):
        self.api_key = api_key
        self.url = url
        self.timeout = timeout

    async def search(self, query: str) -> List[Dict[str, Any]]:
        """
        Search the web for a query.

        Args:
            query: The text to search for

        Returns:
            The mapped results; an empty list when nothing was found

        Raises:
            requests.RequestException: if the request fails or Bing returns an error status
        """
        return await asyncio.to_thread(self._search_sync, query)

    def _search_sync(self, query: str) -> List[Dict[str, Any]]:
        response = requests.get(
            self.url,
            params={"q": query},
            headers={"Ocp-Apim-Subscription-Key": self.api_key},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return self.map_results(response.json())

    @staticmethod
    def map_results(payload: Dict[str, Any]) -> List[Dict[str, Any]]:
        pages = (payload.get("webPages") or {}).get("value") or []
        if not pages:
            logger.info("No search results were found")
            return []
        return [
            {
                "name": page.get("name"),
                "url": page.get("url"),
                "date": page.get("datePublishedDisplayText"),
                "snippet": page.get("snippet"),
            }
            for page in pages
        ]
