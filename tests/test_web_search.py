"""
Unit tests for the Bing Web Search client.
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from app.services.web_search import BingSearchClient

BING_PAYLOAD = {
    "_type": "SearchResponse",
    "webPages": {
        "value": [
            {
                "name": "Sam Pullara - Wikipedia",
                "url": "https://en.wikipedia.org/wiki/Sam_Pullara",
                "datePublishedDisplayText": "Jan 5, 2024",
                "snippet": "Sam Pullara is an American software engineer.",
            },
            {
                "name": "Sam Pullara (@sampullara)",
                "url": "https://x.com/sampullara",
                "snippet": "Investor.",
            },
        ]
    },
}


@pytest.fixture
def client():
    return BingSearchClient("bing-key", url="https://bing.test/v7.0/search", timeout=10)


def mock_response(payload):
    response = MagicMock()
    response.json.return_value = payload
    return response


@pytest.mark.asyncio
async def test_search_maps_results(client):
    with patch("app.services.web_search.requests.get", return_value=mock_response(BING_PAYLOAD)) as mock_get:
        results = await client.search("sam pullara")

    mock_get.assert_called_once_with(
        "https://bing.test/v7.0/search",
        params={"q": "sam pullara"},
        headers={"Ocp-Apim-Subscription-Key": "bing-key"},
        timeout=10,
    )
    assert results == [
        {
            "name": "Sam Pullara - Wikipedia",
            "url": "https://en.wikipedia.org/wiki/Sam_Pullara",
            "date": "Jan 5, 2024",
            "snippet": "Sam Pullara is an American software engineer.",
        },
        {
            "name": "Sam Pullara (@sampullara)",
            "url": "https://x.com/sampullara",
            "date": None,
            "snippet": "Investor.",
        },
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{}, {"webPages": {}}, {"webPages": {"value": []}}])
async def test_search_no_results(client, payload):
    with patch("app.services.web_search.requests.get", return_value=mock_response(payload)):
        assert await client.search("zzzz") == []


@pytest.mark.asyncio
async def test_search_http_error(client):
    response = mock_response({})
    response.raise_for_status.side_effect = requests.HTTPError("401 Client Error")

    with patch("app.services.web_search.requests.get", return_value=response):
        with pytest.raises(requests.HTTPError):
            await client.search("sam pullara")


@pytest.mark.asyncio
async def test_search_timeout(client):
    with patch("app.services.web_search.requests.get", side_effect=requests.Timeout("read timed out")):
        with pytest.raises(requests.RequestException):
            await client.search("sam pullara")
