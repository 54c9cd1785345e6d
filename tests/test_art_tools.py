"""
Tests for the artwork search client and tool.
"""

import asyncio

import httpx
import pytest

from askbot.errors import InvalidResponse, SchemaError, UpstreamStatusError
from askbot.tools.art_tools import ArtSearchClient, ArtSearchTool, format_artworks

from fakes import json_responder, mock_client


ARTWORKS = {
    "data": [
        {
            "id": 16568,
            "title": "Water Lilies",
            "artist_display": "Claude Monet\nFrench, 1840-1926",
            "date_display": "1906",
            "description": None,
        },
        {"id": 1, "title": None, "artist_display": None},
    ]
}


class TestClient:
    def test_search_request(self) -> None:
        requests = []
        client = ArtSearchClient(
            api_url="https://art.test/artworks/",
            client=mock_client(json_responder(ARTWORKS, requests=requests)),
        )

        artworks = asyncio.run(client.search("lilies", limit=2, page=3, sort="title"))

        assert [a["id"] for a in artworks] == [16568, 1]
        (request,) = requests
        assert request.method == "GET"
        assert request.url.path == "/artworks/search"
        assert request.url.params["q"] == "lilies"
        assert request.url.params["limit"] == "2"
        assert request.url.params["page"] == "3"
        assert request.url.params["sort"] == "title"

    def test_optional_params_left_out(self) -> None:
        requests = []
        client = ArtSearchClient(client=mock_client(json_responder(ARTWORKS, requests=requests)))
        asyncio.run(client.search("lilies"))
        assert "page" not in requests[0].url.params
        assert "sort" not in requests[0].url.params

    def test_missing_data(self) -> None:
        client = ArtSearchClient(client=mock_client(json_responder({"results": []})))
        with pytest.raises(InvalidResponse):
            asyncio.run(client.search("lilies"))

    def test_status_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, text="not found")

        client = ArtSearchClient(client=mock_client(handler))
        with pytest.raises(UpstreamStatusError):
            asyncio.run(client.search("lilies"))


class TestFormat:
    def test_empty(self) -> None:
        assert format_artworks([]) == "No artworks found."

    def test_numbered_list(self) -> None:
        text = format_artworks(ARTWORKS["data"])
        assert text.startswith("Found artworks:\n\n1. **Water Lilies**")
        assert "   Date: 1906" in text
        assert "Description" not in text
        assert "2. **Untitled**\n   Artist: Unknown Artist" in text


class TestTool:
    def test_invoke(self) -> None:
        requests = []
        tool = ArtSearchTool(ArtSearchClient(client=mock_client(json_responder(ARTWORKS, requests=requests))))

        output = asyncio.run(tool.invoke(tool.decode('{"query": "lilies"}')))

        assert "Water Lilies" in output
        assert requests[0].url.params["limit"] == "5"

    @pytest.mark.parametrize("raw_args", ['{"query": ""}', '{"query": "x", "limit": 0}', '{"query": "x", "limit": 26}'])
    def test_argument_bounds(self, raw_args) -> None:
        tool = ArtSearchTool(ArtSearchClient())
        with pytest.raises(SchemaError):
            tool.decode(raw_args)
