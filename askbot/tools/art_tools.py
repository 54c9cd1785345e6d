"""
Art Search Tool
===============

Searches the Art Institute of Chicago's public collection API.

API Notes:
- No authentication required
- GET /api/v1/artworks/search?q=<query>&limit=<n>&page=<p>&fields=...
- Results are under the "data" key of the JSON body
"""

import json

import httpx
from pydantic import BaseModel, Field

from askbot.errors import InvalidResponse, TransportError, UpstreamStatusError
from askbot.tools import Tool
from askbot.utils.logger import Logger

logger = Logger("ArtTools")

ART_API_URL = "https://api.artic.edu/api/v1/artworks"
ART_FIELDS = "id,title,artist_display,date_display,description"


class ArtSearchClient:
    """
    Thin async client for the artworks search endpoint.

    Example:
        client = ArtSearchClient()
        artworks = await client.search("water lilies", limit=3)
    """

    def __init__(
        self,
        api_url: str = ART_API_URL,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None
    ):
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    async def search(
        self,
        query: str,
        limit: int = 10,
        page: int | None = None,
        sort: str | None = None
    ) -> list[dict]:
        """
        Search artworks.

        Raises:
            TransportError: The request could not be sent
            UpstreamStatusError: Non-2xx response
            InvalidResponse: Body was not JSON or had no "data" list
        """
        params: dict[str, str | int] = {"q": query, "limit": limit, "fields": ART_FIELDS}
        if page is not None:
            params["page"] = page
        if sort:
            params["sort"] = sort

        url = f"{self.api_url}/search"
        headers = {"Accept": "application/json"}

        try:
            if self._client is not None:
                response = await self._client.get(url, params=params, headers=headers, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(url, params=params, headers=headers)
        except httpx.HTTPError as e:
            logger.warning(f"Art API request failed: {e}")
            raise TransportError(str(e) or type(e).__name__) from e

        if not response.is_success:
            raise UpstreamStatusError(response.status_code, response.text)

        try:
            body = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise InvalidResponse("body is not valid JSON") from e

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, list):
            raise InvalidResponse("missing 'data' list")

        return [item for item in data if isinstance(item, dict)]


class ArtSearchArgs(BaseModel):
    query: str = Field(..., min_length=1, description="Search term for artwork")
    limit: int = Field(5, ge=1, le=25, description="Number of results to return (default: 5)")
    page: int | None = Field(None, ge=1, description="Page number for pagination")
    sort: str | None = Field(None, description="Sort order (e.g., '_score', 'title')")


def format_artworks(artworks: list[dict]) -> str:
    """Render artworks as a numbered list."""
    if not artworks:
        return "No artworks found."

    lines = ["Found artworks:", ""]
    for i, artwork in enumerate(artworks, start=1):
        title = artwork.get("title") or "Untitled"
        artist = artwork.get("artist_display") or "Unknown Artist"
        lines.append(f"{i}. **{title}**")
        lines.append(f"   Artist: {artist}")
        if artwork.get("date_display"):
            lines.append(f"   Date: {artwork['date_display']}")
        if artwork.get("description"):
            lines.append(f"   Description: {artwork['description']}")
        lines.append("")

    return "\n".join(lines)


class ArtSearchTool(Tool[ArtSearchArgs]):
    name = "search_art"
    description = "Search for artworks in the Art Institute of Chicago collection"
    args_model = ArtSearchArgs

    def __init__(self, client: ArtSearchClient):
        self.client = client

    async def invoke(self, args: ArtSearchArgs) -> str:
        artworks = await self.client.search(
            args.query,
            limit=args.limit,
            page=args.page,
            sort=args.sort
        )
        return format_artworks(artworks)
