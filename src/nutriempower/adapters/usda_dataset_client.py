"""HTTP client for USDA FoodData Central bulk downloads."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class UsdaDatasetClient(Protocol):
    """Interface for fetching USDA dataset archives."""

    async def download(self, url: str) -> bytes:
        """Return the raw archive bytes."""


@dataclass
class HttpxUsdaDatasetClient(UsdaDatasetClient):
    """HTTPX-backed dataset downloader."""

    http_client: httpx.AsyncClient

    @classmethod
    def create(cls) -> "HttpxUsdaDatasetClient":
        """Create a downloader with a managed httpx session."""
        return cls(http_client=httpx.AsyncClient(follow_redirects=True))

    async def download(self, url: str) -> bytes:
        """Download an archive, raising on non-2xx responses."""
        response = await self.http_client.get(url, timeout=120)
        response.raise_for_status()
        return response.content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
