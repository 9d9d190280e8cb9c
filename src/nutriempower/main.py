"""Command-line entrypoints."""

import asyncio
import logging
import os
import sys

import httpx
import uvicorn

from nutriempower.adapters.usda_dataset_client import HttpxUsdaDatasetClient
from nutriempower.app_logging import configure_logging
from nutriempower.config import Settings
from nutriempower.services.dataset_download import (
    DatasetDownloadError,
    download_dataset,
)

_logger = logging.getLogger(__name__)


def main() -> None:
    """Serve the API with uvicorn."""
    port = int(os.getenv("PORT", "3000"))
    uvicorn.run("nutriempower.api.asgi:app", host="0.0.0.0", port=port)  # noqa: S104


def download_dataset_main() -> None:
    """Download the USDA CSV into the configured dataset path."""
    configure_logging()
    settings = Settings()
    try:
        asyncio.run(_download(settings))
    except (httpx.HTTPError, DatasetDownloadError, OSError) as exc:
        _logger.error("Dataset download failed: %s", exc)
        sys.exit(1)


async def _download(settings: Settings) -> None:
    client = HttpxUsdaDatasetClient.create()
    try:
        await download_dataset(
            client, settings.usda_dataset_url, settings.dataset_csv_path
        )
    finally:
        await client.close()
