"""Fetch the USDA Foundation Foods CSV used by the dataset loader."""

import asyncio
import io
import logging
import zipfile
from pathlib import Path, PurePosixPath

from nutriempower.adapters.usda_dataset_client import UsdaDatasetClient

_logger = logging.getLogger(__name__)

# food.csv carries descriptions; foundation_food.csv only links fdc ids.
_PREFERRED_MEMBERS = ("food.csv", "foundation_food.csv")


class DatasetDownloadError(RuntimeError):
    """Raised when the archive does not contain a usable CSV."""


def select_csv_member(names: list[str]) -> str:
    """Pick the food CSV inside a FoodData Central archive."""
    by_basename = {PurePosixPath(name).name.lower(): name for name in names}
    for preferred in _PREFERRED_MEMBERS:
        if preferred in by_basename:
            return by_basename[preferred]
    for name in names:
        lowered = name.lower()
        if "foundation" in lowered and lowered.endswith(".csv"):
            return name
    raise DatasetDownloadError(f"No food CSV found in archive: {names}")


def extract_food_csv(archive: bytes, csv_path: Path) -> str:
    """Write the food CSV from ``archive`` to ``csv_path``; return its member name."""
    with zipfile.ZipFile(io.BytesIO(archive)) as bundle:
        member = select_csv_member(bundle.namelist())
        csv_path.parent.mkdir(parents=True, exist_ok=True)
        csv_path.write_bytes(bundle.read(member))
    return member


async def download_dataset(
    client: UsdaDatasetClient, url: str, csv_path: Path | str
) -> bool:
    """Download and extract the dataset; return False when it already exists."""
    target = Path(csv_path)
    if target.exists():
        _logger.info("Dataset already present at %s, skipping download", target)
        return False
    _logger.info("Downloading USDA dataset from %s", url)
    archive = await client.download(url)
    try:
        member = await asyncio.to_thread(extract_food_csv, archive, target)
    except zipfile.BadZipFile as exc:
        raise DatasetDownloadError(f"Downloaded file is not a zip archive: {exc}") from exc
    _logger.info("Saved %s to %s", member, target)
    return True
