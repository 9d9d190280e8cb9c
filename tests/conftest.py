"""Shared test fixtures."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from nutriempower.config import Settings
from nutriempower.containers import AppContainer
from nutriempower.domain.foods import FoodRecord
from nutriempower.services.cache import ResponseCache
from nutriempower.services.catalog import CatalogService
from nutriempower.services.chat import ChatClient, ChatService
from nutriempower.services.dataset import FoodDataset
from nutriempower.services.limiter import ConcurrencyLimiter


@dataclass
class FakeChatClient(ChatClient):
    """Fake LLM client that records prompts and returns a fixed reply."""

    response: str | None = "Oats and berries make a great breakfast."
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def complete(
        self,
        *,
        model: str,
        system_prompt: str,
        user_content: str,
        max_tokens: int,
    ) -> str | None:
        self.calls.append(
            {
                "model": model,
                "system_prompt": system_prompt,
                "user_content": user_content,
                "max_tokens": max_tokens,
            }
        )
        if self.error is not None:
            raise self.error
        return self.response


@dataclass
class FakeClock:
    """Controllable clock for cache expiry tests."""

    now: datetime = field(default_factory=lambda: datetime(2024, 1, 1, tzinfo=UTC))

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


SAMPLE_RECORDS = [
    FoodRecord(id="1", description="Apple pie", category="Baked Products"),
    FoodRecord(id="2", description="Banana bread", category="Baked Products"),
    FoodRecord(id="3", description="Oats, rolled", category="Cereal Grains"),
    FoodRecord(id="4", description="Greek yogurt, plain", category="Dairy"),
]


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        dataset_csv_path=str(tmp_path / "usda-foods.csv"),
        dataset_snapshot_path=str(tmp_path / "usda-compact.json"),
        environment="test",
    )


@pytest.fixture
def chat_client() -> FakeChatClient:
    return FakeChatClient()


@pytest.fixture
def dataset(settings: Settings) -> FoodDataset:
    return FoodDataset(
        csv_path=settings.dataset_csv_path,
        snapshot_path=settings.dataset_snapshot_path,
        records=list(SAMPLE_RECORDS),
    )


@pytest.fixture
def chat_service(dataset: FoodDataset, chat_client: FakeChatClient) -> ChatService:
    return ChatService(
        client=chat_client,
        dataset=dataset,
        cache=ResponseCache(),
        limiter=ConcurrencyLimiter(),
        model="llama3.2",
    )


@pytest.fixture
def container(
    settings: Settings, dataset: FoodDataset, chat_service: ChatService
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        dataset=dataset,
        chat_service=chat_service,
        catalog_service=CatalogService(),
        close_resources=close_resources,
    )


@pytest.fixture(autouse=True)
def _propagate_package_logs() -> Iterator[None]:
    """Let caplog see package logs even after configure_logging runs."""
    logger = logging.getLogger("nutriempower")
    previous = logger.propagate
    logger.propagate = True
    yield
    logger.propagate = previous
