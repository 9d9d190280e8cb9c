"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from nutriempower.adapters.ollama_chat_client import OllamaChatClient
from nutriempower.config import Settings
from nutriempower.services.cache import ResponseCache
from nutriempower.services.catalog import CatalogService
from nutriempower.services.chat import ChatService
from nutriempower.services.dataset import FoodDataset
from nutriempower.services.limiter import ConcurrencyLimiter


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    dataset: FoodDataset
    chat_service: ChatService
    catalog_service: CatalogService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    dataset = FoodDataset(
        csv_path=resolved_settings.dataset_csv_path,
        snapshot_path=resolved_settings.dataset_snapshot_path,
        max_raw_rows=resolved_settings.dataset_max_raw_rows,
        max_records=resolved_settings.dataset_max_records,
    )
    chat_client = OllamaChatClient.create(
        base_url=resolved_settings.ollama_base_url,
        api_key=resolved_settings.ollama_api_key,
    )
    chat_service = ChatService(
        client=chat_client,
        dataset=dataset,
        cache=ResponseCache(
            max_entries=resolved_settings.chat_cache_max_entries,
            ttl_seconds=resolved_settings.chat_cache_ttl_seconds,
        ),
        limiter=ConcurrencyLimiter(resolved_settings.llm_max_concurrent),
        model=resolved_settings.llm_model,
        max_tokens=resolved_settings.llm_max_tokens,
        context_limit=resolved_settings.chat_context_limit,
        timeout_seconds=resolved_settings.llm_timeout_seconds,
    )

    async def close_resources() -> None:
        await chat_client.close()

    return AppContainer(
        settings=resolved_settings,
        dataset=dataset,
        chat_service=chat_service,
        catalog_service=CatalogService(),
        close_resources=close_resources,
    )
