"""Chat request handling: retrieval, caching and the rate-limited LLM call."""

import errno
import json
import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from nutriempower.domain.chat import ChatBackendError, ChatReply, ChatValidationError
from nutriempower.domain.foods import FoodRecord
from nutriempower.services.cache import Cache
from nutriempower.services.dataset import FoodDataset
from nutriempower.services.limiter import ConcurrencyLimiter
from nutriempower.services.retrieval import retrieve

SYSTEM_PROMPT = (
    "You are NutriEmpower's nutrition assistant. Give short, practical answers. "
    "Use the USDA reference foods provided as context when they are relevant "
    "and ignore them when they are not. Do not give medical diagnoses."
)
FALLBACK_RESPONSE = "Sorry, I couldn't come up with an answer. Please try again."
BACKEND_UNAVAILABLE_MESSAGE = (
    "LLM backend is not running. Start it (e.g. `ollama serve`) and try again."
)

_logger = logging.getLogger(__name__)


class ChatClient(Protocol):
    """Interface for the LLM backend."""

    async def complete(
        self,
        *,
        model: str,
        system_prompt: str,
        user_content: str,
        max_tokens: int,
    ) -> str | None:
        """Return generated text for one system + user turn."""


@dataclass
class ChatService:
    """Answer one chat message grounded in retrieved food records."""

    client: ChatClient
    dataset: FoodDataset
    cache: Cache
    limiter: ConcurrencyLimiter
    model: str
    max_tokens: int = 256
    context_limit: int = 3
    timeout_seconds: float | None = 60.0

    async def reply(self, message: str) -> ChatReply:
        """Return a cached or freshly generated reply for ``message``."""
        started = time.perf_counter()
        if not message or not message.strip():
            raise ChatValidationError("Message is required.")

        context = retrieve(self.dataset.records, message, self.context_limit)
        serialized = serialize_context(context)
        cache_key = f"{message}{serialized}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return ChatReply(response=cached, cached=True, ms=_elapsed_ms(started))

        user_content = build_user_content(message, serialized)
        try:
            text = await self.limiter.run(
                lambda: self.client.complete(
                    model=self.model,
                    system_prompt=SYSTEM_PROMPT,
                    user_content=user_content,
                    max_tokens=self.max_tokens,
                ),
                timeout=self.timeout_seconds,
            )
        except Exception as exc:
            error = _backend_error(exc, self.timeout_seconds)
            _logger.warning("Chat backend call failed: %s", error)
            raise error from exc

        response = text.strip() if text and text.strip() else FALLBACK_RESPONSE
        self.cache.set(cache_key, response)
        return ChatReply(response=response, cached=False, ms=_elapsed_ms(started))


def serialize_context(records: Sequence[FoodRecord]) -> str:
    """Serialize retrieved records for the prompt and the cache key."""
    return json.dumps(
        [record.model_dump(exclude_none=True) for record in records],
        separators=(",", ":"),
        default=str,
    )


def build_user_content(message: str, serialized_context: str) -> str:
    """Embed the retrieved context ahead of the user's question."""
    return f"USDA reference foods: {serialized_context}\n\nQuestion: {message}"


def is_connection_refused(exc: BaseException) -> bool:
    """Return true when the failure chain shows the backend refused to connect.

    Other connect failures (DNS, unreachable network, TLS) are not matched.
    """
    seen: set[int] = set()
    pending: list[BaseException] = [exc]
    while pending:
        current = pending.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        if isinstance(current, ConnectionRefusedError):
            return True
        if isinstance(current, OSError) and current.errno == errno.ECONNREFUSED:
            return True
        text = str(current).lower()
        if "econnrefused" in text or "connection refused" in text:
            return True
        if isinstance(current, BaseExceptionGroup):
            pending.extend(current.exceptions)
        for linked in (current.__cause__, current.__context__):
            if linked is not None:
                pending.append(linked)
    return False


def _backend_error(exc: Exception, timeout_seconds: float | None) -> ChatBackendError:
    if is_connection_refused(exc):
        return ChatBackendError(BACKEND_UNAVAILABLE_MESSAGE)
    if isinstance(exc, TimeoutError) and timeout_seconds is not None:
        return ChatBackendError(
            f"LLM backend did not respond within {timeout_seconds:g} seconds."
        )
    detail = str(exc).strip()
    return ChatBackendError(detail or type(exc).__name__)


def _elapsed_ms(started: float) -> int:
    return round((time.perf_counter() - started) * 1000)
