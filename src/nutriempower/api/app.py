"""FastAPI application factory."""

import asyncio
import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from nutriempower.api.catalog import router as catalog_router
from nutriempower.app_logging import configure_logging
from nutriempower.config import parse_allowed_origins
from nutriempower.containers import AppContainer
from nutriempower.domain.chat import ChatError, ChatValidationError


class ContactForm(BaseModel):
    """Contact form submission."""

    name: str = Field(min_length=1, max_length=50)
    email: str = Field(min_length=3)
    message: str = Field(min_length=1)


class NewsletterSignup(BaseModel):
    """Newsletter subscription request."""

    email: str = Field(min_length=3)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)
    started_at = time.monotonic()

    async def load_dataset() -> None:
        try:
            await container.dataset.load()
        except Exception:
            logger.exception("Failed to load USDA dataset")

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        load_task = asyncio.create_task(load_dataset())
        yield
        if not load_task.done():
            load_task.cancel()
        await asyncio.gather(load_task, return_exceptions=True)
        await app.state.container.close_resources()

    app = FastAPI(title="NutriEmpower", lifespan=lifespan)
    app.state.container = container

    origins = parse_allowed_origins(container.settings.cors_allowed_origins)
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=origins != ["*"],
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(catalog_router)

    @app.get("/health")
    async def health(request: Request) -> dict[str, object]:
        """Report liveness and dataset status."""
        state_container: AppContainer = request.app.state.container
        dataset = state_container.dataset
        return {
            "status": "OK",
            "timestamp": datetime.now(tz=UTC).isoformat(),
            "uptime": round(time.monotonic() - started_at, 3),
            "environment": state_container.settings.environment,
            "dataset": {
                "loaded": dataset.loaded,
                "records": len(dataset),
                "source": dataset.source,
            },
        }

    @app.post("/api/chat")
    async def chat(request: Request) -> JSONResponse:
        """Answer a nutrition question with USDA-grounded context."""
        state_container: AppContainer = request.app.state.container
        try:
            payload = await request.json()
        except ValueError:
            payload = None
        message = payload.get("message") if isinstance(payload, dict) else None
        try:
            reply = await state_container.chat_service.reply(
                message if isinstance(message, str) else ""
            )
        except ChatValidationError as exc:
            return _chat_error(400, str(exc))
        except ChatError as exc:
            return _chat_error(500, str(exc))
        except Exception:
            logger.exception("Unexpected chat failure")
            return _chat_error(500, "Something went wrong. Please try again.")
        return JSONResponse(
            {
                "success": True,
                "response": reply.response,
                "cached": reply.cached,
                "ms": reply.ms,
            }
        )

    @app.post("/contact")
    async def contact(form: ContactForm) -> dict[str, object]:
        logger.info("Contact form received from %s", form.email)
        return {
            "success": True,
            "message": "Thank you for your message. We will get back to you soon!",
        }

    @app.post("/newsletter")
    async def newsletter(signup: NewsletterSignup) -> dict[str, object]:
        logger.info("Newsletter signup for %s", signup.email)
        return {
            "success": True,
            "message": "Successfully subscribed to our newsletter!",
        }

    return app


def _chat_error(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"success": False, "error": error}
    )
