"""
FastAPI application for the translation client.

This is the HTTP API a front end talks to. It holds no logic of its own:
every endpoint delegates to the services in ``tarjoman.services``.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from tarjoman.config import configure_logging, get_settings
from tarjoman.core.errors import (
    DuplicateKey,
    MalformedResponse,
    NetworkFailure,
    NoCredential,
    RemoteRejected,
    StorageUnavailable,
    TarjomanError,
    UnparsableResult,
)
from tarjoman.core.utils import mask_secret
from tarjoman.i18n.languages import AUTO_DETECT, normalize_language_code
from tarjoman.services import Services, create_services
from tarjoman.storage.store import get_store

logger = logging.getLogger(__name__)


# Error kind -> HTTP status
ERROR_STATUS: dict[type[TarjomanError], int] = {
    StorageUnavailable: 503,
    NoCredential: 400,
    NetworkFailure: 502,
    RemoteRejected: 502,
    MalformedResponse: 502,
    UnparsableResult: 502,
    DuplicateKey: 409,
}


# =============================================================================
# Request/Response Models
# =============================================================================


class TranslateRequest(BaseModel):
    text: str
    source: str = AUTO_DETECT
    target: str


class TranslateResponse(BaseModel):
    detectedSourceLanguage: str
    translatedText: str
    newLanguageInfo: dict[str, Any] | None = None
    historyId: int | None = None
    detectedLanguageKnown: bool


class AddLanguageRequest(BaseModel):
    code: str
    name: str
    englishName: str = ""
    dir: str = "ltr"


class AddCredentialRequest(BaseModel):
    key: str


class UpdatePreferencesRequest(BaseModel):
    theme: str | None = None
    auto_translate_on_paste: bool | None = None
    auto_copy_result: bool | None = None


# =============================================================================
# App Factory
# =============================================================================


def create_app(services: Services | None = None) -> FastAPI:
    """
    Create the API.

    Args:
        services: Pre-built services (tests); by default they are wired to
            the process-wide SQLite store at startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        settings = get_settings()
        configure_logging()

        app.state.services = services or create_services(get_store())
        logger.info(f"Tarjoman API starting in {settings.environment} mode")

        yield

        await app.state.services.store.close()
        logger.info("Tarjoman API shutting down")

    app = FastAPI(
        title="Tarjoman API",
        description="LLM-powered translation with local history and language discovery",
        version="0.1.0",
        lifespan=lifespan,
    )

    settings = get_settings()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(TarjomanError)
    async def handle_tarjoman_error(request: Request, exc: TarjomanError):
        status = ERROR_STATUS.get(type(exc), 500)
        logger.warning(f"{request.method} {request.url.path} failed: {exc.kind}: {exc.message}")
        return JSONResponse(
            status_code=status,
            content={"error": exc.kind, "message": exc.message},
        )

    _register_routes(app)
    return app


def get_services(request: Request) -> Services:
    return request.app.state.services


# =============================================================================
# Routes
# =============================================================================


def _register_routes(app: FastAPI) -> None:

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "tarjoman-api"}

    # -------------------------------------------------------------------------
    # Translation
    # -------------------------------------------------------------------------

    @app.post("/translate", response_model=TranslateResponse)
    async def translate(
        request: TranslateRequest,
        services: Services = Depends(get_services),
    ):
        """Translate text and record it in the history."""
        outcome = await services.session.translate(
            request.text,
            normalize_language_code(request.source),
            normalize_language_code(request.target),
        )
        result = outcome.result
        return TranslateResponse(
            detectedSourceLanguage=result.detected_source_language,
            translatedText=result.translated_text,
            newLanguageInfo=(
                result.new_language_info.to_record() if result.new_language_info else None
            ),
            historyId=outcome.record.id if outcome.record else None,
            detectedLanguageKnown=outcome.detected_language_known,
        )

    # -------------------------------------------------------------------------
    # Languages
    # -------------------------------------------------------------------------

    @app.get("/languages")
    async def list_languages(services: Services = Depends(get_services)):
        """The merged language catalog."""
        languages = await services.languages.get_all_languages()
        return {"languages": [lang.to_record() for lang in languages]}

    @app.post("/languages", status_code=201)
    async def add_language(
        request: AddLanguageRequest,
        services: Services = Depends(get_services),
    ):
        """Register a custom language."""
        if not await services.languages.register_language(request.model_dump()):
            raise HTTPException(status_code=422, detail="Invalid language")
        return {"code": request.code}

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    @app.get("/history")
    async def list_history(q: str = "", services: Services = Depends(get_services)):
        """Stored translations, newest first, optionally filtered by text."""
        records = await services.history.search(q)
        return {"items": [r.to_record() for r in records], "count": len(records)}

    @app.delete("/history/{record_id}", status_code=204)
    async def delete_history_item(record_id: int, services: Services = Depends(get_services)):
        await services.history.delete(record_id)

    @app.delete("/history", status_code=204)
    async def clear_history(services: Services = Depends(get_services)):
        await services.history.clear()

    # -------------------------------------------------------------------------
    # Credentials
    # -------------------------------------------------------------------------

    @app.get("/credentials")
    async def list_credentials(services: Services = Depends(get_services)):
        """Configured API keys, masked."""
        keys = await services.credentials.list_credentials()
        return {"keys": [mask_secret(k) for k in keys], "count": len(keys)}

    @app.post("/credentials", status_code=201)
    async def add_credential(
        request: AddCredentialRequest,
        services: Services = Depends(get_services),
    ):
        try:
            keys = await services.credentials.add_credential(request.key)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return {"count": len(keys)}

    @app.delete("/credentials/{index}")
    async def remove_credential(index: int, services: Services = Depends(get_services)):
        try:
            keys = await services.credentials.remove_credential(index)
        except IndexError as e:
            raise HTTPException(status_code=404, detail=str(e))
        return {"count": len(keys)}

    # -------------------------------------------------------------------------
    # Preferences
    # -------------------------------------------------------------------------

    @app.get("/preferences")
    async def get_preferences(services: Services = Depends(get_services)):
        prefs = await services.preferences.load()
        return prefs.model_dump(mode="json")

    @app.patch("/preferences")
    async def update_preferences(
        request: UpdatePreferencesRequest,
        services: Services = Depends(get_services),
    ):
        try:
            prefs = await services.preferences.update(**request.model_dump(exclude_none=True))
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e))
        return prefs.model_dump(mode="json")


app = create_app()
