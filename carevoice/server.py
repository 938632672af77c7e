"""FastAPI server for the credential and voice-provider endpoints."""

from __future__ import annotations

import logging
from typing import Any
from contextlib import asynccontextmanager

from fastapi import Body, FastAPI, Request
from fastapi.responses import ORJSONResponse

from carevoice.state import RuntimeDeps
from carevoice.errors import CredentialsError
from carevoice.config.api import SARVAM_CONFIG_PATH, REALTIME_TOKEN_PATH, VOICE_PROVIDER_PATH
from carevoice.config.secrets import get_sarvam_api_key
from carevoice.handlers.tokens import mint_realtime_token
from carevoice.runtime.logging import configure_logging
from carevoice.realtime.providers import VoiceProvider
from carevoice.runtime.dependencies import build_runtime_deps

logger = logging.getLogger(__name__)

configure_logging()


@asynccontextmanager
async def _lifespan(app: FastAPI):
    runtime_deps = await build_runtime_deps()
    app.state.runtime_deps = runtime_deps
    logger.info("runtime: ready")
    try:
        yield
    finally:
        deps = getattr(app.state, "runtime_deps", None)
        if deps is not None:
            await deps.shutdown()


app = FastAPI(default_response_class=ORJSONResponse, lifespan=_lifespan)


def _deps(request: Request) -> RuntimeDeps:
    runtime_deps = getattr(request.app.state, "runtime_deps", None)
    if runtime_deps is None:
        raise RuntimeError("Runtime dependencies are not initialized")
    return runtime_deps


@app.get("/")
async def root() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@app.post(REALTIME_TOKEN_PATH)
async def realtime_token(request: Request) -> ORJSONResponse:
    deps = _deps(request)
    try:
        token = await mint_realtime_token(deps.http_client, deps.settings.voice.openai)
    except CredentialsError as exc:
        return ORJSONResponse({"error": str(exc)}, status_code=500)
    return ORJSONResponse({"token": token})


@app.get(SARVAM_CONFIG_PATH)
async def sarvam_config() -> dict[str, bool]:
    return {"configured": bool(get_sarvam_api_key())}


@app.get(VOICE_PROVIDER_PATH)
async def get_voice_provider(request: Request) -> dict[str, str]:
    return {"provider": _deps(request).provider_store.get().value}


@app.post(VOICE_PROVIDER_PATH)
async def set_voice_provider(request: Request, payload: dict[str, Any] = Body(...)) -> ORJSONResponse:
    provider = VoiceProvider.parse(payload.get("provider"))
    if provider is None:
        allowed = ", ".join(p.value for p in VoiceProvider)
        return ORJSONResponse({"error": f"Invalid provider. Must be one of: {allowed}"}, status_code=400)
    await _deps(request).provider_store.set(provider)
    return ORJSONResponse({"provider": provider.value})
