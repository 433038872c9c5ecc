"""
Croak Relay
Handles: Croak chatbot replies (xAI) and chat-pair pinning (Pinata/IPFS)
Port: 5001 (PORT)

Routes: GET /, GET /uploadtoipfs, GET /health
Config: XAI_API_KEY, PINATA_API_KEY, PINATA_API_SECRET are required; the
process exits with status 1 before binding if any is missing.
"""

import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from croak_relay import __version__
from croak_relay.chat_client import ChatClient
from croak_relay.config import ConfigError, Settings, load_settings
from croak_relay.exceptions import http_exception_handler
from croak_relay.logging_setup import configure_logging
from croak_relay.middleware import RequestGuardMiddleware
from croak_relay.pin_client import PinClient
from croak_relay.routes import router


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logger.info(f"[croak-relay] Started on port {settings.port} (env={settings.env})")
    yield
    logger.info("[croak-relay] Shutting down")


def create_app(
    settings: Settings,
    chat_client: Optional[ChatClient] = None,
    pin_client: Optional[PinClient] = None,
) -> FastAPI:
    app = FastAPI(title="Croak Relay", version=__version__, lifespan=lifespan)

    app.state.settings = settings
    app.state.chat_client = chat_client or ChatClient(settings)
    app.state.pin_client = pin_client or PinClient(settings)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.include_router(router)

    # Last added runs outermost: CORS headers also land on 504/500 guard responses.
    app.add_middleware(
        RequestGuardMiddleware,
        timeout=settings.request_timeout,
        expose_details=settings.is_development,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_methods=["GET"],
        allow_headers=["Content-Type"],
    )
    return app


def run() -> None:
    try:
        settings = load_settings()
    except ConfigError as e:
        configure_logging()
        logger.error(f"Startup aborted: {e}")
        sys.exit(1)

    configure_logging(settings.log_level)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
