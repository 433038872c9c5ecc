from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from croak_relay.chat_client import ChatClient
from croak_relay.dependencies import get_chat_client, get_pin_client, required_query
from croak_relay.exceptions import UpstreamFailedException
from croak_relay.models import ChatReply, HealthReply, PinReply
from croak_relay.pin_client import PinClient

router = APIRouter()


# ── Endpoints ─────────────────────────────────────────────────────────────────

@router.get("/", response_model=ChatReply)
async def chat(
    message: str = Depends(required_query("message")),
    chat_client: ChatClient = Depends(get_chat_client),
):
    result = await chat_client.complete(message)
    if not result.ok:
        raise UpstreamFailedException(
            "Failed to process chatbot request.",
            result.error.details or result.error.message,
        )
    return {"message": result.value}


@router.get("/uploadtoipfs", response_model=PinReply)
async def upload_to_ipfs(
    pair: str = Depends(required_query("pair")),
    pin_client: PinClient = Depends(get_pin_client),
):
    result = await pin_client.pin(pair)
    if not result.ok:
        raise UpstreamFailedException(
            "Failed to upload to Pinata.",
            result.error.details or result.error.message,
        )
    return {"ipfsUrl": result.value}


@router.get("/health", response_model=HealthReply)
async def health():
    return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}
