from typing import Callable

from fastapi import Request

from croak_relay.chat_client import ChatClient
from croak_relay.exceptions import MissingParameterException
from croak_relay.pin_client import PinClient


def required_query(name: str) -> Callable[[Request], str]:
    """Dependency that rejects the request with 400 unless `name` is a non-blank query param."""

    def dependency(request: Request) -> str:
        value = request.query_params.get(name)
        if value is None or not value.strip():
            raise MissingParameterException(name)
        return value

    return dependency


def get_chat_client(request: Request) -> ChatClient:
    return request.app.state.chat_client


def get_pin_client(request: Request) -> PinClient:
    return request.app.state.pin_client
