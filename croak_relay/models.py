"""Croak Relay — response models."""

from pydantic import BaseModel
from typing import Optional


class ChatReply(BaseModel):
    message: str


class PinReply(BaseModel):
    ipfsUrl: str


class HealthReply(BaseModel):
    status: str
    timestamp: str


class ErrorReply(BaseModel):
    error: str
    details: Optional[str] = None
