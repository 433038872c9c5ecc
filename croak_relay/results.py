"""Outcome values returned by the upstream clients instead of raising."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class UpstreamError:
    message: str
    details: Optional[str] = None


@dataclass(frozen=True)
class UpstreamResult:
    value: Optional[str] = None
    error: Optional[UpstreamError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: str) -> "UpstreamResult":
        return cls(value=value)

    @classmethod
    def failure(cls, message: str, details: Optional[str] = None) -> "UpstreamResult":
        return cls(error=UpstreamError(message=message, details=details))
