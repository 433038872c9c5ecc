"""Pinata client: pins a chat pair as JSON and hands back a gateway URL."""

import json
from typing import Optional

import httpx
from loguru import logger

from croak_relay.config import Settings
from croak_relay.results import UpstreamResult

CID_VERSION = 1

PIN_FAILED = "Failed to upload to Pinata."


class PinClient:
    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._api_key = settings.pinata_api_key
        self._api_secret = settings.pinata_api_secret
        self._url = settings.pinata_api_url
        self._gateway = settings.pinata_gateway_url
        self._timeout = settings.upstream_timeout
        self._transport = transport

    def gateway_url(self, cid: str) -> str:
        return f"{self._gateway.rstrip('/')}/{cid}"

    async def pin(self, pair_payload: str) -> UpstreamResult:
        """Pin {"chat": pair_payload} and return the gateway URL of the new CID."""
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(
                    self._url,
                    headers={
                        "pinata_api_key": self._api_key,
                        "pinata_secret_api_key": self._api_secret,
                    },
                    json={
                        "pinataContent": {"chat": pair_payload},
                        "pinataOptions": {"cidVersion": CID_VERSION},
                    },
                )
        except httpx.TimeoutException as e:
            logger.error(f"Pinata timeout after {self._timeout}s")
            return UpstreamResult.failure("Pinata request timed out", str(e) or None)
        except httpx.HTTPError as e:
            logger.error(f"Error uploading to Pinata: {e}")
            return UpstreamResult.failure(PIN_FAILED, str(e) or e.__class__.__name__)

        if response.is_error:
            details = _provider_diagnostic(response)
            logger.error(f"Error uploading to Pinata ({response.status_code}): {details}")
            return UpstreamResult.failure(f"Pinata returned {response.status_code}", details)

        try:
            cid = response.json().get("IpfsHash")
        except (ValueError, AttributeError):
            cid = None
        if not isinstance(cid, str) or not cid:
            logger.error(f"Pinata response had no IpfsHash: {response.text[:500]}")
            return UpstreamResult.failure(PIN_FAILED, _provider_diagnostic(response))

        ipfs_url = self.gateway_url(cid)
        logger.info(f"IPFS URL: {ipfs_url}")
        return UpstreamResult.success(ipfs_url)


def _provider_diagnostic(response: httpx.Response) -> str:
    """Whatever Pinata attached explaining the failure, falling back to raw text."""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase

    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            for key in ("details", "reason", "message"):
                if error.get(key):
                    return str(error[key])
            return json.dumps(error)
        if error:
            return str(error)
        if body.get("message"):
            return str(body["message"])
    return response.text
