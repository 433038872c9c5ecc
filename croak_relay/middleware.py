"""
Request guard: a per-request deadline and a catch-all for unhandled errors.

Written as plain ASGI rather than BaseHTTPMiddleware so a timed-out handler
can be left running: its task is abandoned, not cancelled, and whatever it
sends afterwards is dropped. The client always gets exactly one response.
"""

import asyncio

from loguru import logger
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from croak_relay.exceptions import error_body

TIMEOUT_ERROR = "Request timed out"
INTERNAL_ERROR = "Internal server error"


class _ResponseState:
    def __init__(self):
        self.started = False
        self.abandoned = False


class RequestGuardMiddleware:
    def __init__(self, app: ASGIApp, timeout: float = 30.0, expose_details: bool = False):
        self.app = app
        self.timeout = timeout
        self.expose_details = expose_details
        # keeps abandoned handler tasks referenced until they finish
        self._abandoned: set = set()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        state = _ResponseState()

        async def guarded_send(message: Message) -> None:
            if state.abandoned:
                return
            if message["type"] == "http.response.start":
                state.started = True
            await send(message)

        task = asyncio.ensure_future(self.app(scope, receive, guarded_send))
        done, _ = await asyncio.wait({task}, timeout=self.timeout)

        if task not in done and not state.started:
            state.abandoned = True
            self._abandoned.add(task)
            task.add_done_callback(self._on_abandoned_done)
            logger.warning(f"{scope['method']} {scope['path']} exceeded {self.timeout}s, responding 504")
            await JSONResponse(status_code=504, content=error_body(TIMEOUT_ERROR))(scope, receive, send)
            return

        try:
            await task
        except Exception as exc:
            logger.exception(f"Unhandled error on {scope['method']} {scope['path']}: {exc}")
            if state.started:
                raise
            details = str(exc) if self.expose_details else None
            await JSONResponse(status_code=500, content=error_body(INTERNAL_ERROR, details))(scope, receive, send)

    def _on_abandoned_done(self, task: asyncio.Task) -> None:
        self._abandoned.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.opt(exception=exc).error("Timed-out request failed after its 504 was sent")
        else:
            logger.warning("Timed-out request finished late; its response was discarded")
