# filedrop/middleware/body_limit.py
import json

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from filedrop.core.logging_config import logger

TOO_LARGE_BODY = json.dumps({"error": "Request body too large"}).encode()


class RequestBodyTooLarge(Exception):
    pass


class BodySizeLimitMiddleware:
    """
    Pure ASGI middleware die requests boven `max_bytes` afwijst met 413.
    Eerst op Content-Length, daarna door de binnenkomende bytes te tellen
    (chunked bodies hebben geen Content-Length).
    """

    def __init__(self, app: ASGIApp, max_bytes: int):
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers") or [])
        content_length = headers.get(b"content-length")
        if content_length is not None:
            try:
                declared = int(content_length)
            except ValueError:
                declared = 0
            if declared > self.max_bytes:
                logger.warning(
                    "request_body_too_large", declared=declared, limit=self.max_bytes
                )
                await self._reject(send)
                return

        received = 0
        response_started = False

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_bytes:
                    raise RequestBodyTooLarge()
            return message

        async def tracking_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, limited_receive, tracking_send)
        except RequestBodyTooLarge:
            logger.warning("request_body_too_large", received=received, limit=self.max_bytes)
            if response_started:
                raise
            await self._reject(send)

    @staticmethod
    async def _reject(send: Send) -> None:
        await send(
            {
                "type": "http.response.start",
                "status": 413,
                "headers": [
                    (b"content-type", b"application/json"),
                    (b"content-length", str(len(TOO_LARGE_BODY)).encode()),
                ],
            }
        )
        await send({"type": "http.response.body", "body": TOO_LARGE_BODY})
