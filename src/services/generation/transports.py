"""HTTP transport adapters for OpenAI-compatible providers with payload quirks.

Together's streaming chat endpoint emits `"tool_calls":null` inside each
delta, which the OpenAI client's response models reject. Rather than teach
the generation core about providers, the fix-up lives here as an httpx
transport decorator installed only for that provider.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import httpx


NULL_TOOL_CALLS = b',"tool_calls":null'


class _SanitizedByteStream(httpx.AsyncByteStream):
    """Rewrite a response body line by line as it streams."""

    def __init__(self, inner: httpx.AsyncByteStream, pattern: bytes) -> None:
        self._inner = inner
        self._pattern = pattern

    async def __aiter__(self) -> AsyncIterator[bytes]:
        pending = b""
        async for chunk in self._inner:
            pending += chunk
            # Only rewrite complete lines so a pattern split across chunks
            # is still matched.
            head, sep, pending = pending.rpartition(b"\n")
            if sep:
                yield (head + sep).replace(self._pattern, b"")
        if pending:
            yield pending.replace(self._pattern, b"")

    async def aclose(self) -> None:
        await self._inner.aclose()


class NullToolCallsStrippingTransport(httpx.AsyncBaseTransport):
    """Transport decorator removing `,"tool_calls":null` from response bodies."""

    def __init__(
        self,
        inner: httpx.AsyncBaseTransport | None = None,
        pattern: bytes = NULL_TOOL_CALLS,
    ) -> None:
        self._inner = inner or httpx.AsyncHTTPTransport()
        self._pattern = pattern

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        # Compressed bodies cannot be rewritten in flight.
        request.headers["Accept-Encoding"] = "identity"
        response = await self._inner.handle_async_request(request)
        # The rewritten body has a different length than advertised.
        headers = [
            (name, value)
            for name, value in response.headers.raw
            if name.lower() != b"content-length"
        ]
        return httpx.Response(
            status_code=response.status_code,
            headers=headers,
            stream=_SanitizedByteStream(
                _as_async_stream(response.stream), self._pattern
            ),
            extensions=response.extensions,
        )

    async def aclose(self) -> None:
        await self._inner.aclose()


def _as_async_stream(
    stream: httpx.SyncByteStream | httpx.AsyncByteStream,
) -> httpx.AsyncByteStream:
    if not isinstance(stream, httpx.AsyncByteStream):
        raise TypeError("NullToolCallsStrippingTransport requires an async transport")
    return stream
