from __future__ import annotations
import asyncio
import logging
import socket
from dataclasses import dataclass
from hyquery.transport.framing import build_request
from hyquery.transport.errors import QueryTimeoutError, TransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UdpEndpoint:
    host: str
    port: int


class _ReplyProtocol(asyncio.DatagramProtocol):
    """
    Collects the first outcome of one exchange into a single-shot future.
    Whatever arrives after the future is done is dropped.
    """

    def __init__(self, reply: asyncio.Future):
        self.reply = reply

    def datagram_received(self, data: bytes, addr) -> None:
        if self.reply.done():
            return
        self.reply.set_result(data)

    def error_received(self, exc: Exception) -> None:
        self._fail(exc)

    def connection_lost(self, exc: Exception | None) -> None:
        if exc is not None:
            self._fail(exc)

    def _fail(self, exc: Exception) -> None:
        if self.reply.done():
            return
        err = TransportError(f"udp transport error: {exc}")
        err.__cause__ = exc
        self.reply.set_exception(err)


async def send_query(host: str, port: int, msg_type: int, timeout_ms: float) -> bytes:
    """
    Send one query datagram to host:port and return the first reply.

    Raises QueryTimeoutError if nothing arrives within timeout_ms and
    TransportError if the socket reports an error first. The socket is
    closed on every path out of this function.
    """
    loop = asyncio.get_running_loop()
    reply = loop.create_future()

    try:
        transport, _ = await loop.create_datagram_endpoint(
            lambda: _ReplyProtocol(reply),
            remote_addr=(host, port),
            family=socket.AF_INET,
        )
    except OSError as e:
        raise TransportError(f"cannot open udp endpoint for {host}:{port}: {e}") from e

    try:
        try:
            transport.sendto(build_request(msg_type))
        except OSError as e:
            raise TransportError(f"send to {host}:{port} failed: {e}") from e
        logger.debug("sent query type=%#04x to %s:%d", msg_type, host, port)

        try:
            data = await asyncio.wait_for(reply, timeout_ms / 1000.0)
        except asyncio.TimeoutError:
            logger.debug("no reply from %s:%d within %gms", host, port, timeout_ms)
            raise QueryTimeoutError(timeout_ms) from None
    finally:
        transport.close()

    logger.debug("received %d bytes from %s:%d", len(data), host, port)
    return data


class UdpClient:
    def __init__(self, endpoint: UdpEndpoint, timeout_s: float = 5.0):
        self._endpoint = endpoint
        self._timeout_s = timeout_s

    @property
    def endpoint(self) -> UdpEndpoint:
        return self._endpoint

    async def request(self, msg_type: int) -> bytes:
        return await send_query(
            self._endpoint.host, self._endpoint.port, msg_type, self._timeout_s * 1000.0
        )
