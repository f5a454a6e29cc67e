from __future__ import annotations
import asyncio
import logging

from .protocol import SimModel

logger = logging.getLogger(__name__)


class QueryResponder(asyncio.DatagramProtocol):
    def __init__(self, model: SimModel):
        self.model = model
        self.transport: asyncio.DatagramTransport | None = None

    def connection_made(self, transport):
        # stored transport for later sendto()
        self.transport = transport

    def datagram_received(self, data: bytes, addr):
        # drop packet
        if self.model.faults.should_drop():
            logger.debug("dropping request from %s", addr)
            return

        reply = self.model.respond(data)
        if reply is None:
            return

        # schedule send (with optional delay)
        delay = self.model.faults.delay_s
        if delay > 0:
            asyncio.get_running_loop().call_later(delay, self._send, reply, addr)
        else:
            self._send(reply, addr)

    def _send(self, reply: bytes, addr) -> None:
        if self.transport is None or self.transport.is_closing():
            return
        self.transport.sendto(reply, addr)


async def start_responder(
    model: SimModel, host: str = "127.0.0.1", port: int = 0
) -> tuple[asyncio.DatagramTransport, QueryResponder]:
    """Bind a responder; port 0 picks a free one (see transport.get_extra_info("sockname"))."""
    loop = asyncio.get_running_loop()
    transport, protocol = await loop.create_datagram_endpoint(
        lambda: QueryResponder(model),
        local_addr=(host, port),
    )
    logger.info("query responder listening on %s", transport.get_extra_info("sockname"))
    return transport, protocol
