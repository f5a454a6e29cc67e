from __future__ import annotations
from dataclasses import dataclass, field
import logging

from hyquery.transport import msgtypes as mt
from hyquery.transport.errors import ProtocolError
from hyquery.transport.framing import (
    REQUEST_SIZE,
    decode_request,
    encode_basic_response,
    encode_full_response,
)
from .state import ServerState, default_state
from .faults import FaultConfig

logger = logging.getLogger(__name__)


@dataclass
class SimModel:
    state: ServerState = field(default_factory=default_state)
    reset_count: int = 0
    faults: FaultConfig = field(default_factory=FaultConfig)

    def reset(self) -> None:
        self.state = default_state()
        self.faults.clear()
        self.reset_count += 1

    def respond(self, packet: bytes) -> bytes | None:
        """
        Build the reply datagram for one request, with corrupt/truncate
        faults applied. Returns None for requests a real server would ignore.
        """
        try:
            msg_type = decode_request(packet)
        except ProtocolError as e:
            logger.debug("ignoring request: %s", e)
            return None

        if msg_type == mt.TYPE_BASIC:
            reply = encode_basic_response(self.state.basic())
        elif msg_type == mt.TYPE_FULL:
            reply = encode_full_response(self.state.full())
        else:
            logger.debug("ignoring unknown request type %#04x", msg_type)
            return None

        # corrupt the magic AFTER encoding (forces a magic mismatch)
        if self.faults.should_corrupt():
            b = bytearray(reply)
            b[0] ^= 0xFF
            reply = bytes(b)

        # cut the reply short; every byte past the header is a required field
        if self.faults.should_truncate():
            reply = reply[:max(REQUEST_SIZE + 1, len(reply) // 2)]

        return reply
