from __future__ import annotations


class QueryError(Exception):
    """Base class for every failure raised by hyquery."""


class ProtocolError(QueryError):
    pass


class BufferUnderrunError(QueryError):
    def __init__(self, needed: int, remaining: int, offset: int):
        super().__init__(
            f"buffer underrun: need {needed} byte(s) at offset {offset}, {remaining} remaining"
        )
        self.needed = needed
        self.remaining = remaining
        self.offset = offset


class QueryTimeoutError(QueryError, TimeoutError):
    def __init__(self, timeout_ms: float):
        if float(timeout_ms).is_integer():
            timeout_ms = int(timeout_ms)
        super().__init__(f"query timeout after {timeout_ms}ms")
        self.timeout_ms = timeout_ms


class TransportError(QueryError):
    """
    Network failure while sending or receiving.
    The originating OSError is kept as __cause__.
    """
