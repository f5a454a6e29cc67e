from __future__ import annotations

import asyncio

from hyquery.api.models import QueryOptions, ServerInfo, ServerInfoFull
from hyquery.transport import msgtypes as mt
from hyquery.transport.framing import parse_basic_response, parse_full_response
from hyquery.transport.udp import send_query

DEFAULT_PORT = 5520


async def query(
    host: str,
    port: int | None = None,
    options: QueryOptions | None = None,
) -> ServerInfo | ServerInfoFull:
    """
    Query a server for its status.

    Returns a ServerInfoFull (players and plugins included) when options.full
    is set, a ServerInfo otherwise. Transport and decoding errors are raised
    as-is; nothing is retried.

        info = await query("play.example.com")
        print(f"{info.server_name}: {info.current_players}/{info.max_players}")

        full = await query("play.example.com", 5520, QueryOptions(full=True))
        print(", ".join(p.name for p in full.players))
    """
    if port is None:
        port = DEFAULT_PORT
    if options is None:
        options = QueryOptions()

    msg_type = mt.TYPE_FULL if options.full else mt.TYPE_BASIC
    data = await send_query(host, port, msg_type, options.timeout)

    if options.full:
        return parse_full_response(data)
    return parse_basic_response(data)


def query_sync(
    host: str,
    port: int | None = None,
    options: QueryOptions | None = None,
) -> ServerInfo | ServerInfoFull:
    """Blocking form of query() for callers without a running event loop."""
    return asyncio.run(query(host, port, options))
