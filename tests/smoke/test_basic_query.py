import asyncio

import pytest

from hyquery.api.models import ServerInfo, ServerInfoFull
from hyquery.api.query import query_sync
from hyquery.transport import msgtypes as mt
from hyquery.transport.framing import validate_response


@pytest.mark.smoke
def test_basic_query(sim_api, settings):
    info = query_sync(settings.sim_udp_host, settings.sim_udp_port, settings.query_options())

    assert type(info) is ServerInfo
    assert info.server_name == "Simulated Server"
    assert info.current_players == 2
    assert info.max_players == 100
    assert info.host_port == 5520


@pytest.mark.smoke
def test_full_query(sim_api, settings):
    info = query_sync(settings.sim_udp_host, settings.sim_udp_port, settings.query_options(full=True))

    assert isinstance(info, ServerInfoFull)
    assert [p.name for p in info.players] == ["Alice", "Bob"]
    assert info.players[0].uuid == "01020304-0506-0708-090a-0b0c0d0e0f10"
    assert [(p.id, p.enabled) for p in info.plugins] == [
        ("HytaleOne:Query", True),
        ("Example:Disabled", False),
    ]


@pytest.mark.smoke
def test_raw_reply_echoes_request_type(sim_api, sim_udp):
    data = asyncio.run(sim_udp.request(mt.TYPE_FULL))
    assert validate_response(data)
    assert data[8] == mt.TYPE_FULL
