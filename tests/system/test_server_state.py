import httpx
import pytest

from hyquery.api.query import query_sync


@pytest.mark.system
def test_http_state_changes_show_up_over_udp(sim_api, settings):
    """
    example system level test
    - rewrite the simulated server over HTTP
    - read it back over UDP with both request types
    """
    sim_api.set_server(
        server_name="Orbis – Lobby ✨",
        motd="",
        current_players=3,
        host_port=65535,
        players=[
            {"name": "zoe", "uuid": "ffffffff-ffff-ffff-ffff-ffffffffffff"},
            {"name": "Ärger", "uuid": "00000000-0000-0000-0000-000000000001"},
            {"name": "amy", "uuid": "80000000-0000-0000-8000-000000000000"},
        ],
        plugins=[],
    )

    basic = query_sync(settings.sim_udp_host, settings.sim_udp_port, settings.query_options())
    assert basic.server_name == "Orbis – Lobby ✨"
    assert basic.motd == ""
    assert basic.host_port == 65535

    full = query_sync(settings.sim_udp_host, settings.sim_udp_port, settings.query_options(full=True))
    # transmission order, not sorted
    assert [p.name for p in full.players] == ["zoe", "Ärger", "amy"]
    assert full.players[2].uuid == "80000000-0000-0000-8000-000000000000"
    assert full.plugins == ()


@pytest.mark.system
def test_invalid_uuid_is_rejected_by_control_plane(sim_api):
    with pytest.raises(httpx.HTTPStatusError) as exc:
        sim_api.set_server(players=[{"name": "x", "uuid": "not-a-uuid"}])
    assert exc.value.response.status_code == 422
