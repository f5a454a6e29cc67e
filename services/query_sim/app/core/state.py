from __future__ import annotations
from dataclasses import asdict, dataclass, field

from hyquery.api.models import Player, Plugin, ServerInfo, ServerInfoFull


@dataclass
class ServerState:
    server_name: str = "Simulated Server"
    motd: str = "Welcome to the simulator"
    current_players: int = 0
    max_players: int = 100
    host_port: int = 5520
    version: str = "2026.01.0"
    protocol_version: int = 1
    protocol_hash: str = "0000000000000000"
    players: list[Player] = field(default_factory=list)
    plugins: list[Plugin] = field(default_factory=list)

    def basic(self) -> ServerInfo:
        return ServerInfo(
            server_name=self.server_name,
            motd=self.motd,
            current_players=self.current_players,
            max_players=self.max_players,
            host_port=self.host_port,
            version=self.version,
            protocol_version=self.protocol_version,
            protocol_hash=self.protocol_hash,
        )

    def full(self) -> ServerInfoFull:
        info = self.basic()
        return ServerInfoFull(
            **asdict(info),
            players=tuple(self.players),
            plugins=tuple(self.plugins),
        )


def default_state() -> ServerState:
    return ServerState(
        current_players=2,
        players=[
            Player("Alice", "01020304-0506-0708-090a-0b0c0d0e0f10"),
            Player("Bob", "ffffffff-ffff-4fff-8fff-fffffffffffe"),
        ],
        plugins=[
            Plugin("HytaleOne:Query", "1.0.0", True),
            Plugin("Example:Disabled", "0.3.1", False),
        ],
    )
