from __future__ import annotations

from dataclasses import dataclass

DEFAULT_TIMEOUT_MS = 5000


@dataclass(frozen=True)
class ServerInfo:
    """Basic status as returned by a TYPE_BASIC query."""
    server_name: str
    motd: str
    current_players: int
    max_players: int
    host_port: int
    version: str
    protocol_version: int
    protocol_hash: str


@dataclass(frozen=True)
class Player:
    name: str
    uuid: str


@dataclass(frozen=True)
class Plugin:
    id: str
    version: str
    enabled: bool


@dataclass(frozen=True)
class ServerInfoFull(ServerInfo):
    """
    Full status as returned by a TYPE_FULL query.
    players and plugins keep the order the server sent them in.
    """
    players: tuple[Player, ...] = ()
    plugins: tuple[Plugin, ...] = ()


@dataclass(frozen=True)
class QueryOptions:
    timeout: int = DEFAULT_TIMEOUT_MS     # milliseconds
    full: bool = False
