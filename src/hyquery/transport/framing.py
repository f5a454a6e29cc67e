from __future__ import annotations

from hyquery.api.models import Player, Plugin, ServerInfo, ServerInfoFull
from hyquery.transport.buffer import BufferReader, BufferWriter
from hyquery.transport import msgtypes as mt
from hyquery.transport.errors import ProtocolError

REQUEST_MAGIC = b"HYQUERY\x00"
RESPONSE_MAGIC = b"HYREPLY\x00"

# request: MAGIC(8), TYPE(1) => total 9 bytes
REQUEST_SIZE = len(REQUEST_MAGIC) + 1
# reply header: MAGIC(8), TYPE(1), then fields
_REPLY_HDR_SIZE = len(RESPONSE_MAGIC) + 1


def build_request(msg_type: int) -> bytes:
    if not (0 <= msg_type <= 255):
        raise ValueError("msg_type must fit in a byte")
    return REQUEST_MAGIC + bytes([msg_type])


def decode_request(packet: bytes) -> int:
    """Server side: return the requested type of a query datagram."""
    if len(packet) != REQUEST_SIZE:
        raise ProtocolError(f"bad request length {len(packet)}, expected {REQUEST_SIZE}")
    if packet[:len(REQUEST_MAGIC)] != REQUEST_MAGIC:
        raise ProtocolError(f"bad request magic {bytes(packet[:len(REQUEST_MAGIC)]).hex()}")
    return packet[len(REQUEST_MAGIC)]


def validate_response(buf: bytes) -> bool:
    if len(buf) < _REPLY_HDR_SIZE:
        return False
    return bytes(buf[:len(RESPONSE_MAGIC)]) == RESPONSE_MAGIC


def _open_reply(buf: bytes) -> BufferReader:
    if not validate_response(buf):
        raise ProtocolError(
            f"invalid response: magic mismatch "
            f"(length={len(buf)}, prefix={bytes(buf[:len(RESPONSE_MAGIC)]).hex()})"
        )
    reader = BufferReader(buf)
    reader.skip(len(RESPONSE_MAGIC))
    # echoed type byte; the parser choice already fixes the shape
    reader.skip(1)
    return reader


def _read_count(reader: BufferReader) -> int:
    # a negative count carries no records
    return max(0, reader.read_int32_le())


def _read_info_fields(reader: BufferReader) -> dict:
    return dict(
        server_name=reader.read_string(),
        motd=reader.read_string(),
        current_players=reader.read_int32_le(),
        max_players=reader.read_int32_le(),
        host_port=reader.read_uint16_le(),
        version=reader.read_string(),
        protocol_version=reader.read_int32_le(),
        protocol_hash=reader.read_string(),
    )


def parse_basic_response(buf: bytes) -> ServerInfo:
    reader = _open_reply(buf)
    return ServerInfo(**_read_info_fields(reader))


def parse_full_response(buf: bytes) -> ServerInfoFull:
    reader = _open_reply(buf)
    fields = _read_info_fields(reader)

    players = []
    for _ in range(_read_count(reader)):
        name = reader.read_string()
        players.append(Player(name=name, uuid=reader.read_uuid()))

    plugins = []
    for _ in range(_read_count(reader)):
        plugin_id = reader.read_string()
        version = reader.read_string()
        plugins.append(Plugin(id=plugin_id, version=version, enabled=reader.read_bool()))

    return ServerInfoFull(**fields, players=tuple(players), plugins=tuple(plugins))


def _write_info_fields(w: BufferWriter, info: ServerInfo) -> None:
    (w.write_string(info.server_name)
      .write_string(info.motd)
      .write_int32_le(info.current_players)
      .write_int32_le(info.max_players)
      .write_uint16_le(info.host_port)
      .write_string(info.version)
      .write_int32_le(info.protocol_version)
      .write_string(info.protocol_hash))


def encode_basic_response(info: ServerInfo) -> bytes:
    w = BufferWriter().write_bytes(RESPONSE_MAGIC).write_uint8(mt.TYPE_BASIC)
    _write_info_fields(w, info)
    return w.getvalue()


def encode_full_response(info: ServerInfoFull) -> bytes:
    w = BufferWriter().write_bytes(RESPONSE_MAGIC).write_uint8(mt.TYPE_FULL)
    _write_info_fields(w, info)

    w.write_int32_le(len(info.players))
    for player in info.players:
        w.write_string(player.name).write_uuid(player.uuid)

    w.write_int32_le(len(info.plugins))
    for plugin in info.plugins:
        w.write_string(plugin.id).write_string(plugin.version).write_bool(plugin.enabled)

    return w.getvalue()
