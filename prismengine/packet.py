"""Binary game packets: a fixed header followed by a little-endian payload."""

from __future__ import annotations

import struct
import time
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Sequence, Tuple

Vec2 = Tuple[float, float]
Vec3 = Tuple[float, float, float]

_HEADER = struct.Struct("<B3xII")
_UINT8 = struct.Struct("<B")
_UINT16 = struct.Struct("<H")
_UINT32 = struct.Struct("<I")
_FLOAT = struct.Struct("<f")

_CLOCK_ORIGIN = time.monotonic()


def time_ms() -> int:
    """Milliseconds since the module was loaded, wrapped to 32 bits."""
    return int((time.monotonic() - _CLOCK_ORIGIN) * 1000) & 0xFFFFFFFF


class PacketType(IntEnum):
    """Kinds of packet exchanged between peers."""

    HANDSHAKE = 0
    DISCONNECT = 1
    PING = 2
    PONG = 3
    PEER_ID_ASSIGNMENT = 4
    PLAYER_MOVE = 5
    PLAYER_POSITION_UPDATE = 6
    PLAYER_JOIN = 7
    PLAYER_LEAVE = 8
    GAME_STATE_UPDATE = 9
    ENTITY_SPAWN = 10
    ENTITY_DESTROY = 11
    ENTITY_UPDATE = 12
    CHAT_MESSAGE = 13
    AUDIO_DATA = 14
    CUSTOM_GAME_EVENT = 100


class PacketReliability(IntEnum):
    """Delivery guarantees for a sent packet."""

    UNRELIABLE = 0
    RELIABLE = 1
    UNSEQUENCED = 2


class PacketReadError(ValueError):
    """Raised when packet bytes are missing or malformed."""


@dataclass
class PacketHeader:
    """Packet type, creation timestamp and payload size."""

    packet_type: PacketType = PacketType.PING
    timestamp: int = 0
    data_size: int = 0

    SIZE = _HEADER.size

    def to_bytes(self) -> bytes:
        return _HEADER.pack(int(self.packet_type), self.timestamp, self.data_size)

    @classmethod
    def from_bytes(cls, data: bytes) -> "PacketHeader":
        if len(data) < _HEADER.size:
            raise PacketReadError("Invalid packet: too small for header")
        raw_type, timestamp, data_size = _HEADER.unpack_from(data)
        try:
            packet_type = PacketType(raw_type)
        except ValueError:
            raise PacketReadError(f"Unknown packet type: {raw_type}") from None
        return cls(packet_type, timestamp, data_size)


def _check_range(value: int, bits: int) -> int:
    if not 0 <= value < (1 << bits):
        raise ValueError(f"{value} does not fit in an unsigned {bits}-bit field")
    return value


class Packet:
    """A header plus a payload that is written and read sequentially."""

    def __init__(self, packet_type: PacketType | None = None) -> None:
        if packet_type is None:
            self._header = PacketHeader()
        else:
            self._header = PacketHeader(PacketType(packet_type), time_ms(), 0)
        self._data = bytearray()
        self._read_pos = 0

    @property
    def header(self) -> PacketHeader:
        return self._header

    @property
    def packet_type(self) -> PacketType:
        return self._header.packet_type

    @property
    def timestamp(self) -> int:
        return self._header.timestamp

    @property
    def data_size(self) -> int:
        return self._header.data_size

    @property
    def data(self) -> bytes:
        return bytes(self._data)

    @property
    def total_size(self) -> int:
        return PacketHeader.SIZE + len(self._data)

    def _append(self, chunk: bytes) -> None:
        self._data += chunk
        self._header.data_size = len(self._data)

    def write_uint8(self, value: int) -> None:
        self._append(_UINT8.pack(_check_range(value, 8)))

    def write_uint16(self, value: int) -> None:
        self._append(_UINT16.pack(_check_range(value, 16)))

    def write_uint32(self, value: int) -> None:
        self._append(_UINT32.pack(_check_range(value, 32)))

    def write_float(self, value: float) -> None:
        self._append(_FLOAT.pack(value))

    def write_string(self, value: str) -> None:
        encoded = value.encode("utf-8")
        if len(encoded) > 0xFFFF:
            raise ValueError("String too long for packet (max 65535 bytes)")
        self._append(_UINT16.pack(len(encoded)) + encoded)

    def write_vec2(self, value: Sequence[float]) -> None:
        x, y = value
        self.write_float(x)
        self.write_float(y)

    def write_vec3(self, value: Sequence[float]) -> None:
        x, y, z = value
        self.write_float(x)
        self.write_float(y)
        self.write_float(z)

    def _take(self, count: int) -> bytes:
        end = self._read_pos + count
        if end > len(self._data):
            raise PacketReadError("Packet read overflow: tried to read past end of data")
        chunk = bytes(self._data[self._read_pos:end])
        self._read_pos = end
        return chunk

    def read_uint8(self) -> int:
        return _UINT8.unpack(self._take(1))[0]

    def read_uint16(self) -> int:
        return _UINT16.unpack(self._take(2))[0]

    def read_uint32(self) -> int:
        return _UINT32.unpack(self._take(4))[0]

    def read_float(self) -> float:
        return _FLOAT.unpack(self._take(4))[0]

    def read_string(self) -> str:
        length = self.read_uint16()
        raw = self._take(length)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise PacketReadError("Packet string is not valid UTF-8") from exc

    def read_vec2(self) -> Vec2:
        x = self.read_float()
        y = self.read_float()
        return (x, y)

    def read_vec3(self) -> Vec3:
        x = self.read_float()
        y = self.read_float()
        z = self.read_float()
        return (x, y, z)

    def reset_read_position(self) -> None:
        self._read_pos = 0

    def clear(self) -> None:
        self._data = bytearray()
        self._read_pos = 0
        self._header = PacketHeader()

    def to_bytes(self) -> bytes:
        return self._header.to_bytes() + bytes(self._data)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Packet":
        header = PacketHeader.from_bytes(data)
        packet = cls()
        packet._header = header
        packet._data = bytearray(data[PacketHeader.SIZE:])
        return packet

    def __repr__(self) -> str:
        return f"Packet({self.packet_type.name}, {len(self._data)} bytes)"


@dataclass
class PlayerMove:
    """A player's position, velocity and rotation."""

    player_id: int = 0
    position: Vec2 = (0.0, 0.0)
    velocity: Vec2 = (0.0, 0.0)
    rotation: float = 0.0

    def write_to(self, packet: Packet) -> None:
        packet.write_uint32(self.player_id)
        packet.write_vec2(self.position)
        packet.write_vec2(self.velocity)
        packet.write_float(self.rotation)

    @classmethod
    def read_from(cls, packet: Packet) -> "PlayerMove":
        player_id = packet.read_uint32()
        position = packet.read_vec2()
        velocity = packet.read_vec2()
        rotation = packet.read_float()
        return cls(player_id, position, velocity, rotation)


@dataclass
class ChatMessage:
    """A chat line sent by a player."""

    player_id: int = 0
    player_name: str = ""
    message: str = ""

    def write_to(self, packet: Packet) -> None:
        packet.write_uint32(self.player_id)
        packet.write_string(self.player_name)
        packet.write_string(self.message)

    @classmethod
    def read_from(cls, packet: Packet) -> "ChatMessage":
        player_id = packet.read_uint32()
        player_name = packet.read_string()
        message = packet.read_string()
        return cls(player_id, player_name, message)


@dataclass
class EntityUpdate:
    """Transform and visibility of an entity."""

    entity_id: int = 0
    position: Vec3 = (0.0, 0.0, 0.0)
    rotation: Vec3 = (0.0, 0.0, 0.0)
    scale: Vec3 = (1.0, 1.0, 1.0)
    is_visible: bool = True

    def write_to(self, packet: Packet) -> None:
        packet.write_uint32(self.entity_id)
        packet.write_vec3(self.position)
        packet.write_vec3(self.rotation)
        packet.write_vec3(self.scale)
        packet.write_uint8(1 if self.is_visible else 0)

    @classmethod
    def read_from(cls, packet: Packet) -> "EntityUpdate":
        entity_id = packet.read_uint32()
        position = packet.read_vec3()
        rotation = packet.read_vec3()
        scale = packet.read_vec3()
        is_visible = packet.read_uint8() != 0
        return cls(entity_id, position, rotation, scale, is_visible)


@dataclass
class PlayerJoin:
    """A player entering the game."""

    player_id: int = 0
    player_name: str = ""
    spawn_position: Vec2 = field(default=(0.0, 0.0))

    def write_to(self, packet: Packet) -> None:
        packet.write_uint32(self.player_id)
        packet.write_string(self.player_name)
        packet.write_vec2(self.spawn_position)

    @classmethod
    def read_from(cls, packet: Packet) -> "PlayerJoin":
        player_id = packet.read_uint32()
        player_name = packet.read_string()
        spawn_position = packet.read_vec2()
        return cls(player_id, player_name, spawn_position)


@dataclass
class PeerIdAssignment:
    """The peer id a server hands to a newly connected client."""

    assigned_peer_id: int = 0

    def write_to(self, packet: Packet) -> None:
        packet.write_uint32(self.assigned_peer_id)

    @classmethod
    def read_from(cls, packet: Packet) -> "PeerIdAssignment":
        return cls(packet.read_uint32())


def create_ping_packet() -> Packet:
    packet = Packet(PacketType.PING)
    packet.write_uint32(time_ms())
    return packet


def create_pong_packet() -> Packet:
    packet = Packet(PacketType.PONG)
    packet.write_uint32(time_ms())
    return packet


def create_player_move_packet(move: PlayerMove) -> Packet:
    packet = Packet(PacketType.PLAYER_MOVE)
    move.write_to(packet)
    return packet


def create_chat_packet(chat: ChatMessage) -> Packet:
    packet = Packet(PacketType.CHAT_MESSAGE)
    chat.write_to(packet)
    return packet


def create_entity_update_packet(entity: EntityUpdate) -> Packet:
    packet = Packet(PacketType.ENTITY_UPDATE)
    entity.write_to(packet)
    return packet


def create_player_join_packet(join: PlayerJoin) -> Packet:
    packet = Packet(PacketType.PLAYER_JOIN)
    join.write_to(packet)
    return packet


def create_disconnect_packet(reason: str = "") -> Packet:
    packet = Packet(PacketType.DISCONNECT)
    packet.write_string(reason)
    return packet


def create_player_leave_packet(player_id: int) -> Packet:
    packet = Packet(PacketType.PLAYER_LEAVE)
    packet.write_uint32(player_id)
    return packet


def create_peer_id_assignment_packet(assigned_peer_id: int) -> Packet:
    packet = Packet(PacketType.PEER_ID_ASSIGNMENT)
    packet.write_uint32(assigned_peer_id)
    return packet