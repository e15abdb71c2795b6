import pytest

from paqnet.protocol import (
    HEADER_SIZE,
    OpCode,
    Packet,
    decode_message,
    decode_values,
    encode_message,
    serialize,
)


def test_opcode_values_match_wire():
    assert serialize(OpCode.MESSAGE, b"") == b"\x00\x00\x00\x00\x00\x00\x00\x00"
    assert serialize(OpCode.PACKAGE, b"") == b"\x01\x00\x00\x00\x00\x00\x00\x00"


def test_encode_message_wire_bytes():
    assert encode_message("hola") == b"\x00\x00\x00\x00\x05\x00\x00\x00hola\x00"


def test_packet_wire_bytes():
    packet = Packet()
    packet.add("a")
    assert packet.serialize() == b"\x01\x00\x00\x00\x06\x00\x00\x00\x02\x00\x00\x00a\x00"


def test_serialize_header_and_payload():
    frame = serialize(OpCode.PACKAGE, b"xyz")
    assert frame[HEADER_SIZE:] == b"xyz"
    assert len(frame) == HEADER_SIZE + 3


def test_message_round_trip():
    frame = encode_message("buenas tardes")
    assert decode_message(frame[HEADER_SIZE:]) == "buenas tardes"


def test_packet_round_trip():
    packet = Packet()
    for value in ["uno", "dos", "tres"]:
        packet.add(value)
    assert decode_values(packet.payload) == ["uno", "dos", "tres"]


def test_packet_round_trip_bytes_values():
    packet = Packet()
    packet.add(b"raw")
    packet.add("text")
    assert decode_values(packet.payload) == ["raw", "text"]


def test_empty_packet_has_no_values():
    packet = Packet()
    assert decode_values(packet.payload) == []
    assert packet.serialize()[HEADER_SIZE:] == b""


def test_decode_values_truncated_size():
    with pytest.raises(ValueError):
        decode_values(b"\x01\x00")


def test_decode_values_overrun():
    packet = Packet()
    packet.add("abc")
    with pytest.raises(ValueError):
        decode_values(bytes(packet.payload[:-1]))


def test_decode_values_negative_size():
    with pytest.raises(ValueError):
        decode_values(b"\xff\xff\xff\xff")