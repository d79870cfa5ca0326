import dataclasses

import pytest

from slmp.commands.frame import (
    bits_to_u8,
    build_packet,
    div_ceil,
    subcommand_for,
    u8_to_bits,
)
from slmp.connection import CPU, ConnectionProps
from slmp.device import AccessType
from slmp.errors import UnsupportedCPUError


@pytest.fixture
def props():
    return ConnectionProps(
        ip="192.168.3.10",
        port=5007,
        cpu=CPU.R,
        serial_id=0x0001,
        network_id=0x00,
        pc_id=0xFF,
        io_id=0x03FF,
        area_id=0x00,
        cpu_timer=0x0010,
    )


def test_build_packet_layout(props):
    data = b"\x10\x20\x30"
    packet = build_packet(props, 0x0401, 0x0002, data)
    assert len(packet) == 15 + 4 + len(data)
    assert packet[:15] == props.generate_header(6 + len(data))
    assert packet[15:17] == (0x0401).to_bytes(2, "little")
    assert packet[17:19] == (0x0002).to_bytes(2, "little")
    assert packet[19:] == data


def test_build_packet_starts_with_request_code(props):
    packet = build_packet(props, 0x0802, 0x0000, b"")
    assert packet[:2] == b"\x54\x00"
    assert int.from_bytes(packet[11:13], "little") == len(packet) - 13


def test_build_packet_empty_data_length(props):
    packet = build_packet(props, 0x0802, 0x0000, b"")
    assert len(packet) == 19
    assert packet[19:] == b""


@pytest.mark.parametrize(
    "cpu, access_type, expected",
    [
        (CPU.Q, AccessType.BIT, 0x0001),
        (CPU.L, AccessType.BIT, 0x0001),
        (CPU.R, AccessType.BIT, 0x0003),
        (CPU.Q, AccessType.WORD, 0x0000),
        (CPU.L, AccessType.WORD, 0x0000),
        (CPU.R, AccessType.WORD, 0x0002),
    ],
)
def test_subcommand_for(cpu, access_type, expected):
    assert subcommand_for(cpu, access_type) == expected


@pytest.mark.parametrize("cpu", [CPU.A, CPU.F])
@pytest.mark.parametrize("access_type", [AccessType.BIT, AccessType.WORD])
def test_subcommand_for_unsupported(cpu, access_type):
    with pytest.raises(UnsupportedCPUError):
        subcommand_for(cpu, access_type)


@pytest.mark.parametrize("b", [1, 2, 8, 16])
def test_div_ceil_bounds(b):
    for a in range(0, 70):
        q = div_ceil(a, b)
        assert q * b >= a
        assert (q - 1) * b < a or a == 0


@pytest.mark.parametrize("k", [0, 1, 5])
def test_div_ceil_exact_multiple(k):
    assert div_ceil(k * 8, 8) == k


def test_bits_round_trip():
    for n in range(256):
        assert bits_to_u8(u8_to_bits(n)) == n


def test_u8_to_bits_order_is_lsb_first():
    assert u8_to_bits(1) == (True,) + (False,) * 7
    assert u8_to_bits(0x80) == (False,) * 7 + (True,)


def test_u8_to_bits_rejects_out_of_range():
    with pytest.raises(ValueError):
        u8_to_bits(256)


def test_bits_to_u8_rejects_wrong_length():
    with pytest.raises(ValueError):
        bits_to_u8([True, False])


def test_build_packet_uses_props_fields(props):
    other = dataclasses.replace(props, serial_id=0x1234)
    packet = build_packet(other, 0x0401, 0x0000, b"")
    assert packet[2:4] == (0x1234).to_bytes(2, "little")