"""Common layout of 4E-frame request packets and small bit helpers."""

from __future__ import annotations

from typing import Iterable

from ..connection import CPU, ConnectionProps
from ..device import AccessType
from ..errors import UnsupportedCPUError

HEADER_BYTELEN = 13
CPUTIMER_BYTELEN = 2
COMMAND_BYTELEN = 4
COMMAND_PREFIX_BYTELEN = CPUTIMER_BYTELEN + COMMAND_BYTELEN

_SUBCOMMANDS = {
    (AccessType.BIT, CPU.Q): 0x0001,
    (AccessType.BIT, CPU.L): 0x0001,
    (AccessType.BIT, CPU.R): 0x0003,
    (AccessType.WORD, CPU.Q): 0x0000,
    (AccessType.WORD, CPU.L): 0x0000,
    (AccessType.WORD, CPU.R): 0x0002,
}


def _u16(value: int, name: str) -> bytes:
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"{name} {value} does not fit in 16 bits")
    return value.to_bytes(2, "little")


def build_packet(
    props: ConnectionProps, command: int, subcommand: int, data: bytes
) -> bytes:
    """Assemble header, command, subcommand and request data into one packet."""
    body = bytes(data)
    command_len = COMMAND_PREFIX_BYTELEN + len(body)
    header = props.generate_header(command_len)
    return (
        header
        + _u16(command, "command")
        + _u16(subcommand, "subcommand")
        + body
    )


def subcommand_for(cpu: CPU, access_type: AccessType) -> int:
    """Subcommand selecting bit or word access for the given CPU series."""
    try:
        return _SUBCOMMANDS[(AccessType(access_type), cpu)]
    except KeyError:
        raise UnsupportedCPUError() from None


def div_ceil(a: int, b: int) -> int:
    """Integer division rounding up."""
    return -(-a // b)


def u8_to_bits(n: int) -> tuple[bool, ...]:
    """Split a byte into eight flags, least significant bit first."""
    if not 0 <= n <= 0xFF:
        raise ValueError(f"{n} is not a byte value")
    return tuple(bool((n >> shift) & 1) for shift in range(8))


def bits_to_u8(bits: Iterable[bool]) -> int:
    """Pack eight flags, least significant bit first, into a byte."""
    flags = tuple(bits)
    if len(flags) != 8:
        raise ValueError(f"expected 8 bits, got {len(flags)}")
    return sum(1 << shift for shift, flag in enumerate(flags) if flag)