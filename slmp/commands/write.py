"""Request frames for the write commands."""

from __future__ import annotations

from typing import Iterable, Sequence

from ..connection import CPU, ConnectionProps
from ..data import DataType, DeviceSize, TypedData
from ..device import AccessType, BlockedDeviceData, Device, DeviceData, addr_code_len
from .frame import bits_to_u8, build_packet, div_ceil, subcommand_for

COMMAND_BULK_WRITE = 0x1401
COMMAND_RANDOM_WRITE = 0x1402
COMMAND_BLOCK_WRITE = 0x1406

_BYTE_BITS = 8
_WORD_BITS = 16


def _u8(value: int, name: str) -> bytes:
    if not 0 <= value <= 0xFF:
        raise ValueError(f"{name} {value} does not fit in 8 bits")
    return bytes([value])


def _u16(value: int, name: str) -> bytes:
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"{name} {value} does not fit in 16 bits")
    return value.to_bytes(2, "little")


def _is_bool(value: TypedData) -> bool:
    return value.data_type is DataType.BOOL


def _flag(value: TypedData) -> bool:
    return _is_bool(value) and bool(value.value)


def _word_code(values: Iterable[TypedData]) -> bytes:
    return b"".join(value.to_bytes() for value in values)


def bulk_write_frame(
    props: ConnectionProps, start_device: Device, data: Sequence[TypedData]
) -> bytes:
    """Frame writing consecutive values starting at start_device.

    Bit access is used when every value is a BOOL, word access otherwise.
    """
    values = tuple(data)
    access_type = AccessType.BIT if all(map(_is_bool, values)) else AccessType.WORD
    subcommand = subcommand_for(props.cpu, access_type)
    body = start_device.serialize(props.cpu)

    if access_type is AccessType.WORD:
        code = _word_code(values)
        body += _u16(len(code) // 2, "word count") + code
    else:
        flags = [_flag(value) for value in values]
        if len(flags) % 2:
            flags.append(False)
        code = bytes(
            (int(high) << 4) | int(low) for high, low in zip(flags[::2], flags[1::2])
        )
        body += _u16(len(values), "bit count") + code

    return build_packet(props, COMMAND_BULK_WRITE, subcommand, body)


def random_write_frame(props: ConnectionProps, sorted_data: Sequence[DeviceData]) -> bytes:
    """Frame writing values to scattered devices.

    When every value is a BOOL the bit form is used; otherwise every value
    must occupy one or two words, single words expected first.
    """
    entries = tuple(sorted_data)
    addr_code_len(props.cpu)
    access_type = (
        AccessType.BIT if all(_is_bool(entry.data) for entry in entries) else AccessType.WORD
    )
    subcommand = subcommand_for(props.cpu, access_type)

    if access_type is AccessType.BIT:
        padding = b"\x00" if props.cpu is CPU.R else b""
        body = _u8(len(entries), "bit access points") + b"".join(
            entry.device.serialize(props.cpu) + bytes([int(_flag(entry.data))]) + padding
            for entry in entries
        )
        return build_packet(props, COMMAND_RANDOM_WRITE, subcommand, body)

    sizes = []
    for entry in entries:
        size = entry.data.data_type.device_size()
        if size not in (DeviceSize.SINGLE_WORD, DeviceSize.DOUBLE_WORD):
            raise ValueError(
                f"{entry.data.data_type.name} cannot be written by a word random write"
            )
        sizes.append(size)

    body = _u8(sizes.count(DeviceSize.SINGLE_WORD), "single word access points")
    body += _u8(sizes.count(DeviceSize.DOUBLE_WORD), "double word access points")
    body += b"".join(
        entry.device.serialize(props.cpu) + entry.data.to_bytes() for entry in entries
    )
    return build_packet(props, COMMAND_RANDOM_WRITE, subcommand, body)


def _bit_block_code(values: Sequence[TypedData]) -> tuple[int, bytes]:
    word_size = div_ceil(len(values), _WORD_BITS)
    flags = [_flag(value) for value in values]
    flags.extend([False] * (word_size * _WORD_BITS - len(flags)))
    code = bytes(
        bits_to_u8(flags[start:start + _BYTE_BITS])
        for start in range(0, len(flags), _BYTE_BITS)
    )
    return word_size, code


def block_write_frame(
    props: ConnectionProps, sorted_data: Sequence[BlockedDeviceData]
) -> bytes:
    """Frame writing several device blocks; word blocks must come first."""
    blocks = tuple(sorted_data)
    subcommand = subcommand_for(props.cpu, AccessType.WORD)
    word_points = sum(1 for block in blocks if block.access_type is AccessType.WORD)
    bit_points = sum(1 for block in blocks if block.access_type is AccessType.BIT)

    body = _u8(word_points, "word access points") + _u8(bit_points, "bit access points")
    for block in blocks:
        body += block.start_device.serialize(props.cpu)
        if block.access_type is AccessType.WORD:
            code = _word_code(block.data)
            body += _u16(len(code) // 2, "word count") + code
        else:
            word_size, code = _bit_block_code(block.data)
            body += _u16(word_size, "word count") + code

    return build_packet(props, COMMAND_BLOCK_WRITE, subcommand, body)