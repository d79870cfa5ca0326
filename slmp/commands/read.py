"""Request frames for the read commands."""

from __future__ import annotations

from typing import Sequence

from ..connection import ConnectionProps
from ..data import DataType
from ..device import AccessType, Device, DeviceBlock, MonitorList
from .frame import build_packet, div_ceil, subcommand_for

COMMAND_BULK_READ = 0x0401
COMMAND_RANDOM_READ = 0x0403
COMMAND_BLOCK_READ = 0x0406
COMMAND_REGISTER_MONITOR = 0x0801
COMMAND_READ_MONITOR = 0x0802


def _u8(value: int, name: str) -> bytes:
    if not 0 <= value <= 0xFF:
        raise ValueError(f"{name} {value} does not fit in 8 bits")
    return bytes([value])


def _u16(value: int, name: str) -> bytes:
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"{name} {value} does not fit in 16 bits")
    return value.to_bytes(2, "little")


def bulk_read_frame(
    props: ConnectionProps, start_device: Device, device_num: int, data_type: DataType
) -> bytes:
    """Frame reading device_num consecutive values of one type."""
    data_type = DataType(data_type)
    access_type = AccessType.BIT if data_type is DataType.BOOL else AccessType.WORD
    subcommand = subcommand_for(props.cpu, access_type)
    address = start_device.serialize(props.cpu)
    size = device_num * data_type.device_size().word_count()
    return build_packet(
        props, COMMAND_BULK_READ, subcommand, address + _u16(size, "device count")
    )


def _word_list_frame(props: ConnectionProps, command: int, monitor_list: MonitorList) -> bytes:
    subcommand = subcommand_for(props.cpu, AccessType.WORD)
    data = _u8(monitor_list.single_word_access_points, "single word points")
    data += _u8(monitor_list.double_word_access_points, "double word points")
    data += b"".join(
        typed.device.serialize(props.cpu) for _, typed in monitor_list.sorted_devices
    )
    return build_packet(props, command, subcommand, data)


def random_read_frame(props: ConnectionProps, monitor_list: MonitorList) -> bytes:
    """Frame reading the devices of a monitor list in one request."""
    return _word_list_frame(props, COMMAND_RANDOM_READ, monitor_list)


def block_read_frame(props: ConnectionProps, sorted_blocks: Sequence[DeviceBlock]) -> bytes:
    """Frame reading several device blocks; word blocks must come first."""
    subcommand = subcommand_for(props.cpu, AccessType.WORD)
    word_points = sum(1 for block in sorted_blocks if block.access_type is AccessType.WORD)
    bit_points = sum(1 for block in sorted_blocks if block.access_type is AccessType.BIT)
    data = _u8(word_points, "word access points") + _u8(bit_points, "bit access points")
    for block in sorted_blocks:
        if block.access_type is AccessType.WORD:
            request_size = block.size
        else:
            request_size = div_ceil(block.size, 8)
        data += block.start_device.serialize(props.cpu)
        data += _u16(request_size, "block size")
    return build_packet(props, COMMAND_BLOCK_READ, subcommand, data)


def monitor_register_frame(props: ConnectionProps, monitor_list: MonitorList) -> bytes:
    """Frame registering the devices of a monitor list on the server."""
    return _word_list_frame(props, COMMAND_REGISTER_MONITOR, monitor_list)


def monitor_read_frame(props: ConnectionProps) -> bytes:
    """Frame reading the currently registered monitor devices."""
    return build_packet(props, COMMAND_READ_MONITOR, 0x0000, b"")