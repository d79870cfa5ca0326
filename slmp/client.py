"""Asynchronous client for 4E-frame SLMP communication over TCP."""

from __future__ import annotations

import asyncio
import struct
from typing import Sequence

from .commands.frame import div_ceil, u8_to_bits
from .commands.read import (
    block_read_frame,
    bulk_read_frame,
    monitor_read_frame,
    monitor_register_frame,
    random_read_frame,
)
from .commands.write import block_write_frame, bulk_write_frame, random_write_frame
from .connection import ConnectionProps
from .data import DataType, TypedData
from .device import (
    AccessType,
    BlockedDeviceData,
    Device,
    DeviceBlock,
    DeviceData,
    MonitorList,
    TypedDevice,
)
from .errors import InvalidResponseError, SLMPResponseError

BUFSIZE = 1024
CONNECT_TIMEOUT = 1.0
DEFAULT_SEND_TIMEOUT = 1.0
DEFAULT_RECV_TIMEOUT = 1.0

_FIXED_FRAME_LEN = 13
_RECV_PREFIX_LEN = 15
_RESPONSE_SUBHEADER = b"\xd4\x00"
_WORD_BYTELEN = 2


class SLMPClient:
    """A single TCP connection to an SLMP server."""

    def __init__(self, connection_props: ConnectionProps) -> None:
        self.connection_props = connection_props
        self.send_timeout = DEFAULT_SEND_TIMEOUT
        self.recv_timeout = DEFAULT_RECV_TIMEOUT
        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None
        self._lock = asyncio.Lock()

    async def __aenter__(self) -> SLMPClient:
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @property
    def connected(self) -> bool:
        """Whether a connection is currently open."""
        return self._writer is not None

    def set_send_timeout(self, seconds: float) -> None:
        """Set the timeout for sending one request."""
        self.send_timeout = seconds

    def set_recv_timeout(self, seconds: float) -> None:
        """Set the timeout for receiving one response."""
        self.recv_timeout = seconds

    async def close(self) -> None:
        """Close the connection if one is open."""
        async with self._lock:
            writer, self._writer, self._reader = self._writer, None, None
            if writer is None:
                return
            writer.close()
            try:
                await writer.wait_closed()
            except OSError:
                pass

    async def connect(self) -> None:
        """Open a fresh connection, closing any previous one."""
        await self.close()
        props = self.connection_props
        try:
            reader, writer = await asyncio.wait_for(
                asyncio.open_connection(props.ip, props.port), CONNECT_TIMEOUT
            )
        except asyncio.TimeoutError:
            raise TimeoutError("Connect Failed (Timeout)") from None
        async with self._lock:
            self._reader, self._writer = reader, writer

    async def _request_response(self, message: bytes) -> bytes:
        async with self._lock:
            if self._writer is None or self._reader is None:
                raise ConnectionError("Not Connected")
            self._writer.write(message)
            try:
                await asyncio.wait_for(self._writer.drain(), self.send_timeout)
            except asyncio.TimeoutError:
                raise TimeoutError("Send Failed (Timeout)") from None
            try:
                received = await asyncio.wait_for(
                    self._reader.read(BUFSIZE), self.recv_timeout
                )
            except asyncio.TimeoutError:
                raise TimeoutError("Read Failed (Timeout)") from None
        self.validate_response(received)
        return received[_RECV_PREFIX_LEN:]

    def validate_response(self, data: bytes) -> None:
        """Check a response frame against the connection's routing fields."""
        raw = bytes(data)
        if len(raw) < _FIXED_FRAME_LEN:
            raise InvalidResponseError("Received Invalid Length Data")
        block_len = int.from_bytes(raw[11:13], "little")
        if block_len != len(raw) - _FIXED_FRAME_LEN:
            raise InvalidResponseError("Received Invalid Data Frame")
        if len(raw) < _RECV_PREFIX_LEN:
            raise InvalidResponseError("Received Invalid Length Data")

        end_code = int.from_bytes(raw[13:15], "little")
        if end_code != 0:
            raise SLMPResponseError(end_code)

        props = self.connection_props
        checks = (
            (raw[0:2], _RESPONSE_SUBHEADER, "Received Invalid Response Data"),
            (raw[2:4], struct.pack("<H", props.serial_id), "Received Invalid Serial ID"),
            (raw[4:6], b"\x00\x00", "Received Invalid Blank Code"),
            (raw[6:7], bytes([props.network_id]), "Received Invalid Network ID"),
            (raw[7:8], bytes([props.pc_id]), "Received Invalid PC ID"),
            (raw[8:10], struct.pack("<H", props.io_id), "Received Invalid IO ID"),
            (raw[10:11], bytes([props.area_id]), "Received Invalid Area ID"),
        )
        for actual, expected, message in checks:
            if actual != expected:
                raise InvalidResponseError(message)

    async def bulk_write(self, start_device: Device, data: Sequence[TypedData]) -> None:
        """Write consecutive values starting at start_device."""
        frame = bulk_write_frame(self.connection_props, start_device, data)
        await self._request_response(frame)

    async def random_write(self, data: Sequence[DeviceData]) -> None:
        """Write values to scattered devices; F64 values are skipped."""
        sorted_data = sorted(
            (entry for entry in data if entry.data.data_type is not DataType.F64),
            key=lambda entry: (entry.data.data_type, entry.device.address),
        )
        frame = random_write_frame(self.connection_props, sorted_data)
        await self._request_response(frame)

    async def block_write(self, data: Sequence[BlockedDeviceData]) -> None:
        """Write several blocks of consecutive devices."""
        sorted_data = sorted(data, key=lambda block: block.access_type)
        frame = block_write_frame(self.connection_props, sorted_data)
        await self._request_response(frame)

    async def bulk_read(
        self, start_device: Device, device_num: int, data_type: DataType
    ) -> list[DeviceData]:
        """Read device_num consecutive values of one type."""
        data_type = DataType(data_type)
        frame = bulk_read_frame(self.connection_props, start_device, device_num, data_type)
        received = await self._request_response(frame)
        device_type = start_device.device_type
        start = start_device.address

        if data_type is DataType.BOOL:
            flags = [
                flag
                for byte in received
                for flag in (bool((byte >> 4) & 0x01), bool(byte & 0x01))
            ][:device_num]
            return [
                DeviceData(Device(device_type, start + offset), TypedData(DataType.BOOL, flag))
                for offset, flag in enumerate(flags)
            ]

        chunk_size = data_type.byte_size()
        step = chunk_size // 2
        count = len(received) // chunk_size
        return [
            DeviceData(
                Device(device_type, start + step * index),
                TypedData.from_bytes(
                    received[index * chunk_size:(index + 1) * chunk_size], data_type
                ),
            )
            for index in range(count)
        ]

    async def random_read(self, devices: Sequence[TypedDevice]) -> list[DeviceData]:
        """Read scattered word devices; results follow the request order."""
        monitor_list = MonitorList.from_devices(devices)
        frame = random_read_frame(self.connection_props, monitor_list)
        received = await self._request_response(frame)
        return monitor_list.parse(received)

    async def block_read(self, device_blocks: Sequence[DeviceBlock]) -> list[DeviceData]:
        """Read several blocks; word blocks come first, each ordered by address."""
        sorted_blocks = sorted(
            device_blocks,
            key=lambda block: (block.access_type, block.start_device.address),
        )
        frame = block_read_frame(self.connection_props, sorted_blocks)
        received = await self._request_response(frame)

        result: list[DeviceData] = []
        offset = 0
        for block in sorted_blocks:
            device_type = block.start_device.device_type
            start = block.start_device.address
            if block.access_type is AccessType.WORD:
                length = _WORD_BYTELEN * block.size
            else:
                length = div_ceil(block.size, 8)
            chunk = received[offset:offset + length]
            if len(chunk) < length:
                raise InvalidResponseError("Received Invalid Length Data")
            offset += length

            if block.access_type is AccessType.WORD:
                result.extend(
                    DeviceData(
                        Device(device_type, start + index),
                        TypedData.from_bytes(
                            chunk[index * _WORD_BYTELEN:(index + 1) * _WORD_BYTELEN],
                            DataType.U16,
                        ),
                    )
                    for index in range(block.size)
                )
            else:
                flags = [flag for byte in chunk for flag in u8_to_bits(byte)][:block.size]
                result.extend(
                    DeviceData(Device(device_type, start + index), TypedData(DataType.BOOL, flag))
                    for index, flag in enumerate(flags)
                )
        return result

    async def monitor_register(self, devices: Sequence[TypedDevice]) -> MonitorList:
        """Register word devices for monitoring and return the resulting list."""
        monitor_list = MonitorList.from_devices(devices)
        frame = monitor_register_frame(self.connection_props, monitor_list)
        await self._request_response(frame)
        return monitor_list

    async def monitor_read(self, monitor_list: MonitorList) -> list[DeviceData]:
        """Read the registered monitor devices."""
        frame = monitor_read_frame(self.connection_props)
        received = await self._request_response(frame)
        return monitor_list.parse(received)