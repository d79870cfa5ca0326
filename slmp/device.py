"""Device addressing and the containers used by read and write requests."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from itertools import chain
from operator import itemgetter
from typing import Iterable, Iterator, Sequence

from .connection import CPU
from .data import DataType, DeviceSize, TypedData
from .errors import InvalidResponseError, UnsupportedCPUError


class AccessType(IntEnum):
    """Whether a block is accessed in words or in bits; words sort first."""

    WORD = 1
    BIT = 2


class DeviceType(Enum):
    """Device types of Mitsubishi PLCs, valued by their SLMP code."""

    X = 0x9C
    Y = 0x9D
    M = 0x90
    L = 0x92
    F = 0x93
    V = 0x94
    B = 0xA0
    D = 0xA8
    W = 0xB4
    S = 0x98
    Z = 0xCC
    R = 0xAF
    TS = 0xC1
    TC = 0xC0
    TN = 0xC2
    SS = 0xC7
    SC = 0xC6
    SN = 0xC8
    CS = 0xC4
    CC = 0xC3
    CN = 0xC5
    SB = 0xA1
    SD = 0xA9
    SM = 0x91
    SW = 0xB5
    DX = 0xA2
    DY = 0xA3
    ZR = 0xB0

    def to_code(self) -> int:
        """The byte code identifying this device type on the wire."""
        return self.value


def addr_code_len(cpu: CPU) -> int:
    """Length in bytes of a serialized device address for the CPU series."""
    if cpu in (CPU.Q, CPU.L):
        return 4
    if cpu is CPU.R:
        return 6
    raise UnsupportedCPUError()


@dataclass(frozen=True, order=True)
class Device:
    """A pointer to one device point."""

    device_type: DeviceType
    address: int

    def __post_init__(self) -> None:
        if self.address < 0:
            raise ValueError(f"device address must be non-negative, got {self.address}")

    def serialize(self, cpu: CPU) -> bytes:
        """Encode the address and device code as used in requests."""
        address = (self.address & 0xFFFFFF).to_bytes(3, "little")
        code = self.device_type.to_code()
        if cpu in (CPU.Q, CPU.L):
            return address + bytes([code])
        if cpu is CPU.R:
            return address + bytes([0x00, code, 0x00])
        raise UnsupportedCPUError()


@dataclass(frozen=True)
class TypedDevice:
    """A device pointer annotated with the type its value is read as."""

    device: Device
    data_type: DataType


@dataclass(frozen=True)
class DeviceBlock:
    """A run of consecutive devices for a block read."""

    access_type: AccessType
    start_device: Device
    size: int


@dataclass(frozen=True)
class DeviceData:
    """The value held by one device."""

    device: Device
    data: TypedData


@dataclass(frozen=True)
class BlockedDeviceData:
    """A run of values starting at one device, for a block write."""

    access_type: AccessType
    start_device: Device
    data: Sequence[TypedData]

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", tuple(self.data))


def _chunks(data: bytes, size: int) -> Iterator[bytes]:
    for start in range(0, len(data) - size + 1, size):
        yield data[start:start + size]


@dataclass
class MonitorList:
    """Word devices ordered as the server expects, with their original positions."""

    sorted_devices: list[tuple[int, TypedDevice]] = field(default_factory=list)
    single_word_access_points: int = 0
    double_word_access_points: int = 0

    @classmethod
    def from_devices(cls, devices: Iterable[TypedDevice]) -> MonitorList:
        """Order word devices by data type, then address; bits and F64 are dropped."""
        selected = [
            (index, device)
            for index, device in enumerate(devices)
            if device.data_type not in (DataType.F64, DataType.BOOL)
        ]
        selected.sort(key=lambda item: (item[1].data_type, item[1].device.address))
        sizes = [device.data_type.device_size() for _, device in selected]
        return cls(
            sorted_devices=selected,
            single_word_access_points=sizes.count(DeviceSize.SINGLE_WORD),
            double_word_access_points=sizes.count(DeviceSize.DOUBLE_WORD),
        )

    def parse(self, data: bytes) -> list[DeviceData]:
        """Decode a random-read or monitor response into values in request order."""
        raw = bytes(data)
        split = self.single_word_access_points * 2
        if len(raw) < split:
            raise InvalidResponseError("Received Invalid Length Data")
        chunks = chain(_chunks(raw[:split], 2), _chunks(raw[split:], 4))
        decoded = [
            (index, DeviceData(device.device, TypedData.from_bytes(chunk, device.data_type)))
            for (index, device), chunk in zip(self.sorted_devices, chunks)
        ]
        decoded.sort(key=itemgetter(0))
        return [item for _, item in decoded]