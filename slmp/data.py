"""Typed values exchanged with PLC devices."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import Enum, IntEnum


class DeviceSize(Enum):
    """How much device memory one value occupies."""

    BIT = 1
    SINGLE_WORD = 2
    DOUBLE_WORD = 3
    QUADRUPLE_WORD = 4

    def word_count(self) -> int:
        """Number of device points the value spans."""
        return _WORD_COUNTS[self]


_WORD_COUNTS = {
    DeviceSize.BIT: 1,
    DeviceSize.SINGLE_WORD: 1,
    DeviceSize.DOUBLE_WORD: 2,
    DeviceSize.QUADRUPLE_WORD: 4,
}


class DataType(IntEnum):
    """Data types available for SLMP communication."""

    BOOL = 1
    U16 = 2
    I16 = 3
    U32 = 4
    I32 = 5
    F32 = 6
    F64 = 7

    def byte_size(self) -> int:
        """Size in bytes of a value of this type on the wire."""
        return _BYTE_SIZES[self]

    def device_size(self) -> DeviceSize:
        """Device memory footprint of a value of this type."""
        return _DEVICE_SIZES[self]


_BYTE_SIZES = {
    DataType.BOOL: 1,
    DataType.U16: 2,
    DataType.I16: 2,
    DataType.U32: 4,
    DataType.I32: 4,
    DataType.F32: 4,
    DataType.F64: 8,
}

_DEVICE_SIZES = {
    DataType.BOOL: DeviceSize.BIT,
    DataType.U16: DeviceSize.SINGLE_WORD,
    DataType.I16: DeviceSize.SINGLE_WORD,
    DataType.U32: DeviceSize.DOUBLE_WORD,
    DataType.I32: DeviceSize.DOUBLE_WORD,
    DataType.F32: DeviceSize.DOUBLE_WORD,
    DataType.F64: DeviceSize.QUADRUPLE_WORD,
}

_FORMATS = {
    DataType.U16: "<H",
    DataType.I16: "<h",
    DataType.U32: "<I",
    DataType.I32: "<i",
    DataType.F32: "<f",
    DataType.F64: "<d",
}

_INT_RANGES = {
    DataType.U16: (0, 0xFFFF),
    DataType.I16: (-0x8000, 0x7FFF),
    DataType.U32: (0, 0xFFFF_FFFF),
    DataType.I32: (-0x8000_0000, 0x7FFF_FFFF),
}


@dataclass(frozen=True)
class TypedData:
    """A value tagged with the data type it is sent or received as."""

    data_type: DataType
    value: bool | int | float

    def __post_init__(self) -> None:
        data_type = DataType(self.data_type)
        object.__setattr__(self, "data_type", data_type)
        value = self.value

        if data_type is DataType.BOOL:
            if not isinstance(value, bool):
                raise TypeError(f"BOOL value must be a bool, got {value!r}")
            return

        if isinstance(value, bool):
            raise TypeError(f"{data_type.name} value must not be a bool")

        if data_type in _INT_RANGES:
            if not isinstance(value, int):
                raise TypeError(f"{data_type.name} value must be an int, got {value!r}")
            low, high = _INT_RANGES[data_type]
            if not low <= value <= high:
                raise ValueError(f"{value} is out of range for {data_type.name}")
            return

        if not isinstance(value, (int, float)):
            raise TypeError(f"{data_type.name} value must be a number, got {value!r}")
        value = float(value)
        try:
            struct.pack(_FORMATS[data_type], value)
        except OverflowError as exc:
            raise ValueError(f"{value} is out of range for {data_type.name}") from exc
        object.__setattr__(self, "value", value)

    @classmethod
    def from_bytes(cls, data: bytes, data_type: DataType) -> TypedData:
        """Decode a little-endian value of the given type from the start of data."""
        data_type = DataType(data_type)
        raw = bytes(data)
        size = data_type.byte_size()
        if len(raw) < size:
            raise ValueError(
                f"{data_type.name} needs {size} bytes, got {len(raw)}"
            )
        if data_type is DataType.BOOL:
            return cls(data_type, raw[0] == 1)
        (value,) = struct.unpack_from(_FORMATS[data_type], raw)
        return cls(data_type, value)

    def to_bytes(self) -> bytes:
        """Encode the value as sent in write requests."""
        if self.data_type is DataType.BOOL:
            return b"\x01\x00" if self.value else b"\x00\x00"
        return struct.pack(_FORMATS[self.data_type], self.value)