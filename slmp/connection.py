"""Connection parameters of a 4E-frame SLMP session."""

from __future__ import annotations

import ipaddress
import struct
from dataclasses import dataclass
from enum import Enum

_REQUEST_SUBHEADER = 0x0054
_HEADER = struct.Struct("<HHHBBHBHH")


class CPU(Enum):
    """PLC CPU series."""

    A = "A"
    Q = "Q"
    R = "R"
    F = "F"
    L = "L"


def _check_range(name: str, value: int, bits: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {value!r}")
    if not 0 <= value < (1 << bits):
        raise ValueError(f"{name} {value} does not fit in {bits} bits")


@dataclass(frozen=True)
class ConnectionProps:
    """Address and routing fields of a 4E-frame connection."""

    ip: str
    port: int
    cpu: CPU
    serial_id: int
    network_id: int
    pc_id: int
    io_id: int
    area_id: int
    cpu_timer: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "cpu", CPU(self.cpu))
        _check_range("port", self.port, 16)
        _check_range("serial_id", self.serial_id, 16)
        _check_range("network_id", self.network_id, 8)
        _check_range("pc_id", self.pc_id, 8)
        _check_range("io_id", self.io_id, 16)
        _check_range("area_id", self.area_id, 8)
        _check_range("cpu_timer", self.cpu_timer, 16)

    def generate_header(self, command_len: int) -> bytes:
        """Build the 15-byte request header including the CPU timer."""
        _check_range("command_len", command_len, 16)
        return _HEADER.pack(
            _REQUEST_SUBHEADER,
            self.serial_id,
            0,
            self.network_id,
            self.pc_id,
            self.io_id,
            self.area_id,
            command_len,
            self.cpu_timer,
        )

    def socket_address(self) -> tuple[str, int]:
        """Return the (ip, port) pair; the ip must be a literal address."""
        address = ipaddress.ip_address(self.ip)
        return str(address), self.port