# slmp

An asyncio client for the Seamless Message Protocol (SLMP), binary 4E frame, as spoken by
Mitsubishi MELSEC PLCs over TCP. Frames are built for Q, L and R series CPUs.

It supports:

- bulk (batch) read and write of bit and word devices
- random read and write of individual devices
- block read and write of several device ranges in one request
- monitor registration and monitor read

There are no runtime dependencies.

## Installation

```
pip install .
```

For development and tests:

```
pip install ".[test]"
pytest
```

## Usage

```python
import asyncio

from slmp.client import SLMPClient
from slmp.connection import CPU, ConnectionProps
from slmp.data import DataType, TypedData
from slmp.device import (
    AccessType,
    BlockedDeviceData,
    Device,
    DeviceBlock,
    DeviceData,
    DeviceType,
    TypedDevice,
)


async def main():
    props = ConnectionProps(
        ip="192.0.2.10",
        port=5007,
        cpu=CPU.R,
        serial_id=0x0001,
        network_id=0x00,
        pc_id=0xFF,
        io_id=0x03FF,
        area_id=0x00,
        cpu_timer=0x0010,
    )

    async with SLMPClient(props) as client:
        # Bulk access: consecutive devices of one type.
        start = Device(DeviceType.D, 4000)
        await client.bulk_write(
            start, [TypedData(DataType.U16, 10), TypedData(DataType.U16, 20)]
        )
        for item in await client.bulk_read(start, 2, DataType.U16):
            print(item)

        # Random access: scattered devices.
        await client.random_write([
            DeviceData(Device(DeviceType.D, 20), TypedData(DataType.I16, -40)),
            DeviceData(Device(DeviceType.D, 30), TypedData(DataType.U32, 80000)),
        ])
        devices = [
            TypedDevice(Device(DeviceType.D, 20), DataType.I16),
            TypedDevice(Device(DeviceType.D, 30), DataType.U32),
        ]
        print(await client.random_read(devices))

        # Block access: several ranges in one request.
        await client.block_write([
            BlockedDeviceData(AccessType.BIT, Device(DeviceType.M, 0),
                              [TypedData(DataType.BOOL, True), TypedData(DataType.BOOL, False)]),
        ])
        print(await client.block_read([
            DeviceBlock(AccessType.BIT, Device(DeviceType.M, 0), 2),
        ]))

        # Monitor: register once, read repeatedly.
        monitor_list = await client.monitor_register(devices)
        await asyncio.sleep(0.1)
        for item in await client.monitor_read(monitor_list):
            print(item)


asyncio.run(main())
```

### Modules

- `slmp.client`: `SLMPClient`, the asynchronous TCP client. Use it as an async context
  manager, or call `connect()` and `close()` yourself; `connected` tells whether a
  connection is open. `validate_response()` checks a raw response frame against the
  connection's routing fields.
- `slmp.connection`: `CPU` (series `A`, `Q`, `R`, `F`, `L`) and the frozen
  `ConnectionProps`, which validates field ranges and builds the 15-byte request header
  with `generate_header()`.
- `slmp.data`: `DataType` (`BOOL`, `U16`, `I16`, `U32`, `I32`, `F32`, `F64`), `DeviceSize`,
  and `TypedData`, a value tagged with its type. `TypedData` checks the value against the
  type's range and converts with `from_bytes()` / `to_bytes()` (little-endian).
- `slmp.device`: `DeviceType` (valued by its SLMP device code), `Device`, `TypedDevice`,
  `DeviceBlock`, `DeviceData`, `BlockedDeviceData`, `AccessType`, `addr_code_len()` and
  `MonitorList`.
- `slmp.commands.frame`, `slmp.commands.read`, `slmp.commands.write`: pure functions that
  build request frames as `bytes` (`bulk_read_frame`, `random_read_frame`,
  `block_read_frame`, `monitor_register_frame`, `monitor_read_frame`, `bulk_write_frame`,
  `random_write_frame`, `block_write_frame`), usable without a network connection.

### Behaviour worth knowing

- Every read returns a list of `DeviceData`, each pairing a `Device` with the
  `TypedData` read from it.
- `random_read`, `monitor_register` and `monitor_read` only handle word-sized types
  (`U16`, `I16`, `U32`, `I32`, `F32`); `BOOL` and `F64` devices are dropped from the
  request. Results come back in the order the remaining devices were requested.
- `random_write` skips `F64` values. If every value is a `BOOL`, the bit form of the
  command is used; otherwise every value must be a one- or two-word type.
- `bulk_write` uses bit access when every value is a `BOOL`, word access otherwise.
- `block_read` returns word blocks before bit blocks, each group ordered by start
  address; word blocks are read as `U16`.

## Errors

Protocol and framing failures raise subclasses of `slmp.errors.SLMPError`:

- `UnsupportedCPUError`: the CPU series has no frame encoding (only Q, L and R do)
- `InvalidResponseError`: the PLC's reply is malformed or does not match the request header
- `SLMPResponseError`: the PLC answered with a non-zero end code; `code` and `name` are
  kept on the exception (`slmp.errors.error_name()` maps a code to its name)

Invalid values (out of range for their type or field) raise `ValueError` or `TypeError`.
A request on a client that is not connected raises `ConnectionError`; timeouts raise
`TimeoutError`. Timeouts default to one second for connecting, sending and receiving;
change the send and receive timeouts (in seconds) with `set_send_timeout` and
`set_recv_timeout`.

## What it does not do

- There is no connection manager or background task that polls devices cyclically
  across several PLCs; run your own loop around `monitor_read` for that.
- Only the 4E binary frame over TCP is implemented; there is no 3E frame, ASCII mode
  or UDP transport.
- There is no command-line tool; the package is a library.