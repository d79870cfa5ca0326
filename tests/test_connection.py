import pytest

from slmp.connection import CPU, ConnectionProps


def make_props(**overrides):
    values = dict(
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
    values.update(overrides)
    return ConnectionProps(**values)


def test_header_layout():
    props = make_props(
        serial_id=0x1234,
        network_id=0x56,
        pc_id=0x78,
        io_id=0x9ABC,
        area_id=0xDE,
        cpu_timer=0x4321,
    )
    header = props.generate_header(0x0A0B)
    assert header == bytes(
        [0x54, 0x00, 0x34, 0x12, 0x00, 0x00, 0x56, 0x78,
         0xBC, 0x9A, 0xDE, 0x0B, 0x0A, 0x21, 0x43]
    )


def test_header_length_and_request_code():
    header = make_props().generate_header(6)
    assert len(header) == 15
    assert header[:2] == b"\x54\x00"
    assert header[11:13] == (6).to_bytes(2, "little")


def test_header_rejects_oversized_command_length():
    with pytest.raises(ValueError):
        make_props().generate_header(0x10000)


def test_socket_address_ipv4():
    assert make_props().socket_address() == ("192.168.3.10", 5007)


def test_socket_address_ipv6():
    assert make_props(ip="::1", port=1025).socket_address() == ("::1", 1025)


def test_socket_address_rejects_hostname():
    with pytest.raises(ValueError):
        make_props(ip="plc.example.com").socket_address()


@pytest.mark.parametrize(
    "field, value",
    [
        ("port", 70000),
        ("serial_id", -1),
        ("network_id", 256),
        ("pc_id", 300),
        ("io_id", 0x10000),
        ("area_id", 256),
        ("cpu_timer", 0x10000),
    ],
)
def test_out_of_range_fields(field, value):
    with pytest.raises(ValueError):
        make_props(**{field: value})


def test_cpu_given_as_string_is_normalised():
    assert make_props(cpu="Q").cpu is CPU.Q