import pytest

from slmp.errors import (
    InvalidResponseError,
    SLMPError,
    SLMPResponseError,
    UnsupportedCPUError,
    error_name,
)


@pytest.mark.parametrize(
    "code, name",
    [
        (0xC059, "WrongCommand"),
        (0xC05C, "WrongFormat"),
        (0xC061, "WrongLength"),
        (0xCEE0, "Busy"),
        (0xCEE1, "ExceedReqLength"),
        (0xCEE2, "ExceedRespLength"),
        (0xCF10, "ServerNotFound"),
        (0xCF20, "WrongConfigItem"),
        (0xCF30, "PrmIDNotFound"),
        (0xCF31, "NotStartExclusiveWrite"),
        (0xCF70, "RelayFailure"),
        (0xCF71, "TimeoutError"),
    ],
)
def test_error_name_known_codes(code, name):
    assert error_name(code) == name


def test_error_name_unknown_code():
    assert error_name(0x1234) == "Unknown Error"


def test_response_error_message_and_code():
    err = SLMPResponseError(0xCEE0)
    assert err.code == 0xCEE0
    assert err.name == "Busy"
    assert str(err) == "SLMP Returns Error: Busy (0xCEE0)"


def test_response_error_unknown_message():
    err = SLMPResponseError(0xABCD)
    assert str(err) == "SLMP Returns Error: Unknown Error (0xABCD)"


def test_response_error_caught_as_invalid_response():
    err = SLMPResponseError(0xC059)
    assert isinstance(err, InvalidResponseError)
    assert err.code == 0xC059
    assert err.name == "WrongCommand"
    assert str(err) == "SLMP Returns Error: WrongCommand (0xC059)"


def test_unsupported_cpu_caught_as_base():
    err = UnsupportedCPUError()
    assert isinstance(err, SLMPError)
    assert str(err) == "Unsupported CPU"


def test_unsupported_cpu_default_message():
    assert str(UnsupportedCPUError()) == "Unsupported CPU"