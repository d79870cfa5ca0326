"""Exceptions raised while building frames or talking to an SLMP server."""

_ERROR_NAMES = {
    0xC059: "WrongCommand",
    0xC05C: "WrongFormat",
    0xC061: "WrongLength",
    0xCEE0: "Busy",
    0xCEE1: "ExceedReqLength",
    0xCEE2: "ExceedRespLength",
    0xCF10: "ServerNotFound",
    0xCF20: "WrongConfigItem",
    0xCF30: "PrmIDNotFound",
    0xCF31: "NotStartExclusiveWrite",
    0xCF70: "RelayFailure",
    0xCF71: "TimeoutError",
}


def error_name(code: int) -> str:
    """Return the symbolic name of an SLMP end code."""
    return _ERROR_NAMES.get(code, "Unknown Error")


class SLMPError(Exception):
    """Base class for every error of this package."""


class UnsupportedCPUError(SLMPError):
    """The requested operation is not available for the selected CPU series."""

    def __init__(self, message: str = "Unsupported CPU") -> None:
        super().__init__(message)


class InvalidResponseError(SLMPError):
    """A response frame was malformed or did not match the request."""


class SLMPResponseError(InvalidResponseError):
    """The server answered with a non-zero end code."""

    def __init__(self, code: int) -> None:
        self.code = code
        self.name = error_name(code)
        super().__init__(f"SLMP Returns Error: {self.name} (0x{code:X})")